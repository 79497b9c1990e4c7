import click

from hotelsite import db
from hotelsite.auth import hash_password
from hotelsite.models import ROLES, Hotel, Room, User

DEMO_USERS = [
    {'email': 'superadmin@hotels.com', 'password': 'superadmin123', 'name': 'Super Admin', 'role': 'super-admin'},
    {'email': 'admin@hotels.com', 'password': 'admin123', 'name': 'Admin User', 'role': 'admin'},
    {'email': 'user@example.com', 'password': 'password123', 'name': 'John Doe', 'role': 'user'},
]

DEMO_HOTELS = [
    {
        'name': 'Luxury Palace Hotel', 'name_ar': 'فندق القصر الفاخر',
        'location': 'Riyadh', 'location_ar': 'الرياض',
        'description': 'Five-star stay in the heart of Riyadh.',
        'description_ar': 'إقامة خمس نجوم في قلب الرياض.',
        'rating': 4.8, 'reviews': 342, 'featured': True,
        'amenities': ['WiFi', 'Pool', 'Spa'], 'amenities_ar': ['واي فاي', 'مسبح', 'سبا'],
        'rooms': [('standard', 450, 10), ('suite', 900, 3)],
    },
    {
        'name': 'Grand Oasis Resort', 'name_ar': 'منتجع الواحة الكبرى',
        'location': 'Jeddah', 'location_ar': 'جدة',
        'description': 'Beachfront resort on the Red Sea.',
        'description_ar': 'منتجع على شاطئ البحر الأحمر.',
        'rating': 4.6, 'reviews': 289, 'featured': True,
        'amenities': ['WiFi', 'Beach'], 'amenities_ar': ['واي فاي', 'شاطئ'],
        'rooms': [('deluxe', 380, 8)],
    },
    {
        'name': 'Desert Sands Hotel', 'name_ar': 'فندق رمال الصحراء',
        'location': 'AlUla', 'location_ar': 'العلا',
        'description': 'Boutique hotel among the AlUla rock formations.',
        'description_ar': 'فندق بوتيك بين تكوينات العلا الصخرية.',
        'rating': 4.7, 'reviews': 198, 'featured': False,
        'amenities': ['WiFi', 'Desert tours'], 'amenities_ar': ['واي فاي', 'جولات صحراوية'],
        'rooms': [('standard', 420, 5), ('family', 610, 2)],
    },
]


def register_commands(app):

    @app.cli.command('seed-db')
    def seed_db():
        """Insert demo users, hotels and rooms if missing."""
        for data in DEMO_USERS:
            if not User.query.filter_by(email=data['email']).first():
                db.session.add(User(
                    email=data['email'],
                    name=data['name'],
                    role=data['role'],
                    password=hash_password(data['password']),
                ))

        for data in DEMO_HOTELS:
            if Hotel.query.filter_by(name=data['name']).first():
                continue
            fields = {key: value for key, value in data.items() if key != 'rooms'}
            hotel = Hotel(published=True, **fields)
            hotel.rooms = [
                Room(type=room_type, price=price, available=available, currency='SAR')
                for room_type, price, available in data['rooms']
            ]
            db.session.add(hotel)

        db.session.commit()
        click.echo('Seeded demo users and hotels.')

    @app.cli.command('create-user')
    @click.argument('email')
    @click.argument('password')
    @click.option('--name', default='Administrator')
    @click.option('--role', type=click.Choice(ROLES), default='super-admin')
    def create_user(email, password, name, role):
        """Create an account, typically the first super-admin."""
        email = email.strip().lower()
        if User.query.filter_by(email=email).first():
            raise click.ClickException(f'{email} already exists')
        db.session.add(User(email=email, name=name, role=role, password=hash_password(password)))
        db.session.commit()
        click.echo(f'Created {role} {email}')
