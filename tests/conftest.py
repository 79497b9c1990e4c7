# tests/conftest.py

import pytest

from hotelsite import create_app, db
from hotelsite.auth import hash_password, issue_token
from hotelsite.models import Hotel, Room, User


@pytest.fixture
def app(tmp_path):
    """App on a throwaway SQLite file, one per test."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
        'JWT_SECRET_KEY': 'test-secret-key-with-enough-length-for-hs256',
        'BCRYPT_ROUNDS': 4,
        'S3_BUCKET': 'test-bucket',
        'S3_PUBLIC_URL': 'https://storage.test',
    })
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(email='user@example.com', password='password123', role='user', name='Test User'):
        user = User(email=email, name=name, role=role, password=hash_password(password))
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user):
        return {'Authorization': f'Bearer {issue_token(user)}'}
    return _auth_headers


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(email='admin@hotels.com', role='admin', name='Admin User')


@pytest.fixture
def super_admin(make_user):
    return make_user(email='root@hotels.com', role='super-admin', name='Root')


@pytest.fixture
def make_hotel(app):
    def _make_hotel(name='Luxury Palace Hotel', name_ar='فندق القصر الفاخر',
                    location='Riyadh', location_ar='الرياض', rooms=(), **extra):
        hotel = Hotel(
            name=name,
            name_ar=name_ar,
            location=location,
            location_ar=location_ar,
            description=f'{name} description',
            description_ar='وصف',
            **extra,
        )
        hotel.rooms = [
            Room(type=room_type, price=price, available=available)
            for room_type, price, available in rooms
        ]
        db.session.add(hotel)
        db.session.commit()
        return hotel
    return _make_hotel
