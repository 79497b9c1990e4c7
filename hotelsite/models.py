# hotelsite/models.py
import datetime

from hotelsite import db

ROLES = ('user', 'admin', 'super-admin')
BOOKING_STATUSES = ('pending', 'confirmed', 'cancelled', 'completed')


def utcnow():
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class User(TimestampMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)  # hash bcrypt
    name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50))
    role = db.Column(db.Enum(*ROLES, name='user_role'), nullable=False, default='user')
    image = db.Column(db.Text)

    bookings = db.relationship('Booking', back_populates='user', cascade='all, delete-orphan')
    activities = db.relationship('ActivityLog', back_populates='user', cascade='all, delete-orphan')
    blogs = db.relationship('BlogPost', back_populates='author', cascade='all, delete-orphan')


class Hotel(TimestampMixin, db.Model):
    __tablename__ = 'hotels'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    name_ar = db.Column(db.String(255), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    location_ar = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    description_ar = db.Column(db.Text, nullable=False)
    rating = db.Column(db.Numeric(2, 1), nullable=False, default=0)
    reviews = db.Column(db.Integer, nullable=False, default=0)
    main_image = db.Column(db.Text)
    images = db.Column(db.JSON, default=list)
    amenities = db.Column(db.JSON, default=list)
    amenities_ar = db.Column(db.JSON, default=list)
    published = db.Column(db.Boolean, nullable=False, default=False)
    featured = db.Column(db.Boolean, nullable=False, default=False)

    rooms = db.relationship(
        'Room', back_populates='hotel', cascade='all, delete-orphan', order_by='Room.id'
    )


class Room(TimestampMixin, db.Model):
    __tablename__ = 'rooms'

    id = db.Column(db.Integer, primary_key=True)
    hotel_id = db.Column(db.Integer, db.ForeignKey('hotels.id', ondelete='CASCADE'), nullable=False)
    type = db.Column(db.String(100), nullable=False)
    type_ar = db.Column(db.String(100))
    price = db.Column(db.Numeric(10, 2), nullable=False)
    currency = db.Column(db.String(10), nullable=False, default='SAR')
    available = db.Column(db.Integer, nullable=False, default=0)
    max_guests = db.Column(db.Integer, nullable=False, default=2)
    description = db.Column(db.Text)
    description_ar = db.Column(db.Text)
    images = db.Column(db.JSON, default=list)
    amenities = db.Column(db.JSON, default=list)

    hotel = db.relationship('Hotel', back_populates='rooms')


class Booking(TimestampMixin, db.Model):
    __tablename__ = 'bookings'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    hotel_id = db.Column(db.Integer, db.ForeignKey('hotels.id', ondelete='RESTRICT'), nullable=False)
    room_id = db.Column(db.Integer, db.ForeignKey('rooms.id', ondelete='RESTRICT'), nullable=False)
    check_in = db.Column(db.DateTime, nullable=False)
    check_out = db.Column(db.DateTime, nullable=False)
    guests = db.Column(db.Integer, nullable=False)
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)
    confirmation_number = db.Column(db.String(50), unique=True, nullable=False)
    status = db.Column(
        db.Enum(*BOOKING_STATUSES, name='booking_status'), nullable=False, default='confirmed'
    )

    user = db.relationship('User', back_populates='bookings')
    hotel = db.relationship('Hotel')
    room = db.relationship('Room')


class ActivityLog(db.Model):
    __tablename__ = 'user_activities'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    action = db.Column(db.String(100), nullable=False)
    details = db.Column(db.JSON, default=dict)
    ip_address = db.Column(db.String(45))
    user_agent = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    user = db.relationship('User', back_populates='activities')


class BlogPost(TimestampMixin, db.Model):
    __tablename__ = 'blogs'

    id = db.Column(db.Integer, primary_key=True)
    author_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    language_code = db.Column(db.String(2), nullable=False, default='en')
    title = db.Column(db.String(500), nullable=False)
    title_ar = db.Column(db.String(500))
    excerpt = db.Column(db.Text, nullable=False, default='')
    excerpt_ar = db.Column(db.Text)
    content = db.Column(db.JSON, nullable=False, default=list)  # bloques ordenados
    content_ar = db.Column(db.JSON)
    category = db.Column(db.String(100), nullable=False)
    tags = db.Column(db.JSON, default=list)
    cover_image = db.Column(db.Text)
    read_time = db.Column(db.String(50), default='5 min read')
    published = db.Column(db.Boolean, nullable=False, default=False)
    published_at = db.Column(db.DateTime)
    meta_description = db.Column(db.Text)
    meta_keywords = db.Column(db.Text)

    author = db.relationship('User', back_populates='blogs')


class ContactMessage(db.Model):
    __tablename__ = 'contact_messages'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='received')
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)


class NewsletterSubscriber(db.Model):
    __tablename__ = 'newsletter_subscribers'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='active')
    subscribed_at = db.Column(db.DateTime, nullable=False, default=utcnow)
