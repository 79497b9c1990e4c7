"""Booking creation.

A booking consumes one unit of the room's ``available`` count. The decrement
is conditional (``available > 0``) and shares the transaction with the
insert, so two requests racing for the last unit cannot both succeed.
"""
import datetime
import logging
import math
import re
import secrets
import string
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from hotelsite import db
from hotelsite.activity import ActivityActions, log_activity
from hotelsite.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from hotelsite.models import Booking, Room, User

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    'hotelId',
    'roomId',
    'checkIn',
    'checkOut',
    'guests',
    'fullName',
    'email',
    'phone',
)

CONFIRMATION_PREFIX = 'CNF-'
CONFIRMATION_ALPHABET = string.ascii_uppercase + string.digits
CONFIRMATION_LENGTH = 8
CONFIRMATION_PATTERN = re.compile(r'^CNF-[A-Z0-9]{8}$')
MAX_CODE_ATTEMPTS = 5

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def missing_fields(data, fields=REQUIRED_FIELDS):
    return [field for field in fields if data.get(field) in (None, '', [], {})]


def parse_datetime(value, field):
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be an ISO date')
    try:
        parsed = datetime.datetime.fromisoformat(value.replace('Z', ''))
    except ValueError:
        raise ValidationError(f'{field} must be an ISO date')
    if parsed.tzinfo is not None:
        # se guarda en UTC sin zona
        parsed = parsed.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return parsed


def parse_positive_int(value, field):
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a positive integer')
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be a positive integer')
    if number < 1 or str(number) != str(value).strip():
        raise ValidationError(f'{field} must be a positive integer')
    return number


def count_nights(check_in, check_out):
    """Whole nights between two instants, any partial day counting as a night."""
    return math.ceil((check_out - check_in).total_seconds() / 86400)


def stay_price(nightly_rate, nights):
    return (Decimal(nightly_rate) * nights).quantize(Decimal('0.01'))


def generate_confirmation_number():
    token = ''.join(secrets.choice(CONFIRMATION_ALPHABET) for _ in range(CONFIRMATION_LENGTH))
    return CONFIRMATION_PREFIX + token


def validate_booking_request(data):
    """Check presence and shape of the request; returns normalised values."""
    missing = missing_fields(data)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    check_in = parse_datetime(data['checkIn'], 'checkIn')
    check_out = parse_datetime(data['checkOut'], 'checkOut')
    # Validacion de fechas
    if check_out <= check_in:
        raise ValidationError('checkOut must be after checkIn')

    email = str(data['email']).strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError('Invalid email format')

    return {
        'hotel_id': parse_positive_int(data['hotelId'], 'hotelId'),
        'room_id': parse_positive_int(data['roomId'], 'roomId'),
        'check_in': check_in,
        'check_out': check_out,
        'guests': parse_positive_int(data['guests'], 'guests'),
        'full_name': str(data['fullName']).strip(),
        'email': email,
        'phone': str(data['phone']).strip(),
    }


def _reserve_unit(room_id):
    """Decrement availability if any is left. Returns False when sold out."""
    updated = (
        Room.query
        .filter(Room.id == room_id, Room.available > 0)
        .update({Room.available: Room.available - 1}, synchronize_session=False)
    )
    return updated == 1


def create_booking(user_id, data):
    """Validate, price and persist a booking for ``user_id``."""
    fields = validate_booking_request(data)
    if not db.session.get(User, user_id):
        raise AuthenticationError('User no longer exists')

    room = db.session.get(Room, fields['room_id'])
    if not room:
        raise NotFoundError('Room not found')
    if room.hotel_id != fields['hotel_id']:
        raise ValidationError('Room does not belong to the selected hotel')
    if room.available <= 0:
        raise ConflictError('No availability for the selected room')

    nights = count_nights(fields['check_in'], fields['check_out'])
    total_price = stay_price(room.price, nights)
    room_id = room.id

    for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
        if not _reserve_unit(room_id):
            db.session.rollback()
            raise ConflictError('No availability for the selected room')

        booking = Booking(
            user_id=user_id,
            total_price=total_price,
            confirmation_number=generate_confirmation_number(),
            status='confirmed',
            **fields,
        )
        db.session.add(booking)
        try:
            db.session.commit()
            break
        except IntegrityError:
            db.session.rollback()
            logger.warning('Confirmation number collision (attempt %d)', attempt)
    else:
        raise ConflictError('Could not generate a unique confirmation number')

    logger.info('Booking %s created for room %s (%d nights)', booking.confirmation_number, room_id, nights)
    log_activity(user_id, ActivityActions.BOOKING_CREATED, {
        'bookingId': booking.id,
        'confirmationNumber': booking.confirmation_number,
        'hotelId': booking.hotel_id,
        'roomId': booking.room_id,
        'totalPrice': float(booking.total_price),
    })
    return booking, nights


def booking_to_dict(booking, nights=None):
    data = {
        'id': booking.id,
        'userId': booking.user_id,
        'hotelId': booking.hotel_id,
        'roomId': booking.room_id,
        'hotelName': booking.hotel.name if booking.hotel else None,
        'hotelNameAr': booking.hotel.name_ar if booking.hotel else None,
        'roomType': booking.room.type if booking.room else None,
        'checkIn': booking.check_in.isoformat(),
        'checkOut': booking.check_out.isoformat(),
        'guests': booking.guests,
        'fullName': booking.full_name,
        'email': booking.email,
        'phone': booking.phone,
        'totalPrice': float(booking.total_price),
        'currency': booking.room.currency if booking.room else None,
        'confirmationNumber': booking.confirmation_number,
        'status': booking.status,
        'createdAt': booking.created_at.isoformat() if booking.created_at else None,
    }
    if nights is not None:
        data['nights'] = nights
    return data
