from decimal import Decimal, InvalidOperation

from flask import request

from hotelsite import db
from hotelsite.activity import ActivityActions, log_activity
from hotelsite.auth import Role, current_user_id, role_required
from hotelsite.booking import missing_fields
from hotelsite.catalog import get_hotel, room_to_dict
from hotelsite.errors import ConflictError, NotFoundError, ValidationError
from hotelsite.models import Booking, Room
from hotelsite.routes import api, json_body, ok, parse_id


def _get_room(room_id):
    room = db.session.get(Room, room_id)
    if not room:
        raise NotFoundError('Room not found')
    return room


def _room_values(data, partial=False):
    values = {}

    if 'price' in data or not partial:
        try:
            price = Decimal(str(data.get('price')))
        except (InvalidOperation, ValueError):
            raise ValidationError('price must be a number')
        if not price.is_finite() or price <= 0:
            raise ValidationError('price must be greater than zero')
        values['price'] = price

    for key, column in (('available', 'available'), ('maxGuests', 'max_guests')):
        if key in data:
            try:
                number = int(data[key])
            except (TypeError, ValueError):
                raise ValidationError(f'{key} must be an integer')
            if number < 0:
                raise ValidationError(f'{key} cannot be negative')
            values[column] = number

    for key, column in (
        ('type', 'type'),
        ('typeAr', 'type_ar'),
        ('currency', 'currency'),
        ('description', 'description'),
        ('descriptionAr', 'description_ar'),
    ):
        if key in data:
            values[column] = data[key] or None

    for key in ('images', 'amenities'):
        if key in data:
            if data[key] is not None and not isinstance(data[key], list):
                raise ValidationError(f'{key} must be a list')
            values[key] = data[key] or []

    if 'type' in values and not values['type']:
        raise ValidationError('type cannot be empty')
    if 'currency' in values and not values['currency']:
        values['currency'] = 'SAR'
    return values


@api.route('/rooms', methods=['GET'])
def get_rooms():
    room_id = request.args.get('id')
    if room_id:
        return ok(room_to_dict(_get_room(parse_id(room_id)), with_hotel=True))

    query = Room.query
    hotel_id = request.args.get('hotelId')
    if hotel_id:
        query = query.filter_by(hotel_id=parse_id(hotel_id, 'hotelId'))
    rooms = query.order_by(Room.created_at.desc(), Room.id.desc()).all()
    return ok([room_to_dict(room, with_hotel=True) for room in rooms])


@api.route('/rooms', methods=['POST'])
@role_required(Role.ADMIN)
def create_room():
    data = json_body()
    missing = missing_fields(data, ('hotelId', 'type', 'price'))
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    values = _room_values(data)
    hotel = get_hotel(parse_id(data['hotelId'], 'hotelId'))

    room = Room(hotel_id=hotel.id, **values)
    db.session.add(room)
    db.session.commit()

    log_activity(current_user_id(), ActivityActions.ROOM_CREATED, {
        'roomId': room.id, 'hotelId': hotel.id, 'type': room.type,
    })
    return ok(room_to_dict(room), 'Room created successfully', 201)


@api.route('/rooms', methods=['PUT'])
@role_required(Role.ADMIN)
def update_room():
    data = json_body()
    if not data.get('id'):
        raise ValidationError('Room ID is required')
    values = _room_values(data, partial=True)
    room = _get_room(parse_id(data['id']))

    if data.get('hotelId'):
        values['hotel_id'] = get_hotel(parse_id(data['hotelId'], 'hotelId')).id

    for column, value in values.items():
        setattr(room, column, value)
    db.session.commit()

    log_activity(current_user_id(), ActivityActions.ROOM_UPDATED, {
        'roomId': room.id, 'hotelId': room.hotel_id, 'fields': sorted(values),
    })
    return ok(room_to_dict(room), 'Room updated successfully')


@api.route('/rooms', methods=['DELETE'])
@role_required(Role.ADMIN)
def delete_room():
    room_id = request.args.get('id')
    if not room_id:
        raise ValidationError('Room ID is required')
    room = _get_room(parse_id(room_id))

    if Booking.query.filter_by(room_id=room.id).first():
        raise ConflictError('Room has bookings and cannot be deleted')

    details = {'roomId': room.id, 'hotelId': room.hotel_id, 'type': room.type}
    db.session.delete(room)
    db.session.commit()

    log_activity(current_user_id(), ActivityActions.ROOM_DELETED, details)
    return ok(message='Room deleted successfully')
