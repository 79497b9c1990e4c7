import logging

from flask import request

from hotelsite import db
from hotelsite.activity import ActivityActions, log_activity
from hotelsite.auth import Role, current_user_id, role_required
from hotelsite.booking import missing_fields
from hotelsite.catalog import get_hotel, hotel_detail, hotel_to_dict, list_hotels
from hotelsite.errors import ConflictError, ValidationError
from hotelsite.models import Booking, Hotel
from hotelsite.routes import api, json_body, ok, parse_bool_arg, parse_id

logger = logging.getLogger(__name__)

HOTEL_REQUIRED_FIELDS = ('name', 'nameAr', 'location', 'locationAr', 'description', 'descriptionAr')

# clave JSON -> columna
HOTEL_FIELDS = {
    'name': 'name',
    'nameAr': 'name_ar',
    'location': 'location',
    'locationAr': 'location_ar',
    'description': 'description',
    'descriptionAr': 'description_ar',
    'rating': 'rating',
    'reviews': 'reviews',
    'mainImage': 'main_image',
    'images': 'images',
    'amenities': 'amenities',
    'amenitiesAr': 'amenities_ar',
    'published': 'published',
    'featured': 'featured',
}

LIST_FIELDS = ('images', 'amenities', 'amenitiesAr')


def _hotel_values(data):
    missing = missing_fields(data, HOTEL_REQUIRED_FIELDS)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    for key in LIST_FIELDS:
        if key in data and data[key] is not None and not isinstance(data[key], list):
            raise ValidationError(f'{key} must be a list')

    try:
        rating = float(data.get('rating') or 0)
        reviews = int(data.get('reviews') or 0)
    except (TypeError, ValueError):
        raise ValidationError('rating and reviews must be numbers')
    if not 0 <= rating <= 5:
        raise ValidationError('rating must be between 0 and 5')

    values = {column: data.get(key) for key, column in HOTEL_FIELDS.items()}
    values.update(
        rating=rating,
        reviews=reviews,
        images=data.get('images') or [],
        amenities=data.get('amenities') or [],
        amenities_ar=data.get('amenitiesAr') or [],
        main_image=data.get('mainImage') or None,
        published=bool(data.get('published', False)),
        featured=bool(data.get('featured', False)),
    )
    return values


@api.route('/hotels', methods=['GET'])
def get_hotels():
    hotel_id = request.args.get('id')
    if hotel_id:
        return ok(hotel_detail(get_hotel(parse_id(hotel_id))))

    hotels = list_hotels(
        location=request.args.get('location'),
        published=parse_bool_arg(request.args.get('published')),
        featured=request.args.get('featured') == 'true',
    )
    return ok(hotels)


@api.route('/hotels', methods=['POST'])
@role_required(Role.ADMIN)
def create_hotel():
    values = _hotel_values(json_body())
    hotel = Hotel(**values)
    db.session.add(hotel)
    db.session.commit()
    logger.info('Hotel %s created', hotel.id)

    log_activity(current_user_id(), ActivityActions.HOTEL_CREATED, {'hotelId': hotel.id, 'name': hotel.name})
    return ok(hotel_to_dict(hotel), 'Hotel created successfully', 201)


@api.route('/hotels', methods=['PUT'])
@role_required(Role.ADMIN)
def update_hotel():
    data = json_body()
    if not data.get('id'):
        raise ValidationError('Hotel ID is required')
    values = _hotel_values(data)
    hotel = get_hotel(parse_id(data['id']))

    for column, value in values.items():
        setattr(hotel, column, value)
    db.session.commit()

    log_activity(current_user_id(), ActivityActions.HOTEL_UPDATED, {'hotelId': hotel.id, 'name': hotel.name})
    return ok(hotel_to_dict(hotel), 'Hotel updated successfully')


@api.route('/hotels', methods=['PATCH'])
@role_required(Role.ADMIN)
def patch_hotel():
    data = json_body()
    if not data.get('id'):
        raise ValidationError('Hotel ID is required')
    hotel = get_hotel(parse_id(data['id']))

    action = ActivityActions.HOTEL_UPDATED
    if isinstance(data.get('featured'), bool):
        hotel.featured = data['featured']
    if isinstance(data.get('published'), bool):
        hotel.published = data['published']
        action = ActivityActions.HOTEL_PUBLISHED if hotel.published else ActivityActions.HOTEL_UNPUBLISHED
    db.session.commit()

    log_activity(current_user_id(), action, {'hotelId': hotel.id, 'name': hotel.name})
    return ok(hotel_to_dict(hotel), 'Hotel updated successfully')


@api.route('/hotels', methods=['DELETE'])
@role_required(Role.ADMIN)
def delete_hotel():
    hotel_id = request.args.get('id')
    if not hotel_id:
        raise ValidationError('Hotel ID is required')
    hotel = get_hotel(parse_id(hotel_id))

    if Booking.query.filter_by(hotel_id=hotel.id).first():
        raise ConflictError('Hotel has bookings and cannot be deleted')

    details = {'hotelId': hotel.id, 'name': hotel.name}
    db.session.delete(hotel)  # las habitaciones se borran en cascada
    db.session.commit()
    logger.info('Hotel %s deleted', details['hotelId'])

    log_activity(current_user_id(), ActivityActions.HOTEL_DELETED, details)
    return ok(message='Hotel deleted successfully')
