"""Hotel and room read models.

Hotels are stored without a price; the advertised (headline) price is the
cheapest room of the hotel and is recomputed on every read.
"""
from sqlalchemy import or_

from hotelsite import db
from hotelsite.errors import NotFoundError
from hotelsite.models import Hotel


def _iso(value):
    return value.isoformat() if value else None


def headline_price(rooms):
    if not rooms:
        return 0
    return min(float(room.price) for room in rooms)


def room_to_dict(room, with_hotel=False):
    data = {
        'id': room.id,
        'hotelId': room.hotel_id,
        'type': room.type,
        'typeAr': room.type_ar,
        'price': float(room.price),
        'currency': room.currency,
        'available': room.available,
        'maxGuests': room.max_guests,
        'description': room.description,
        'descriptionAr': room.description_ar,
        'images': room.images or [],
        'amenities': room.amenities or [],
        'createdAt': _iso(room.created_at),
        'updatedAt': _iso(room.updated_at),
    }
    if with_hotel:
        data['hotelName'] = room.hotel.name if room.hotel else ''
        data['hotelNameAr'] = room.hotel.name_ar if room.hotel else ''
    return data


def hotel_to_dict(hotel):
    return {
        'id': hotel.id,
        'name': hotel.name,
        'nameAr': hotel.name_ar,
        'location': hotel.location,
        'locationAr': hotel.location_ar,
        'description': hotel.description,
        'descriptionAr': hotel.description_ar,
        'rating': float(hotel.rating or 0),
        'reviews': hotel.reviews,
        'mainImage': hotel.main_image,
        'images': hotel.images or [],
        'amenities': hotel.amenities or [],
        'amenitiesAr': hotel.amenities_ar or [],
        'published': hotel.published,
        'featured': hotel.featured,
        'createdAt': _iso(hotel.created_at),
        'updatedAt': _iso(hotel.updated_at),
    }


def hotel_summary(hotel):
    rooms = list(hotel.rooms)
    data = hotel_to_dict(hotel)
    data['price'] = headline_price(rooms)
    data['roomCount'] = len(rooms)
    data['rooms'] = [
        {'id': room.id, 'type': room.type, 'price': float(room.price), 'available': room.available}
        for room in rooms
    ]
    return data


def hotel_detail(hotel):
    rooms = list(hotel.rooms)
    data = hotel_to_dict(hotel)
    data['price'] = headline_price(rooms)
    data['rooms'] = [room_to_dict(room) for room in rooms]
    return data


def list_hotels(location=None, published=None, featured=None):
    """Hotel summaries, newest first.

    ``published`` is ``True``/``False``/``None`` (no filter); ``featured``
    only filters when ``True``.
    """
    query = Hotel.query
    if location:
        pattern = f'%{location}%'
        query = query.filter(or_(Hotel.location.ilike(pattern), Hotel.location_ar.ilike(pattern)))
    if published is not None:
        query = query.filter(Hotel.published.is_(published))
    if featured:
        query = query.filter(Hotel.featured.is_(True))

    hotels = query.order_by(Hotel.created_at.desc(), Hotel.id.desc()).all()
    return [hotel_summary(hotel) for hotel in hotels]


def get_hotel(hotel_id):
    hotel = db.session.get(Hotel, hotel_id)
    if not hotel:
        raise NotFoundError('Hotel not found')
    return hotel
