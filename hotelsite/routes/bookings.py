from flask import request

from hotelsite import db
from hotelsite.auth import Role, current_role, current_user_id, role_required
from hotelsite.booking import booking_to_dict, create_booking
from hotelsite.errors import NotFoundError
from hotelsite.models import Booking
from hotelsite.routes import api, json_body, ok, parse_id


@api.route('/bookings', methods=['GET'])
@role_required(Role.USER)
def get_bookings():
    user_id = current_user_id()
    is_admin = current_role() >= Role.ADMIN

    booking_id = request.args.get('id')
    if booking_id:
        booking = db.session.get(Booking, parse_id(booking_id))
        # las reservas ajenas se tratan como inexistentes
        if not booking or (not is_admin and booking.user_id != user_id):
            raise NotFoundError('Booking not found')
        return ok(booking_to_dict(booking))

    query = Booking.query
    if not is_admin:
        query = query.filter_by(user_id=user_id)
    bookings = query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
    return ok([booking_to_dict(booking) for booking in bookings])


@api.route('/bookings', methods=['POST'])
@role_required(Role.USER)
def post_booking():
    data = json_body()
    booking, nights = create_booking(current_user_id(), data)
    return ok(booking_to_dict(booking, nights), 'Booking created successfully', 201)
