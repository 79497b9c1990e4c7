from sqlalchemy.exc import SQLAlchemyError

from hotelsite import db
from hotelsite.booking import CONFIRMATION_PATTERN
from hotelsite.models import ActivityLog, Booking, Room


def booking_payload(hotel, room, **overrides):
    data = {
        'hotelId': hotel.id,
        'roomId': room.id,
        'checkIn': '2025-01-01',
        'checkOut': '2025-01-04',
        'guests': 2,
        'fullName': 'Sara Ali',
        'email': 'sara@example.com',
        'phone': '+966500000000',
    }
    data.update(overrides)
    return data


def fresh_room(room_id):
    db.session.expire_all()
    return db.session.get(Room, room_id)


def test_create_booking(client, user, auth_headers, make_hotel):
    """100/night for 2025-01-01 to 2025-01-04 is three nights, 300 total."""
    hotel = make_hotel(rooms=[('standard', 100, 2)])
    room = hotel.rooms[0]

    response = client.post('/api/bookings', json=booking_payload(hotel, room), headers=auth_headers(user))
    assert response.status_code == 201
    body = response.get_json()
    assert body['success'] is True
    booking = body['data']
    assert booking['nights'] == 3
    assert booking['totalPrice'] == 300.0
    assert booking['status'] == 'confirmed'
    assert booking['userId'] == user.id
    assert CONFIRMATION_PATTERN.match(booking['confirmationNumber'])

    assert fresh_room(room.id).available == 1
    actions = [activity.action for activity in ActivityLog.query.all()]
    assert 'booking_created' in actions


def test_no_availability_writes_nothing(client, user, auth_headers, make_hotel):
    hotel = make_hotel(rooms=[('suite', 900, 0)])
    room = hotel.rooms[0]

    response = client.post('/api/bookings', json=booking_payload(hotel, room), headers=auth_headers(user))
    assert response.status_code == 409
    assert response.get_json()['success'] is False
    assert Booking.query.count() == 0
    assert fresh_room(room.id).available == 0


def test_last_unit_can_only_be_booked_once(client, user, auth_headers, make_hotel):
    hotel = make_hotel(rooms=[('standard', 100, 1)])
    room = hotel.rooms[0]
    headers = auth_headers(user)

    first = client.post('/api/bookings', json=booking_payload(hotel, room), headers=headers)
    second = client.post('/api/bookings', json=booking_payload(hotel, room), headers=headers)
    assert first.status_code == 201
    assert second.status_code == 409
    assert Booking.query.count() == 1
    assert fresh_room(room.id).available == 0


def test_missing_fields_reported_in_order(client, user, auth_headers, make_hotel):
    hotel = make_hotel(rooms=[('standard', 100, 2)])
    room = hotel.rooms[0]
    payload = booking_payload(hotel, room)
    del payload['roomId']
    payload['phone'] = ''

    response = client.post('/api/bookings', json=payload, headers=auth_headers(user))
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Missing required fields: roomId, phone'
    assert fresh_room(room.id).available == 2


def test_checkout_must_follow_checkin(client, user, auth_headers, make_hotel):
    hotel = make_hotel(rooms=[('standard', 100, 2)])
    payload = booking_payload(hotel, hotel.rooms[0], checkOut='2024-12-30')

    response = client.post('/api/bookings', json=payload, headers=auth_headers(user))
    assert response.status_code == 400


def test_booking_requires_token(client, make_hotel):
    hotel = make_hotel(rooms=[('standard', 100, 2)])
    room = hotel.rooms[0]

    response = client.post('/api/bookings', json=booking_payload(hotel, room))
    assert response.status_code == 401
    assert response.get_json()['success'] is False
    assert fresh_room(room.id).available == 2


def test_unknown_room_is_404(client, user, auth_headers, make_hotel):
    hotel = make_hotel(rooms=[('standard', 100, 2)])
    payload = booking_payload(hotel, hotel.rooms[0], roomId=9999)

    response = client.post('/api/bookings', json=payload, headers=auth_headers(user))
    assert response.status_code == 404
    assert response.get_json()['error'] == 'Room not found'


def test_room_from_another_hotel_is_rejected(client, user, auth_headers, make_hotel):
    riyadh = make_hotel(rooms=[('standard', 100, 2)])
    jeddah = make_hotel(name='Grand Oasis Resort', location='Jeddah', rooms=[('deluxe', 380, 2)])

    payload = booking_payload(riyadh, jeddah.rooms[0])
    response = client.post('/api/bookings', json=payload, headers=auth_headers(user))
    assert response.status_code == 400
    assert fresh_room(jeddah.rooms[0].id).available == 2


def test_users_only_see_their_own_bookings(client, make_user, admin, auth_headers, make_hotel):
    hotel = make_hotel(rooms=[('standard', 100, 5)])
    room = hotel.rooms[0]
    alice = make_user(email='alice@example.com')
    bob = make_user(email='bob@example.com')

    created = client.post('/api/bookings', json=booking_payload(hotel, room), headers=auth_headers(alice))
    booking_id = created.get_json()['data']['id']
    client.post('/api/bookings', json=booking_payload(hotel, room), headers=auth_headers(bob))

    mine = client.get('/api/bookings', headers=auth_headers(alice)).get_json()['data']
    assert [booking['id'] for booking in mine] == [booking_id]

    other = client.get(f'/api/bookings?id={booking_id}', headers=auth_headers(bob))
    assert other.status_code == 404

    everything = client.get('/api/bookings', headers=auth_headers(admin)).get_json()['data']
    assert len(everything) == 2


def test_activity_log_failure_does_not_fail_booking(client, user, auth_headers, make_hotel, monkeypatch):
    """The booking stays committed when the audit row cannot be written."""
    hotel = make_hotel(rooms=[('standard', 100, 2)])
    room = hotel.rooms[0]
    headers = auth_headers(user)
    add = db.session.add

    def add_without_activity(instance, *args, **kwargs):
        if isinstance(instance, ActivityLog):
            raise SQLAlchemyError('activity table unavailable')
        return add(instance, *args, **kwargs)

    monkeypatch.setattr(db.session, 'add', add_without_activity)

    response = client.post('/api/bookings', json=booking_payload(hotel, room), headers=headers)
    assert response.status_code == 201
    assert response.get_json()['data']['totalPrice'] == 300.0

    monkeypatch.undo()
    assert Booking.query.count() == 1
    assert ActivityLog.query.count() == 0
    assert fresh_room(room.id).available == 1
