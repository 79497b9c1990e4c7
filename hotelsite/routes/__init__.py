from flask import Blueprint, jsonify, request

from hotelsite.errors import ValidationError

api = Blueprint('api', __name__, url_prefix='/api')


def ok(data=None, message=None, status=200):
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    return jsonify(body), status


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def parse_id(value, name='id'):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be an integer')


def parse_bool_arg(value):
    """'true' / 'false' query flags; anything else means no filter."""
    if value == 'true':
        return True
    if value == 'false':
        return False
    return None


from hotelsite.routes import (  # noqa: E402,F401
    accounts,
    admin,
    blogs,
    bookings,
    hotels,
    public,
    rooms,
    upload,
)
