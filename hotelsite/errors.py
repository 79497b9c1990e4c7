from flask import jsonify, request
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from hotelsite import db
from hotelsite.storage import size_limit_message


class ApiError(Exception):
    """Base error converted to the ``{success: false, error}`` envelope."""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(ApiError):
    status_code = 400
    default_message = 'Invalid request'


class AuthenticationError(ApiError):
    status_code = 401
    default_message = 'Unauthorized'


class AuthorizationError(ApiError):
    status_code = 403
    default_message = 'Forbidden'


class NotFoundError(ApiError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(ApiError):
    status_code = 409
    default_message = 'Conflict'


def error_response(message, status_code):
    return jsonify({'success': False, 'error': message}), status_code


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            db.session.rollback()
        return error_response(error.message, error.status_code)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_body_too_large(error):
        # el cuerpo excede MAX_CONTENT_LENGTH antes de llegar a la subida
        if request.path == '/api/upload':
            return error_response(size_limit_message(app.config['UPLOAD_MAX_BYTES']), 400)
        return error_response(error.description, error.code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_response(error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        db.session.rollback()
        app.logger.exception('Unhandled error: %s', error)
        return error_response('Internal server error', 500)
