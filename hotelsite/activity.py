import logging

from flask import has_request_context, request
from sqlalchemy.exc import SQLAlchemyError

from hotelsite import db
from hotelsite.models import ActivityLog

logger = logging.getLogger(__name__)


class ActivityActions:
    LOGIN = 'login'
    REGISTER = 'register'
    PASSWORD_CHANGED = 'password_changed'
    PROFILE_UPDATED = 'profile_updated'

    BOOKING_CREATED = 'booking_created'

    HOTEL_CREATED = 'hotel_created'
    HOTEL_UPDATED = 'hotel_updated'
    HOTEL_PUBLISHED = 'hotel_published'
    HOTEL_UNPUBLISHED = 'hotel_unpublished'
    HOTEL_DELETED = 'hotel_deleted'
    ROOM_CREATED = 'room_created'
    ROOM_UPDATED = 'room_updated'
    ROOM_DELETED = 'room_deleted'
    BLOG_CREATED = 'blog_created'
    BLOG_UPDATED = 'blog_updated'
    BLOG_DELETED = 'blog_deleted'
    FILE_UPLOADED = 'file_uploaded'

    USER_ROLE_CHANGED = 'user_role_changed'
    USER_DELETED = 'user_deleted'


def _client_ip():
    forwarded = request.headers.get('X-Forwarded-For')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.headers.get('X-Real-IP') or request.remote_addr or 'unknown'


def log_activity(user_id, action, details=None):
    """Append an activity row. Never raises; the caller's work is already committed."""
    ip_address, user_agent = 'unknown', 'unknown'
    if has_request_context():
        ip_address = _client_ip()
        user_agent = request.headers.get('User-Agent') or 'unknown'

    try:
        db.session.add(ActivityLog(
            user_id=user_id,
            action=action,
            details=details or {},
            ip_address=ip_address[:45],
            user_agent=user_agent,
        ))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Failed to log activity %s for user %s', action, user_id)
