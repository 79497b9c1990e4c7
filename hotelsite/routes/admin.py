import logging

from flask import current_app, request

from hotelsite import db
from hotelsite.activity import ActivityActions, log_activity
from hotelsite.auth import Role, current_user_id, role_required
from hotelsite.errors import AuthorizationError, NotFoundError, ValidationError
from hotelsite.models import ROLES, ActivityLog, User
from hotelsite.routes import api, json_body, ok, parse_id
from hotelsite.routes.accounts import user_to_dict

logger = logging.getLogger(__name__)

MAX_ACTIVITY_LIMIT = 500


### RUTAS PARA SUPER ADMINISTRADORES ###

@api.route('/admin/users', methods=['GET'])
@role_required(Role.SUPER_ADMIN)
def list_users():
    users = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    return ok([user_to_dict(user) for user in users])


@api.route('/admin/users', methods=['PUT'])
@role_required(Role.SUPER_ADMIN)
def change_user_role():
    data = json_body()
    if not data.get('userId') or not data.get('role'):
        raise ValidationError('userId and role are required')
    if data['role'] not in ROLES:
        raise ValidationError('Invalid role')

    user = db.session.get(User, parse_id(data['userId'], 'userId'))
    if not user:
        raise NotFoundError('User not found')

    user.role = data['role']
    db.session.commit()
    logger.info('User %s role changed to %s', user.id, user.role)

    log_activity(current_user_id(), ActivityActions.USER_ROLE_CHANGED, {
        'targetUserId': user.id, 'newRole': user.role,
    })
    return ok(user_to_dict(user), 'User role updated successfully')


@api.route('/admin/users', methods=['DELETE'])
@role_required(Role.SUPER_ADMIN)
def delete_user():
    user_id = request.args.get('userId')
    if not user_id:
        raise ValidationError('userId is required')
    user_id = parse_id(user_id, 'userId')

    if user_id == current_user_id():
        raise AuthorizationError('Cannot delete your own account')

    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError('User not found')

    db.session.delete(user)  # reservas, actividad y blogs en cascada
    db.session.commit()
    logger.info('User %s deleted', user_id)

    log_activity(current_user_id(), ActivityActions.USER_DELETED, {'deletedUserId': user_id})
    return ok(message='User deleted successfully')


@api.route('/admin/activities', methods=['GET'])
@role_required(Role.SUPER_ADMIN)
def list_activities():
    default_limit = current_app.config['ACTIVITY_FEED_LIMIT']
    try:
        limit = int(request.args.get('limit', default_limit))
    except ValueError:
        raise ValidationError('limit must be an integer')
    limit = max(1, min(limit, MAX_ACTIVITY_LIMIT))

    query = ActivityLog.query
    user_id = request.args.get('userId')
    if user_id:
        query = query.filter_by(user_id=parse_id(user_id, 'userId'))

    activities = query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).limit(limit).all()
    return ok([
        {
            'id': activity.id,
            'userId': activity.user_id,
            'action': activity.action,
            'details': activity.details or {},
            'ipAddress': activity.ip_address,
            'userAgent': activity.user_agent,
            'createdAt': activity.created_at.isoformat(),
            'user': {
                'id': activity.user.id,
                'email': activity.user.email,
                'name': activity.user.name,
                'role': activity.user.role,
            } if activity.user else None,
        }
        for activity in activities
    ])
