import logging

from hotelsite import db
from hotelsite.activity import ActivityActions, log_activity
from hotelsite.auth import (
    Role,
    check_password,
    current_user_id,
    hash_password,
    issue_token,
    role_required,
    verify_credentials,
)
from hotelsite.booking import EMAIL_PATTERN, missing_fields
from hotelsite.errors import AuthenticationError, ConflictError, ValidationError
from hotelsite.models import User
from hotelsite.routes import api, json_body, ok

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def user_to_dict(user):
    return {
        'id': user.id,
        'email': user.email,
        'name': user.name,
        'phone': user.phone,
        'role': user.role,
        'image': user.image,
        'createdAt': user.created_at.isoformat() if user.created_at else None,
        'updatedAt': user.updated_at.isoformat() if user.updated_at else None,
    }


def _load_current_user():
    user = db.session.get(User, current_user_id())
    if not user:
        raise AuthenticationError('User no longer exists')
    return user


### RUTAS DE AUTENTICACION ###

@api.route('/auth/register', methods=['POST'])
def register():
    data = json_body()
    missing = missing_fields(data, ('name', 'email', 'password'))
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    email = str(data['email']).strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError('Invalid email format')
    if len(str(data['password'])) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')

    if User.query.filter_by(email=email).first():
        raise ConflictError('Email already registered')

    user = User(
        name=str(data['name']).strip(),
        email=email,
        phone=data.get('phone') or None,
        password=hash_password(str(data['password'])),
    )
    db.session.add(user)
    db.session.commit()
    logger.info('Registered user %s', user.id)

    log_activity(user.id, ActivityActions.REGISTER, {'email': email})
    return ok({'user': user_to_dict(user), 'token': issue_token(user)}, 'User created', 201)


@api.route('/auth/login', methods=['POST'])
def login():
    data = json_body()
    if not data.get('email') or not data.get('password'):
        raise ValidationError('Email and password are required')

    user = verify_credentials(str(data['email']), str(data['password']))
    logger.info('User %s logged in', user.id)

    log_activity(user.id, ActivityActions.LOGIN)
    return ok({'user': user_to_dict(user), 'token': issue_token(user)}, 'Login successful')


@api.route('/auth/me', methods=['GET'])
@role_required(Role.USER)
def me():
    return ok(user_to_dict(_load_current_user()))


### PERFIL ###

@api.route('/profile', methods=['PUT'])
@role_required(Role.USER)
def update_profile():
    user = _load_current_user()
    data = json_body()
    changed = []

    if 'name' in data:
        if not str(data['name'] or '').strip():
            raise ValidationError('Name cannot be empty')
        user.name = str(data['name']).strip()
        changed.append('name')

    if 'phone' in data:
        user.phone = data['phone'] or None
        changed.append('phone')

    if 'image' in data:
        user.image = data['image'] or None
        changed.append('image')

    password_changed = False
    if data.get('newPassword'):
        if not check_password(str(data.get('currentPassword') or ''), user.password):
            raise ValidationError('Current password is incorrect')
        if len(str(data['newPassword'])) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        user.password = hash_password(str(data['newPassword']))
        password_changed = True

    db.session.commit()

    if changed:
        log_activity(user.id, ActivityActions.PROFILE_UPDATED, {'fields': changed})
    if password_changed:
        log_activity(user.id, ActivityActions.PASSWORD_CHANGED)

    return ok(user_to_dict(user), 'Profile updated successfully')
