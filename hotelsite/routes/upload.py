import logging
import re

from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app, request

from hotelsite import storage
from hotelsite.activity import ActivityActions, log_activity
from hotelsite.auth import Role, current_user_id, role_required
from hotelsite.errors import ApiError, ValidationError
from hotelsite.routes import api, ok

logger = logging.getLogger(__name__)

CATEGORY_PATTERN = re.compile(r'^[a-z0-9-]+$')


@api.route('/upload', methods=['POST'])
@role_required(Role.ADMIN)
def upload_file():
    upload = request.files.get('file')
    if not upload or not upload.filename:
        raise ValidationError('No file provided')

    category = (request.form.get('type') or 'general').strip().lower()
    if not CATEGORY_PATTERN.match(category):
        raise ValidationError('Invalid upload type')

    if upload.mimetype not in storage.ALLOWED_TYPES:
        raise ValidationError('Invalid file type. Only images are allowed.')

    body = upload.read()
    max_bytes = current_app.config['UPLOAD_MAX_BYTES']
    if len(body) > max_bytes:
        raise ValidationError(storage.size_limit_message(max_bytes))

    key = storage.build_key(category, upload.filename, upload.mimetype)
    try:
        url = storage.upload_file(body, key, upload.mimetype)
    except (BotoCoreError, ClientError):
        logger.exception('Upload of %s failed', key)
        raise ApiError('Failed to upload file')

    log_activity(current_user_id(), ActivityActions.FILE_UPLOADED, {'filename': key, 'size': len(body)})
    return ok({'url': url, 'filename': key, 'size': len(body), 'type': upload.mimetype})
