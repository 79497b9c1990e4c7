# hotelsite/storage.py
import logging
import secrets
import time

import boto3
from flask import current_app

logger = logging.getLogger(__name__)

ALLOWED_TYPES = ('image/jpeg', 'image/jpg', 'image/png', 'image/webp', 'image/gif')

_EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/jpg': 'jpg',
    'image/png': 'png',
    'image/webp': 'webp',
    'image/gif': 'gif',
}


def size_limit_message(max_bytes):
    return f'File size exceeds {max_bytes // (1024 * 1024)}MB limit'


def build_key(category, original_name, content_type):
    extension = original_name.rsplit('.', 1)[-1].lower() if '.' in (original_name or '') else ''
    if not extension.isalnum():
        extension = _EXTENSIONS.get(content_type, 'bin')
    return f'{category}/{int(time.time() * 1000)}-{secrets.token_hex(4)}.{extension}'


def _client():
    config = current_app.config
    return boto3.client(
        's3',
        endpoint_url=config.get('S3_ENDPOINT_URL'),
        region_name=config.get('S3_REGION'),
        aws_access_key_id=config.get('S3_ACCESS_KEY_ID'),
        aws_secret_access_key=config.get('S3_SECRET_ACCESS_KEY'),
    )


def public_url(key):
    config = current_app.config
    bucket = config['S3_BUCKET']
    base = config.get('S3_PUBLIC_URL')
    if base:
        return f"{base.rstrip('/')}/{bucket}/{key}"
    return f'https://{bucket}.s3.{config.get("S3_REGION")}.amazonaws.com/{key}'


def upload_file(body, key, content_type):
    """Store ``body`` under ``key`` and return its public URL."""
    _client().put_object(
        Bucket=current_app.config['S3_BUCKET'],
        Key=key,
        Body=body,
        ContentType=content_type,
    )
    logger.info('Uploaded %s (%d bytes)', key, len(body))
    return public_url(key)
