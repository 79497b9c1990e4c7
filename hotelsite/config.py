import os
import datetime

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'change-me')

    # Base de datos
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL', 'sqlite:///' + os.path.join(BASE_DIR, '..', 'hotelsite.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = datetime.timedelta(
        hours=int(os.environ.get('JWT_ACCESS_TOKEN_HOURS', '6'))
    )
    BCRYPT_ROUNDS = int(os.environ.get('BCRYPT_ROUNDS', '8'))

    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Almacenamiento S3 compatible
    S3_ENDPOINT_URL = os.environ.get('S3_ENDPOINT_URL')
    S3_REGION = os.environ.get('S3_REGION', 'us-east-1')
    S3_ACCESS_KEY_ID = os.environ.get('S3_ACCESS_KEY_ID')
    S3_SECRET_ACCESS_KEY = os.environ.get('S3_SECRET_ACCESS_KEY')
    S3_BUCKET = os.environ.get('S3_BUCKET', 'hotelsite')
    S3_PUBLIC_URL = os.environ.get('S3_PUBLIC_URL')

    UPLOAD_MAX_BYTES = 5 * 1024 * 1024
    # Flask rechaza antes de llegar al handler; dejamos margen para devolver 400
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    ACTIVITY_FEED_LIMIT = 100
