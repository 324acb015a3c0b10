import os
import tempfile
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv() # load variables from .env


def _env_flag(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'change-me-in-production')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    DB_HOST = os.getenv('DB_HOST')
    DB_USER = os.getenv('DB_USER')
    DB_PASSWORD = os.getenv('DB_PASSWORD')
    DB_NAME = os.getenv('DB_NAME')

    # MySQL (PyMySQL driver) when DB_HOST is set, otherwise DATABASE_URL or a local sqlite file
    if DB_HOST:
        SQLALCHEMY_DATABASE_URI = (
            f"mysql+pymysql://{DB_USER}@{DB_HOST}/{DB_NAME}"
            if not DB_PASSWORD else
            f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}/{DB_NAME}"
        )
    else:
        SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///tracker.db')

    SQLALCHEMY_TRACK_MODIFICATIONS = False  # disables overhead warning

    # session cookie carrying the signed token
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', SECRET_KEY)
    JWT_TOKEN_LOCATION = ["cookies"]
    JWT_ACCESS_COOKIE_NAME = "wgn_token"
    JWT_ACCESS_COOKIE_PATH = "/"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)
    JWT_SESSION_COOKIE = False
    JWT_COOKIE_SECURE = _env_flag('COOKIE_SECURE', os.getenv('FLASK_ENV') == 'production')
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_COOKIE_CSRF_PROTECT = False

    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',') if o.strip()]

    GHOSTING_AFTER_DAYS = int(os.getenv('GHOSTING_AFTER_DAYS', '14'))

    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', 'user_uploads')
    AVATAR_MAX_BYTES = 2 * 1024 * 1024
    # leave some room above the avatar cap for multipart overhead
    MAX_CONTENT_LENGTH = 4 * 1024 * 1024
    PUBLIC_BASE_URL = os.getenv('PUBLIC_BASE_URL', '')

    # zero-argument callable returning "now" as naive UTC; None means the real clock
    CLOCK = None


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    JWT_SECRET_KEY = 'test-secret-key-that-is-long-enough-for-hs256'
    JWT_COOKIE_SECURE = False
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'tracker-test-uploads')
    BCRYPT_LOG_ROUNDS = 4
