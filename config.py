import os
from datetime import timedelta

from dotenv import load_dotenv

from utils.errors import ConfigError

REQUIRED_ENV_VARS = (
    'DATABASE_URL',
    'GOOGLE_CLIENT_ID',
    'GOOGLE_CLIENT_SECRET',
    'SESSION_SECRET',
    'CLIENT_URL',
    'SERVER_URL',
)

# Large enough for an obfuscated image data URI
MAX_CONTENT_LENGTH = 50 * 1024 * 1024


def load_config(environ=None) -> dict:
    """Build the Flask config from the environment.

    A ``.env`` file is read first when ``environ`` is not given. Raises
    ``ConfigError`` naming the first missing required variable.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    for name in REQUIRED_ENV_VARS:
        if not environ.get(name):
            raise ConfigError(f'Missing required environment variable: {name}')

    app_env = environ.get('APP_ENV', 'development').strip().lower()
    production = app_env == 'production'

    try:
        port = int(environ.get('PORT', 5000))
        retry_interval = float(environ.get('DB_RETRY_INTERVAL', 5))
    except ValueError as exc:
        raise ConfigError(f'Invalid numeric setting: {exc}')

    return {
        'APP_ENV': app_env,
        'PORT': port,
        'SECRET_KEY': environ['SESSION_SECRET'],
        'SQLALCHEMY_DATABASE_URI': environ['DATABASE_URL'],
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SQLALCHEMY_ENGINE_OPTIONS': {'pool_pre_ping': True, 'hide_parameters': True},
        'GOOGLE_CLIENT_ID': environ['GOOGLE_CLIENT_ID'],
        'GOOGLE_CLIENT_SECRET': environ['GOOGLE_CLIENT_SECRET'],
        'CLIENT_URL': environ['CLIENT_URL'].rstrip('/'),
        'SERVER_URL': environ['SERVER_URL'].rstrip('/'),
        'DB_RETRY_INTERVAL': retry_interval,
        'LOG_LEVEL': environ.get('LOG_LEVEL', 'INFO'),
        'LOG_DIR': environ.get('LOG_DIR') or None,
        'MAX_CONTENT_LENGTH': MAX_CONTENT_LENGTH,
        # Session cookie: rolling 24h, strict + secure only in production
        'PERMANENT_SESSION_LIFETIME': timedelta(hours=24),
        'SESSION_REFRESH_EACH_REQUEST': True,
        'SESSION_COOKIE_HTTPONLY': True,
        'SESSION_COOKIE_SECURE': production,
        'SESSION_COOKIE_SAMESITE': 'Strict' if production else 'Lax',
    }
