import sys

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from config import load_config
from models import db
from models.user import User  # noqa: F401  registers the table
from models.vault_entry import VaultEntry  # noqa: F401
from routes.auth import auth_bp
from routes.entries import entries_bp
from services.entry_store import EntryStore, wait_for_database
from services.identity import GoogleIdentityProvider
from utils.errors import ConfigError, VaultError
from utils.logging_setup import get_logger, setup_logging

logger = get_logger('app')

CORS_METHODS = 'GET, POST, PUT, DELETE, OPTIONS'
CORS_HEADERS = 'Content-Type, Authorization'


def create_app(config: dict | None = None, identity_provider=None, wait_for_db: bool = False) -> Flask:
    """Build the vault API.

    ``config`` defaults to :func:`config.load_config`. Pass an
    ``identity_provider`` to replace Google sign-in (tests use a stub).
    """
    if config is None:
        config = load_config()

    app = Flask(__name__)
    app.config.update(config)
    setup_logging(app.config.get('LOG_LEVEL', 'INFO'), app.config.get('LOG_DIR'))

    db.init_app(app)

    if identity_provider is None:
        identity_provider = GoogleIdentityProvider(app.config['GOOGLE_CLIENT_ID'], app.config['GOOGLE_CLIENT_SECRET'])
    app.extensions['identity_provider'] = identity_provider
    app.extensions['entry_store'] = EntryStore()

    app.register_blueprint(auth_bp)
    app.register_blueprint(entries_bp)
    _register_cors(app)
    _register_error_handlers(app)

    @app.route('/health')
    def health():
        return jsonify({'ok': True})

    with app.app_context():
        if wait_for_db:
            wait_for_database(app.config.get('DB_RETRY_INTERVAL', 5))
        db.create_all()

    return app


def _register_cors(app: Flask) -> None:
    # Only the configured client origin may make credentialed calls.
    # Flask answers OPTIONS preflights itself; this adds the headers.

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get('Origin')
        if origin and origin == app.config['CLIENT_URL']:
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers['Access-Control-Allow-Credentials'] = 'true'
            response.headers['Access-Control-Allow-Methods'] = CORS_METHODS
            response.headers['Access-Control-Allow-Headers'] = CORS_HEADERS
            response.vary.add('Origin')
        return response


def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(VaultError)
    def handle_vault_error(exc):
        if exc.status_code >= 500:
            logger.error('%s %s failed: %s', request.method, request.path, exc.message)
        return jsonify({'message': exc.message}), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({'message': exc.description or exc.name}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        logger.exception('Server error on %s %s', request.method, request.path)
        body = {'message': 'Internal server error'}
        if app.config.get('APP_ENV') == 'development':
            body['error'] = str(exc)
        return jsonify(body), 500


def main():
    setup_logging()
    try:
        config = load_config()
    except ConfigError as exc:
        logger.error('%s', exc)
        sys.exit(1)
    app = create_app(config, wait_for_db=True)
    logger.info('Server running on port %d', app.config['PORT'])
    app.run(host='0.0.0.0', port=app.config['PORT'], debug=app.config['APP_ENV'] == 'development')


if __name__ == '__main__':
    main()
