import secrets
from functools import wraps

from flask import Blueprint, current_app, g, jsonify, redirect, request, session
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.user import User
from services.identity import provision_user
from utils.errors import PersistenceFailure, Unauthorized, VaultError
from utils.logging_setup import get_logger

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')
logger = get_logger('auth')


def identity_provider():
    return current_app.extensions['identity_provider']


def _callback_url() -> str:
    return f"{current_app.config['SERVER_URL']}/auth/google/callback"


def current_user():
    """Resolve the signed-in user from the session cookie, or None."""
    user_id = session.get('user_id')
    if not user_id:
        return None
    try:
        user = db.session.get(User, user_id)
    except SQLAlchemyError as exc:
        logger.error('Session lookup failed: %s', exc)
        raise PersistenceFailure('Failed to load session')
    if user is None:
        # The user behind this session no longer exists
        session.pop('user_id', None)
    return user


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        user = current_user()
        if user is None:
            raise Unauthorized()
        g.user = user
        return view(*args, **kwargs)
    return wrapped


@auth_bp.route('/google')
def google_login():
    # Random state ties the callback to this browser session
    state = secrets.token_urlsafe(24)
    session['oauth_state'] = state
    return redirect(identity_provider().authorization_url(_callback_url(), state))


@auth_bp.route('/google/callback')
def google_callback():
    client_url = current_app.config['CLIENT_URL']
    failure_url = f'{client_url}/login?error=auth_failed'

    expected_state = session.pop('oauth_state', None)
    state = request.args.get('state')
    code = request.args.get('code')
    if request.args.get('error') or not code:
        logger.warning('Sign-in cancelled or denied by provider')
        return redirect(failure_url)
    if not expected_state or not state or not secrets.compare_digest(state, expected_state):
        logger.warning('Sign-in rejected: state mismatch')
        return redirect(failure_url)

    try:
        profile = identity_provider().fetch_profile(code, _callback_url())
        user = provision_user(profile)
    except VaultError as exc:
        logger.error('Sign-in failed: %s', exc.message)
        return redirect(failure_url)

    session.clear()
    session.permanent = True
    session['user_id'] = user.id
    logger.info('User %s signed in', user.id)
    return redirect(client_url)


@auth_bp.route('/user')
def get_user():
    user = current_user()
    if user is None:
        return jsonify({'message': 'Not authenticated'}), 401
    return jsonify(user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
def logout():
    user_id = session.get('user_id')
    session.clear()
    if user_id:
        logger.info('User %s signed out', user_id)
    return jsonify({'message': 'Logged out successfully'})
