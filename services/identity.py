"""Identity verification behind an injectable provider interface.

The app only needs two things from a provider: where to send the browser,
and how to turn the returned code into a profile dict with ``subject``,
``name``, ``email`` and ``picture``.
"""

from abc import ABC, abstractmethod
from urllib.parse import urlencode

import httpx
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.user import User
from patterns.profile_checks import validate_profile
from utils.errors import PersistenceFailure, ValidationFailure
from utils.logging_setup import get_logger

logger = get_logger('auth')


class IdentityProvider(ABC):

    @abstractmethod
    def authorization_url(self, redirect_uri: str, state: str) -> str:
        ...

    @abstractmethod
    def fetch_profile(self, code: str, redirect_uri: str) -> dict:
        ...


def _json_object(response: httpx.Response, what: str) -> dict:
    body = response.json()
    if not isinstance(body, dict):
        raise ValidationFailure(f'Identity provider {what} response was not a JSON object')
    return body


class GoogleIdentityProvider(IdentityProvider):
    AUTH_URL = 'https://accounts.google.com/o/oauth2/v2/auth'
    TOKEN_URL = 'https://oauth2.googleapis.com/token'
    USERINFO_URL = 'https://openidconnect.googleapis.com/v1/userinfo'
    SCOPE = 'openid email profile'

    def __init__(self, client_id: str, client_secret: str, timeout: float = 10.0, transport=None):
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        # A custom transport lets tests answer without the network
        self._transport = transport

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        params = {
            'client_id': self.client_id,
            'redirect_uri': redirect_uri,
            'response_type': 'code',
            'scope': self.SCOPE,
            'state': state,
            'prompt': 'select_account',
        }
        return f'{self.AUTH_URL}?{urlencode(params)}'

    def fetch_profile(self, code: str, redirect_uri: str) -> dict:
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            try:
                r = client.post(self.TOKEN_URL, data={
                    'code': code,
                    'client_id': self.client_id,
                    'client_secret': self.client_secret,
                    'redirect_uri': redirect_uri,
                    'grant_type': 'authorization_code',
                })
                r.raise_for_status()
                access_token = _json_object(r, 'token').get('access_token')
                if not access_token:
                    raise ValidationFailure('Token response had no access token')

                r = client.get(self.USERINFO_URL, headers={'Authorization': f'Bearer {access_token}'})
                r.raise_for_status()
                info = _json_object(r, 'userinfo')
            except (httpx.HTTPError, ValueError) as exc:
                # ValueError covers a body that is not JSON
                raise ValidationFailure(f'Identity provider request failed: {exc}')

        return {
            'subject': info.get('sub'),
            'name': info.get('name'),
            'email': info.get('email'),
            'picture': info.get('picture'),
        }


def provision_user(profile: dict) -> User:
    """Return the local user for a provider profile, creating it on first sign-in."""
    validate_profile(profile)
    subject = str(profile['subject'])
    try:
        user = User.query.filter_by(subject=subject).first()
        if user is not None:
            return user
        user = User.from_profile(profile)
        db.session.add(user)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error('Provisioning user failed: %s', exc)
        raise PersistenceFailure('Failed to create user')
    logger.info('Provisioned user %s', user.id)
    return user
