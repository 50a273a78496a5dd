from urllib.parse import urlsplit

import httpx

from utils.errors import NotFound, PersistenceFailure, Unauthorized, ValidationFailure
from utils.logging_setup import get_logger

logger = get_logger('client')


class VaultApiClient:
    """Thin HTTP client for the vault API.

    Keeps the session cookie between calls. Errors come back as the same
    exception types the server uses; nothing is retried.
    """

    def __init__(self, base_url: str, transport=None, timeout: float = 20.0, origin: str | None = None):
        headers = {'Origin': origin} if origin else {}
        self.client = httpx.Client(base_url=base_url.rstrip('/'), transport=transport, timeout=timeout, headers=headers)

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            r = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error('%s %s failed: %s', method, path, exc)
            raise PersistenceFailure('Could not reach the vault')

        if r.status_code < 400:
            return r
        try:
            message = r.json().get('message')
        except ValueError:
            message = None
        if r.status_code == 401:
            raise Unauthorized(message)
        if r.status_code == 404:
            raise NotFound(message)
        if 400 <= r.status_code < 500:
            raise ValidationFailure(message)
        raise PersistenceFailure(message)

    # Sign-in happens in a browser; these two calls drive the same redirects

    def begin_sign_in(self) -> str:
        r = self._request('GET', '/auth/google', follow_redirects=False)
        return r.headers['location']

    def finish_sign_in(self, callback_url: str) -> bool:
        parts = urlsplit(callback_url)
        path = parts.path + (f'?{parts.query}' if parts.query else '')
        r = self._request('GET', path, follow_redirects=False)
        return 'error=' not in r.headers.get('location', '')

    def current_user(self) -> dict:
        return self._request('GET', '/auth/user').json()

    def logout(self) -> None:
        self._request('POST', '/auth/logout')

    def list_entries(self) -> list[dict]:
        return self._request('GET', '/entries').json()

    def create_entry(self, kind: str, content: str, title: str | None = None) -> dict:
        body = {'kind': kind, 'content': content}
        if title:
            body['title'] = title
        return self._request('POST', '/entries', json=body).json()

    def delete_entry(self, entry_id: str) -> None:
        self._request('DELETE', f'/entries/{entry_id}')
