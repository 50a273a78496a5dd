"""Shared test fixtures."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest

from app import create_app
from config import load_config
from models import db
from services.identity import IdentityProvider
from utils.errors import ValidationFailure

CLIENT_URL = "http://localhost:5173"
SERVER_URL = "http://testserver"

TEST_ENV = {
    "DATABASE_URL": "sqlite://",
    "GOOGLE_CLIENT_ID": "test-client-id",
    "GOOGLE_CLIENT_SECRET": "test-client-secret",
    "SESSION_SECRET": "test-session-secret",
    "CLIENT_URL": CLIENT_URL,
    "SERVER_URL": SERVER_URL,
    "APP_ENV": "testing",
    "LOG_LEVEL": "WARNING",
}

ALICE = {
    "subject": "google-alice",
    "name": "Alice Example",
    "email": "alice@example.com",
    "picture": "https://example.com/alice.png",
}
BOB = {
    "subject": "google-bob",
    "name": "Bob Example",
    "email": "bob@example.com",
    "picture": None,
}


class StubIdentityProvider(IdentityProvider):
    """Identity provider that maps authorization codes straight to profiles."""

    def __init__(self, profiles: dict | None = None):
        self.profiles = dict(profiles or {})
        self.calls = []

    def authorization_url(self, redirect_uri, state):
        return f"https://idp.test/authorize?state={state}&redirect_uri={redirect_uri}"

    def fetch_profile(self, code, redirect_uri):
        self.calls.append((code, redirect_uri))
        if code not in self.profiles:
            raise ValidationFailure("Unknown authorization code")
        return self.profiles[code]


def sign_in(client, code: str):
    """Drive the OAuth redirect dance against the Flask test client."""
    start = client.get("/auth/google")
    state = parse_qs(urlsplit(start.headers["Location"]).query)["state"][0]
    return client.get(f"/auth/google/callback?code={code}&state={state}")


@pytest.fixture
def identity():
    return StubIdentityProvider({"alice-code": ALICE, "bob-code": BOB})


@pytest.fixture
def app(identity):
    """A vault app backed by an in-memory SQLite database."""
    application = create_app(load_config(TEST_ENV), identity_provider=identity)
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def alice(app):
    c = app.test_client()
    sign_in(c, "alice-code")
    return c


@pytest.fixture
def bob(app):
    c = app.test_client()
    sign_in(c, "bob-code")
    return c
