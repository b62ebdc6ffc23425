from datetime import timedelta

import pytest
from flask import g

from config import LOCKOUT_TIME
from party_picks import cache, create_app, db
from party_picks.identity import PRINCIPAL_SESSION_KEY, Principal
from party_picks.utils import timezone_utils


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        cache.clear()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def clock(monkeypatch):
    """Pin the current time to the day before lockout"""
    clock = Clock(LOCKOUT_TIME - timedelta(days=1))
    monkeypatch.setattr(timezone_utils, "get_utc_time", clock)
    return clock


@pytest.fixture
def alice():
    return Principal("google:alice", "alice@example.com", "Alice Liddell", email_verified=True)


@pytest.fixture
def bob():
    return Principal("google:bob", "bob.builder99@example.com", email_verified=True)


@pytest.fixture
def admin():
    return Principal("google:admin", "admin@example.com", "Ada Admin", email_verified=True)


@pytest.fixture
def login(client):
    """Sign a principal into the test client's session"""

    def _login(principal):
        with client.session_transaction() as sess:
            sess["_user_id"] = principal.id
            sess["_fresh"] = True
            sess[PRINCIPAL_SESSION_KEY] = principal.to_session()
        # Requests share the fixture's app context, so drop the cached user
        g.pop("_login_user", None)
        return principal

    return _login
