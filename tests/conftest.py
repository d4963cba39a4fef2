import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from api import DB_EXTENSION  # noqa: E402
from db import init_db  # noqa: E402
from main import create_app  # noqa: E402
from services.notification_service import EmailResult  # noqa: E402


class FakeMailer:
    """Records every notification; selected recipients fail or raise."""

    def __init__(self):
        self.sent = []
        self.fail_for: set[str] = set()
        self.raise_for: set[str] = set()

    def send_notification(self, data):
        if data.recipient_email in self.raise_for:
            raise RuntimeError("smtp exploded")
        if data.recipient_email in self.fail_for:
            return EmailResult(success=False, error="mailbox unavailable")
        self.sent.append(data)
        return EmailResult(success=True)


@pytest.fixture
def db(tmp_path):
    """A fresh SQLite store per test."""
    database = init_db(f"sqlite:///{tmp_path / 'test.sqlite'}")
    yield database
    database.dispose()


@pytest.fixture
def session(db):
    s = db.session()
    yield s
    s.close()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def app(tmp_path, mailer):
    app = create_app(f"sqlite:///{tmp_path / 'app.sqlite'}", mailer=mailer)
    app.config["TESTING"] = True
    app.config["PUBLIC_READ"] = True
    app.config["IMPORT_PROFILE"] = "automated"
    app.config["REPLACE_POLICIES"] = {"manual": None, "automated": None}
    yield app
    app.extensions[DB_EXTENSION].dispose()


@pytest.fixture
def app_db(app):
    return app.extensions[DB_EXTENSION]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(app):
    """Test client with a logged-in session."""
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = 1
        sess["username"] = "tester"
    return client
