import pytest

from db.models import User
from errors import ValidationError
from services.auth_service import authenticate, has_users, register_user


def test_register_then_authenticate(session):
    assert has_users(session) is False
    user = register_user(session, " admin ", "secret1")
    session.commit()

    assert user.username == "admin"
    assert user.password_hash != "secret1"
    assert has_users(session) is True
    assert authenticate(session, "admin", "secret1").id == user.id


def test_wrong_password_or_unknown_user(session):
    register_user(session, "admin", "secret1")
    assert authenticate(session, "admin", "Secret1") is None
    assert authenticate(session, "ghost", "secret1") is None


@pytest.mark.parametrize("username, password, message", [
    ("", "secret1", "Používateľské meno a heslo sú povinné"),
    ("admin", "", "Používateľské meno a heslo sú povinné"),
    ("admin", "12345", "Heslo musí mať aspoň 6 znakov"),
    ("a" * 101, "secret1", "Používateľské meno je príliš dlhé"),
])
def test_register_rejects(session, username, password, message):
    with pytest.raises(ValidationError) as exc:
        register_user(session, username, password)
    assert exc.value.message == message
    assert session.query(User).count() == 0


def test_duplicate_username(session):
    register_user(session, "admin", "secret1")
    with pytest.raises(ValidationError, match="už existuje"):
        register_user(session, "admin", "another1")
