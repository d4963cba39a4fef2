"""
services.auth_service - Administrator accounts.

Passwords are stored as Werkzeug hashes.  One flat admin role: every
user may do everything.
"""

from __future__ import annotations

from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

import config
from db.models import User
from errors import ValidationError


def authenticate(session: Session, username: str, password: str) -> User | None:
    """Return the user if username/password are valid; otherwise None."""
    user = session.query(User).filter(User.username == username).first()
    if user is None or not check_password_hash(user.password_hash, password):
        return None
    return user


def register_user(session: Session, username: str, password: str) -> User:
    """Create a user with a hashed password.  Raises ValidationError."""
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Používateľské meno a heslo sú povinné")
    if len(username) > 100:
        raise ValidationError("Používateľské meno je príliš dlhé")
    if len(password) < config.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Heslo musí mať aspoň {config.MIN_PASSWORD_LENGTH} znakov")
    if session.query(User).filter(User.username == username).first():
        raise ValidationError("Používateľské meno už existuje")

    user = User(username=username, password_hash=generate_password_hash(password))
    session.add(user)
    session.flush()
    return user


def has_users(session: Session) -> bool:
    return session.query(User.id).first() is not None
