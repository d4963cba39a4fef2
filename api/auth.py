"""
api.auth - Session gate for mutating endpoints.
"""

from functools import wraps

from flask import current_app, session

from errors import UnauthorizedError

SESSION_USER_ID = "user_id"
SESSION_USERNAME = "username"


def is_logged_in() -> bool:
    return SESSION_USER_ID in session


def login_required(view_func):
    """Reject the request with 401 unless session['user_id'] is set."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        if not is_logged_in():
            raise UnauthorizedError()
        return view_func(*args, **kwargs)
    return wrapper


def read_access(view_func):
    """Public when PUBLIC_READ is on, otherwise same as login_required."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        if not current_app.config.get("PUBLIC_READ", True) and not is_logged_in():
            raise UnauthorizedError()
        return view_func(*args, **kwargs)
    return wrapper
