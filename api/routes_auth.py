"""
api.routes_auth - Session login / logout / first-user registration.
"""

from flask import request, jsonify, session as http_session

from api import api_bp, get_db
from api.auth import SESSION_USER_ID, SESSION_USERNAME, is_logged_in
from errors import UnauthorizedError
from services import auth_service


def _credentials() -> tuple[str, str]:
    data = request.get_json(silent=True) or request.form
    return (data.get("username") or "").strip(), data.get("password") or ""


@api_bp.route("/auth/login", methods=["POST"])
def login():
    """POST /api/v1/auth/login  {username, password}"""
    username, password = _credentials()
    session = get_db().session()
    try:
        user = auth_service.authenticate(session, username, password)
        if user is None:
            raise UnauthorizedError("Nesprávne používateľské meno alebo heslo")
        http_session.clear()
        http_session[SESSION_USER_ID] = user.id
        http_session[SESSION_USERNAME] = user.username
        return jsonify({"message": "Prihlásenie úspešné", "user": user.to_dict()})
    finally:
        session.close()


@api_bp.route("/auth/logout", methods=["POST"])
def logout():
    """POST /api/v1/auth/logout"""
    http_session.clear()
    return jsonify({"message": "Odhlásenie úspešné"})


@api_bp.route("/auth/me")
def whoami():
    """GET /api/v1/auth/me"""
    if not is_logged_in():
        raise UnauthorizedError()
    return jsonify({"user": {"id": http_session[SESSION_USER_ID],
                             "username": http_session.get(SESSION_USERNAME)}})


@api_bp.route("/auth/register", methods=["POST"])
def register():
    """
    POST /api/v1/auth/register  {username, password}

    Open while the user table is empty (first-time setup); afterwards
    only a logged-in admin may add users.
    """
    username, password = _credentials()
    session = get_db().session()
    try:
        if auth_service.has_users(session) and not is_logged_in():
            raise UnauthorizedError()
        user = auth_service.register_user(session, username, password)
        session.commit()
        return jsonify({"message": "Používateľ bol úspešne vytvorený",
                        "user": user.to_dict()}), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
