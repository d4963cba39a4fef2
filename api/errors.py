"""
api.errors - JSON error handlers for the API blueprint.

AppError subclasses carry their own status and message.  Anything else
is logged and answered with a bare 500; no internals leak out.
"""

import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from api import api_bp
from errors import AppError

logger = logging.getLogger(__name__)


@api_bp.errorhandler(AppError)
def api_app_error(e: AppError):
    if e.status_code >= 500:
        logger.error(f"{e.__class__.__name__}: {e.message}")
    return jsonify(e.to_dict()), e.status_code


@api_bp.errorhandler(404)
def api_not_found(_e):
    return jsonify({"error": "not found"}), 404


@api_bp.errorhandler(400)
def api_bad_request(_e):
    return jsonify({"error": "bad request"}), 400


@api_bp.errorhandler(HTTPException)
def api_http_error(e: HTTPException):
    return jsonify({"error": e.description or e.name}), e.code


@api_bp.errorhandler(Exception)
def api_server_error(e):
    logger.exception(f"Unhandled API error: {e}")
    return jsonify({"error": "internal server error"}), 500
