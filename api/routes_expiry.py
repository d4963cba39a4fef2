"""
api.routes_expiry - /api/v1/certificates/check-expiry sweep trigger.

Meant to be hit by an external scheduler (cron, systemd timer), so it
takes no input and needs no session.
"""

from flask import current_app, jsonify

from api import api_bp, get_db, get_mailer
from services.expiry_service import ExpiryService


@api_bp.route("/certificates/check-expiry", methods=["GET", "POST"])
def check_expiry():
    """GET|POST /api/v1/certificates/check-expiry"""
    session = get_db().session()
    try:
        report = ExpiryService.sweep(
            session,
            get_mailer(),
            window_days=current_app.config["EXPIRY_WINDOW_DAYS"],
        )
        return jsonify(report.to_dict())
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/health")
def health():
    return jsonify({"status": "ok"})
