#!/usr/bin/env python3
"""
CertReg - Certificate Registry Web Application
===============================================

Single-command run:  python main.py

See config.py for all environment-variable tunables.
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify

import config
from api import api_bp, DB_EXTENSION, MAILER_EXTENSION
from db import init_db
from services.notification_service import SmtpMailer, SmtpSettings

logger = logging.getLogger(__name__)


def smtp_settings_from_config() -> SmtpSettings:
    return SmtpSettings(
        host=config.SMTP_HOST,
        port=config.SMTP_PORT,
        username=config.SMTP_USER,
        password=config.SMTP_PASS,
        from_address=config.SMTP_FROM,
        use_tls=config.SMTP_TLS,
        timeout=config.SMTP_TIMEOUT,
    )


def create_app(db_url: str | None = None, mailer=None) -> Flask:
    """
    Flask application factory.

    The store handle and the mailer are built here and injected into
    app.extensions; tests pass their own.
    """
    app = Flask(__name__)
    app.secret_key = config.SECRET
    app.config.update(
        PUBLIC_READ=config.PUBLIC_READ,
        IMPORT_PROFILE=config.IMPORT_PROFILE,
        REPLACE_POLICIES=dict(config.REPLACE_POLICIES),
        IMPORT_MAX_BYTES=config.IMPORT_MAX_BYTES,
        # multipart framing on top of the file itself
        MAX_CONTENT_LENGTH=config.IMPORT_MAX_BYTES + 64 * 1024,
        IMPORT_MAX_ROWS=config.IMPORT_MAX_ROWS,
        IMPORT_TIMEOUT=config.IMPORT_TIMEOUT,
        EXPIRY_WINDOW_DAYS=config.EXPIRY_WINDOW_DAYS,
    )
    app.json.ensure_ascii = False

    # ── Initialise database ─────────────────────────────────────────
    db = init_db(db_url or config.DB_URL)
    app.extensions[DB_EXTENSION] = db
    app.extensions[MAILER_EXTENSION] = mailer or SmtpMailer(smtp_settings_from_config())

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    # ── Error handlers outside the API blueprint ────────────────────
    @app.errorhandler(404)
    def _404(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(500)
    def _500(e):
        return jsonify({"error": "internal server error"}), 500

    return app


def main():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("=" * 56)
    print("  CertReg - Certificate Registry")
    print("=" * 56)

    app = create_app()
    print(f"  Database: {config.DB_URL}")
    print(f"  Import profile: {config.IMPORT_PROFILE}, "
          f"replace policies: {config.REPLACE_POLICIES}")

    mailer = app.extensions[MAILER_EXTENSION]
    if isinstance(mailer, SmtpMailer) and not mailer.verify():
        logger.warning(f"SMTP at {config.SMTP_HOST}:{config.SMTP_PORT} unreachable - "
                       "expiry mails will fail until it is fixed")

    print(f"\n  http://{config.HOST}:{config.PORT}/api/v1")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
