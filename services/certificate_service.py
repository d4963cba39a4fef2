"""
services.certificate_service - CRUD operations on Certificate records.

All session management is the caller's responsibility (open before,
close/commit after).  This keeps the service testable and allows
the caller to batch multiple operations in one transaction.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models import Certificate
from errors import NotFoundError
from import_engine.validators import (
    CertificateDraft,
    normalize_email,
    sanitize_date_input,
    sanitize_text,
    validate_certificate_fields,
)


def draft_from_payload(data: dict) -> CertificateDraft:
    """
    Validate a JSON body ({name, expiryDate, emailAddress?, validFrom?})
    with the manual-entry rules.  Raises ValidationError.
    """
    return validate_certificate_fields(
        sanitize_text(data.get("name")),
        sanitize_date_input(data.get("expiryDate")),
        valid_from_raw=sanitize_date_input(data.get("validFrom")),
        email=normalize_email(data.get("emailAddress")),
    )


class CertificateService:

    # ── Create ─────────────────────────────────────────────────────────

    @staticmethod
    def create(session: Session, data: dict) -> Certificate:
        """Create a manually entered certificate (no thumbprint)."""
        draft = draft_from_payload(data)
        cert = Certificate(
            name=draft.name,
            valid_from=draft.valid_from,
            expiry_date=draft.expiry_date,
            email_address=draft.email_address,
            notification_sent=False,
        )
        session.add(cert)
        session.flush()
        return cert

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get(session: Session, cert_id: int) -> Certificate | None:
        return session.get(Certificate, cert_id)

    @staticmethod
    def get_or_404(session: Session, cert_id: int) -> Certificate:
        cert = session.get(Certificate, cert_id)
        if cert is None:
            raise NotFoundError()
        return cert

    @staticmethod
    def list_all(session: Session) -> list[Certificate]:
        """All certificates, soonest expiry first."""
        return (
            session.query(Certificate)
            .order_by(Certificate.expiry_date.asc(), Certificate.id.asc())
            .all()
        )

    # ── Update ─────────────────────────────────────────────────────────

    @staticmethod
    def update(session: Session, cert: Certificate, data: dict) -> Certificate:
        """
        Replace name, dates and email.  The notification flag is always
        cleared so a moved expiry date is swept again.  The thumbprint
        is left untouched: it records where the row came from.
        """
        draft = draft_from_payload(data)
        cert.name = draft.name
        cert.valid_from = draft.valid_from
        cert.expiry_date = draft.expiry_date
        cert.email_address = draft.email_address
        cert.notification_sent = False
        session.flush()
        return cert

    @staticmethod
    def mark_notified(session: Session, cert: Certificate) -> None:
        cert.notification_sent = True
        session.flush()

    # ── Delete ─────────────────────────────────────────────────────────

    @staticmethod
    def delete(session: Session, cert: Certificate) -> None:
        session.delete(cert)
        session.flush()
