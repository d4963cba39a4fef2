"""
import_engine.validators - Sanitising and field rules for certificates.

Shared by the import pipeline and by manual create/update so both
paths accept exactly the same data.  Every check raises ValidationError
(or UnsafeContentError) with the message shown to the user; the import
engine turns those into per-row errors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from errors import UnsafeContentError, ValidationError
from import_engine.date_parser import parse_date

NAME_MAX_LENGTH = 500
EMAIL_MAX_LENGTH = 255
THUMBPRINT_MAX_LENGTH = 255

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Substrings that must never reach the store (object-key pollution payloads)
UNSAFE_TOKENS = ("__proto__", "constructor", "prototype")

EMPTY_EMAIL_SENTINEL = "EMPTY"

# ── User-facing messages ──────────────────────────────────────────────
MSG_INVALID_NAME = "Neplatný názov"
MSG_INVALID_EMAIL = "Neplatný email"
MSG_INVALID_EXPIRY = "Neplatný dátum"
MSG_INVALID_VALID_FROM = "Neplatný dátum začiatku platnosti"
MSG_DATE_ORDER = "Začiatok platnosti je neskôr ako dátum expirácie"
MSG_MISSING_THUMBPRINT = "Chýba thumbprint"
MSG_INVALID_THUMBPRINT = "Neplatný thumbprint"


@dataclass
class CertificateDraft:
    """A fully validated certificate, ready to be written to the store."""
    name: str
    expiry_date: datetime
    valid_from: Optional[datetime] = None
    email_address: Optional[str] = None
    thumbprint: Optional[str] = None


def sanitize_text(raw: object) -> str:
    """
    Return the trimmed string form of ``raw`` ("" for None/empty).
    Raises UnsafeContentError when it contains a pollution token.
    """
    if raw is None:
        return ""
    text = str(raw).strip()
    lowered = text.lower()
    if any(token in lowered for token in UNSAFE_TOKENS):
        raise UnsafeContentError()
    return text


def sanitize_date_input(raw: object) -> object:
    """Run the text check on a date cell but keep native values intact."""
    text = sanitize_text(raw)
    if isinstance(raw, str):
        return text
    return raw


def normalize_email(raw: object) -> Optional[str]:
    """Blank or the literal 'EMPTY' sentinel mean "no email"."""
    text = sanitize_text(raw)
    if not text or text.upper() == EMPTY_EMAIL_SENTINEL:
        return None
    return text


def _is_blank(raw: object) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def validate_certificate_fields(
    name: str,
    expiry_raw: object,
    *,
    valid_from_raw: object = None,
    email: Optional[str] = None,
    thumbprint: Optional[str] = None,
    valid_from_required: bool = False,
    thumbprint_required: bool = False,
) -> CertificateDraft:
    """
    Apply the ordered checks to already-sanitised input:

      1. name non-empty, ≤500 chars
      2. email (when given) ≤255 chars and shaped local@domain.tld
      3. dates parse (validity start only when given or required)
      4. validity start ≤ expiry
      5. thumbprint non-empty when required

    Returns a CertificateDraft or raises ValidationError on the first
    failing check.
    """
    if not name or len(name) > NAME_MAX_LENGTH:
        raise ValidationError(MSG_INVALID_NAME)

    if email and (len(email) > EMAIL_MAX_LENGTH or not EMAIL_RE.match(email)):
        raise ValidationError(MSG_INVALID_EMAIL)

    expiry_date = parse_date(expiry_raw)
    if expiry_date is None:
        raise ValidationError(MSG_INVALID_EXPIRY)

    valid_from = None
    if valid_from_required or not _is_blank(valid_from_raw):
        valid_from = parse_date(valid_from_raw)
        if valid_from is None:
            raise ValidationError(MSG_INVALID_VALID_FROM)

    if valid_from is not None and valid_from > expiry_date:
        raise ValidationError(MSG_DATE_ORDER)

    if thumbprint_required and not thumbprint:
        raise ValidationError(MSG_MISSING_THUMBPRINT)
    if thumbprint and len(thumbprint) > THUMBPRINT_MAX_LENGTH:
        raise ValidationError(MSG_INVALID_THUMBPRINT)

    return CertificateDraft(
        name=name,
        expiry_date=expiry_date,
        valid_from=valid_from,
        email_address=email or None,
        thumbprint=thumbprint or None,
    )
