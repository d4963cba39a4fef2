"""
import_engine.row_processor - Validate and transform one record into a
CertificateDraft.

Single-responsibility: given a header→value record, either return a
draft ready to be persisted, or raise RowError.
"""

from __future__ import annotations

from typing import Mapping

from errors import ValidationError
from import_engine.field_map import (
    FIELD_LABELS, PROFILE_COLUMNS, ColumnMap, ImportProfile, resolve_columns,
)
from import_engine.validators import (
    CertificateDraft,
    normalize_email,
    sanitize_date_input,
    sanitize_text,
    validate_certificate_fields,
)


class RowError(Exception):
    """Raised when a row cannot be imported."""
    pass


class RowProcessor:
    """
    Applies one import profile to every record of a run.  Stateless
    between rows.
    """

    def __init__(self, profile: ImportProfile = ImportProfile.AUTOMATED):
        self.profile = profile
        self.column_map: ColumnMap = PROFILE_COLUMNS[profile]

    def process(self, record: Mapping) -> CertificateDraft:
        """
        Resolve columns, sanitise values, run the field checks.
        Raises RowError on any problem.
        """
        columns = resolve_columns(record.keys(), self.column_map)

        missing = [f for f in ("name", "valid_from", "expiry_date", "thumbprint")
                   if f in self.column_map.required and columns[f] is None]
        if missing:
            labels = ", ".join(FIELD_LABELS[f] for f in missing)
            raise RowError(f"Chýbajúce stĺpce: {labels}")

        def cell(field_name: str):
            header = columns[field_name]
            return record.get(header) if header is not None else None

        required = self.column_map.required
        try:
            name = sanitize_text(cell("name"))
            email = normalize_email(cell("email"))
            thumbprint = sanitize_text(cell("thumbprint")) or None
            expiry_raw = sanitize_date_input(cell("expiry_date"))
            valid_from_raw = sanitize_date_input(cell("valid_from"))

            return validate_certificate_fields(
                name,
                expiry_raw,
                valid_from_raw=valid_from_raw,
                email=email,
                thumbprint=thumbprint,
                valid_from_required="valid_from" in required,
                thumbprint_required="thumbprint" in required,
            )
        except ValidationError as exc:
            raise RowError(exc.message) from exc
