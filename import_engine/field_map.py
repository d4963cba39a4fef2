"""
import_engine.field_map - Column-name ↔ certificate-field mapping.

Two header conventions exist in the wild:

  manual     hand-maintained sheets with Slovak or English headers
             (názov, dátum_platnosti, email …); validity start and
             thumbprint are optional.
  automated  certificate-store exports with fixed headers
             (CN, Valid_From, Valid_To, email, thumbprint); validity
             start and thumbprint are required.

Both run through the same pipeline; only the ColumnMap differs.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence


class ImportProfile(str, enum.Enum):
    MANUAL = "manual"
    AUTOMATED = "automated"


class ReplacePolicy(str, enum.Enum):
    ALL = "all"              # wipe the table
    IMPORTED = "imported"    # wipe rows carrying a thumbprint only
    NONE = "none"            # append


# Logical field → label used in "missing column" messages
FIELD_LABELS: dict[str, str] = {
    "name":        "názov",
    "valid_from":  "platnosť od",
    "expiry_date": "dátum platnosti",
    "email":       "email",
    "thumbprint":  "thumbprint",
}


@dataclass(frozen=True)
class ColumnMap:
    """Accepted header synonyms per logical field, in priority order."""
    name: tuple[str, ...]
    valid_from: tuple[str, ...]
    expiry_date: tuple[str, ...]
    email: tuple[str, ...]
    thumbprint: tuple[str, ...]
    required: frozenset[str]

    def candidates(self, field_name: str) -> tuple[str, ...]:
        return getattr(self, field_name)


FIELDS = ("name", "valid_from", "expiry_date", "email", "thumbprint")

PROFILE_COLUMNS: dict[ImportProfile, ColumnMap] = {
    ImportProfile.MANUAL: ColumnMap(
        name=("názov", "name", "nazov"),
        valid_from=("valid_from", "validFrom", "platnosť_od", "platnost_od",
                    "platnosť od", "platnost od"),
        expiry_date=("dátum_platnosti", "datum_platnosti", "expiry_date",
                     "expiryDate", "dátum platnosti", "datum platnosti"),
        email=("email", "email_address", "emailAddress"),
        thumbprint=("thumbprint",),
        required=frozenset({"name", "expiry_date"}),
    ),
    ImportProfile.AUTOMATED: ColumnMap(
        name=("CN",),
        valid_from=("Valid_From",),
        expiry_date=("Valid_To",),
        email=("email", "Email"),
        thumbprint=("thumbprint", "Thumbprint"),
        required=frozenset({"name", "valid_from", "expiry_date", "thumbprint"}),
    ),
}


def resolve_column(headers: Iterable, candidates: Sequence[str]) -> Optional[str]:
    """
    Return the record header matching the first candidate, or None.

    Comparison is case-insensitive on whitespace-trimmed text.  Among
    several matching headers the first encountered wins.  Never raises.
    """
    headers = list(headers)
    for candidate in candidates:
        wanted = candidate.strip().lower()
        for header in headers:
            if header is None:
                continue
            if str(header).strip().lower() == wanted:
                return header
    return None


def resolve_columns(headers: Iterable, column_map: ColumnMap) -> dict[str, Optional[str]]:
    """Map every logical field to its header (or None) for one record."""
    headers = list(headers)
    return {f: resolve_column(headers, column_map.candidates(f)) for f in FIELDS}


def parse_profile(value: str | ImportProfile | None,
                  default: ImportProfile = ImportProfile.AUTOMATED) -> ImportProfile:
    """Accept 'manual' / 'automated' (any case); raise ValueError otherwise."""
    if value is None or value == "":
        return default
    if isinstance(value, ImportProfile):
        return value
    return ImportProfile(str(value).strip().lower())


def parse_replace_policy(value: str | ReplacePolicy | None,
                         default: ReplacePolicy = ReplacePolicy.IMPORTED) -> ReplacePolicy:
    if value is None or value == "":
        return default
    if isinstance(value, ReplacePolicy):
        return value
    return ReplacePolicy(str(value).strip().lower())


# Each profile replaces the rows it created on a previous run:
# manual sheets carry no thumbprint, so they can only supersede everything.
DEFAULT_REPLACE_POLICY: dict[ImportProfile, ReplacePolicy] = {
    ImportProfile.MANUAL: ReplacePolicy.ALL,
    ImportProfile.AUTOMATED: ReplacePolicy.IMPORTED,
}


def policy_for_profile(profile: ImportProfile,
                       overrides: Mapping[str, str | None] | None = None) -> ReplacePolicy:
    """Configured policy for ``profile``, else its default.  Raises ValueError."""
    configured = (overrides or {}).get(profile.value)
    return parse_replace_policy(configured, default=DEFAULT_REPLACE_POLICY[profile])
