"""
errors - Application exception taxonomy.

Every error that may cross the HTTP boundary derives from AppError and
carries its status code plus a user-facing message.  api.errors turns
them into JSON responses.

Groups
------
  400  ValidationError, UnsafeContentError, import file guards
  401  UnauthorizedError
  404  NotFoundError
  408  ImportTimeoutError
  500  InternalError
"""

from __future__ import annotations


class AppError(Exception):
    """Root application error."""
    status_code = 500
    message = "Interná chyba servera"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> dict:
        return {"error": self.message}


# ── 400 ────────────────────────────────────────────────────────────────

class ValidationError(AppError):
    status_code = 400
    message = "Neplatné údaje"


class UnsafeContentError(ValidationError):
    message = "Nebezpečný obsah"


# ── 401 / 404 ──────────────────────────────────────────────────────────

class UnauthorizedError(AppError):
    status_code = 401
    message = "Neautorizovaný prístup. Musíte byť prihlásený."


class NotFoundError(AppError):
    status_code = 404
    message = "Certifikát nebol nájdený"


# ── Import file guards ─────────────────────────────────────────────────

class ImportFileError(AppError):
    """File-level import failure; aborts the whole import."""
    status_code = 400
    message = "Nepodarilo sa importovať súbor"


class FileTooLargeError(ImportFileError):
    message = "Súbor je príliš veľký"

    @classmethod
    def for_limit(cls, max_bytes: int) -> "FileTooLargeError":
        return cls(f"{cls.message}. Maximum: {max_bytes / 1024 / 1024:g}MB")


class UnsupportedFormatError(ImportFileError):
    message = "Nepodporovaný formát súboru. Podporované sú: .xlsx, .xls, .csv"


class ParseFailureError(ImportFileError):
    message = "Chyba pri parsovaní súboru"


class EmptyFileError(ImportFileError):
    message = "Súbor je prázdny alebo neobsahuje dáta"


class TooManyRowsError(ImportFileError):
    message = "Príliš veľa riadkov"


class ImportTimeoutError(ImportFileError):
    status_code = 408
    message = "Spracovanie súboru trvalo príliš dlho"


# ── 500 ────────────────────────────────────────────────────────────────

class InternalError(AppError):
    status_code = 500
