"""
import_engine.report - Structured result of an import run.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ImportReport:
    imported: int = 0
    deleted: int = 0
    errors: list[dict] = field(default_factory=list)   # [{row, error}]

    def add_error(self, row: int, error: str):
        self.errors.append({"row": row, "error": error})

    def add_imported(self):
        self.imported += 1

    @property
    def message(self) -> str:
        return (f"Import dokončený. Úspešne importovaných: {self.imported}, "
                f"Chyby: {len(self.errors)}")

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "imported": self.imported,
            "errors": len(self.errors),
            "errorDetails": self.errors,
        }
