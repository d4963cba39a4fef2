"""
import_engine.file_reader - Decode uploaded spreadsheets into records.

Responsibilities:
  • format acceptance (declared MIME type or file extension)
  • format detection (content signature first, then extension / MIME)
  • CSV: BOM removal, UTF-8 with CP1250 fallback, ',' / ';' / tab
    delimiter detection, header and value whitespace stripping
  • XLSX via openpyxl, XLS via xlrd (first sheet, first row = header)

Every decoder returns list[dict] of header → cell value.  Fully blank
rows are dropped.  Malformed input raises ParseFailureError.
"""

from __future__ import annotations

import csv
import io
import logging
import os
from typing import Iterable, Optional

import openpyxl
import xlrd

from errors import ParseFailureError, UnsupportedFormatError

logger = logging.getLogger(__name__)

FORMAT_CSV = "csv"
FORMAT_XLSX = "xlsx"
FORMAT_XLS = "xls"

MIME_FORMATS: dict[str, str] = {
    "text/csv": FORMAT_CSV,
    "application/vnd.ms-excel": FORMAT_XLS,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": FORMAT_XLSX,
}

EXTENSION_FORMATS: dict[str, str] = {
    ".csv": FORMAT_CSV,
    ".xls": FORMAT_XLS,
    ".xlsx": FORMAT_XLSX,
}

_XLSX_MAGIC = b"PK\x03\x04"
_XLS_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

_CSV_DELIMITERS = (",", ";", "\t")


# ── Format handling ───────────────────────────────────────────────────

def _mime(mimetype: Optional[str]) -> str:
    return (mimetype or "").split(";", 1)[0].strip().lower()


def _extension(filename: Optional[str]) -> str:
    return os.path.splitext(filename or "")[1].lower()


def is_accepted(mimetype: Optional[str], filename: Optional[str]) -> bool:
    return _mime(mimetype) in MIME_FORMATS or _extension(filename) in EXTENSION_FORMATS


def detect_format(content: bytes, mimetype: Optional[str], filename: Optional[str]) -> str:
    """
    Return one of FORMAT_CSV / FORMAT_XLSX / FORMAT_XLS.
    Raises UnsupportedFormatError when neither MIME type nor extension
    is accepted.
    """
    if not is_accepted(mimetype, filename):
        raise UnsupportedFormatError()

    # Browsers on Windows label .csv as application/vnd.ms-excel,
    # so trust the bytes before the label.
    if content.startswith(_XLSX_MAGIC):
        return FORMAT_XLSX
    if content.startswith(_XLS_MAGIC):
        return FORMAT_XLS

    declared = EXTENSION_FORMATS.get(_extension(filename)) or MIME_FORMATS.get(_mime(mimetype))
    if declared == FORMAT_XLSX:
        # let openpyxl report the broken archive
        return FORMAT_XLSX
    # Plain-text exports are routinely saved as .xls
    return FORMAT_CSV


def read_records(content: bytes, fmt: str) -> list[dict]:
    """Decode ``content`` in the given format.  Raises ParseFailureError."""
    readers = {
        FORMAT_CSV: read_csv,
        FORMAT_XLSX: read_xlsx,
        FORMAT_XLS: read_xls,
    }
    try:
        return readers[fmt](content)
    except ParseFailureError:
        raise
    except Exception as exc:
        logger.warning(f"Could not decode {fmt} upload: {exc}")
        raise ParseFailureError(f"Chyba pri parsovaní súboru: {exc}") from exc


# ── CSV ───────────────────────────────────────────────────────────────

def read_csv(raw: str | bytes) -> list[dict]:
    text = _decode(raw)
    if not text.strip():
        return []

    delimiter = _detect_delimiter(text)
    reader = csv.DictReader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)
    records = []
    try:
        if reader.fieldnames is None:
            return []

        # Strip whitespace from every header
        reader.fieldnames = [h.strip() for h in reader.fieldnames]

        for row in reader:
            record = {
                k: (v.strip() if isinstance(v, str) else v)
                for k, v in row.items() if k is not None
            }
            if _is_blank_row(record.values()):
                continue
            records.append(record)
    except csv.Error as exc:
        raise ParseFailureError(f"Chyba pri parsovaní CSV: {exc}") from exc
    return records


def _decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        # Strip UTF-8 BOM
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            # Excel "CSV" saved on a Central-European Windows
            return raw.decode("cp1250", errors="replace")
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw


def _detect_delimiter(text: str) -> str:
    header = text.lstrip().splitlines()[0] if text.strip() else ""
    counts = {d: header.count(d) for d in _CSV_DELIMITERS}
    best = max(_CSV_DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] else ","


# ── Spreadsheets ──────────────────────────────────────────────────────

def read_xlsx(content: bytes) -> list[dict]:
    wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    try:
        if not wb.worksheets:
            return []
        ws = wb.worksheets[0]
        return _rows_to_records(ws.iter_rows(values_only=True))
    finally:
        wb.close()


def read_xls(content: bytes) -> list[dict]:
    book = xlrd.open_workbook(file_contents=content, on_demand=True)
    try:
        if book.nsheets == 0:
            return []
        sheet = book.sheet_by_index(0)
        return _rows_to_records(sheet.row_values(i) for i in range(sheet.nrows))
    finally:
        book.release_resources()


def _rows_to_records(rows: Iterable[Iterable]) -> list[dict]:
    """First non-blank row is the header; later blank rows are skipped."""
    header: Optional[list] = None
    records = []
    for row in rows:
        row = list(row)
        if header is None:
            if _is_blank_row(row):
                continue
            header = [str(h).strip() if h is not None else None for h in row]
            continue
        if _is_blank_row(row):
            continue
        record = {}
        for i, h in enumerate(header):
            if not h:
                continue
            # Cells past the end of a short row read as missing
            v = row[i] if i < len(row) else None
            record[h] = v.strip() if isinstance(v, str) else v
        records.append(record)
    return records


def _is_blank_row(values: Iterable) -> bool:
    for v in values:
        if v is None:
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return False
    return True
