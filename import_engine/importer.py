"""
import_engine.importer - Top-level orchestrator.

Coordinates file guards → file_reader → replace policy →
row_processor → DB commit and produces a structured ImportReport.

File-level problems (size, format, decode failure/timeout, row count)
raise an ImportFileError before anything is written.  Row-level
problems never raise; they end up in ImportReport.errors.
"""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Optional

from sqlalchemy.orm import Session

import config
from db.engine import Database
from db.models import Certificate
from errors import (
    EmptyFileError, FileTooLargeError, ImportTimeoutError,
    InternalError, TooManyRowsError,
)
from import_engine.field_map import DEFAULT_REPLACE_POLICY, ImportProfile, ReplacePolicy
from import_engine.file_reader import detect_format, read_records
from import_engine.report import ImportReport
from import_engine.row_processor import RowError, RowProcessor

logger = logging.getLogger(__name__)

HEADER_OFFSET = 2   # row 1 = header, data rows are 1-based


def run_import(
    db: Database,
    file_content: bytes,
    *,
    mimetype: Optional[str] = None,
    filename: Optional[str] = None,
    profile: ImportProfile = ImportProfile.AUTOMATED,
    replace_policy: Optional[ReplacePolicy] = None,
    max_bytes: int = config.IMPORT_MAX_BYTES,
    max_rows: int = config.IMPORT_MAX_ROWS,
    decode_timeout: float = config.IMPORT_TIMEOUT,
) -> ImportReport:
    """
    Import a CSV / XLS / XLSX blob into the certificate table.

    Parameters
    ----------
    db : store handle owning the session factory
    file_content : raw upload bytes
    mimetype, filename : as declared by the client; either must be accepted
    profile : column mapping + required-field rules
    replace_policy : which existing rows to drop before inserting;
                     None means the profile default

    Returns
    -------
    ImportReport with per-row error details
    """
    if len(file_content) > max_bytes:
        raise FileTooLargeError.for_limit(max_bytes)

    fmt = detect_format(file_content, mimetype, filename)
    records = _decode_with_timeout(file_content, fmt, decode_timeout)

    if not records:
        raise EmptyFileError()
    if len(records) > max_rows:
        raise TooManyRowsError(f"Príliš veľa riadkov. Maximum: {max_rows}")

    if replace_policy is None:
        replace_policy = DEFAULT_REPLACE_POLICY[profile]

    report = ImportReport()
    processor = RowProcessor(profile)
    session = db.session()

    try:
        # Deletes and inserts share one transaction: readers never see
        # the table emptied but not yet refilled.
        report.deleted = apply_replace_policy(session, replace_policy)

        for row_idx, record in enumerate(records, start=HEADER_OFFSET):
            try:
                draft = processor.process(record)
            except RowError as exc:
                report.add_error(row_idx, str(exc))
                continue

            cert = Certificate(
                name=draft.name,
                valid_from=draft.valid_from,
                expiry_date=draft.expiry_date,
                email_address=draft.email_address,
                thumbprint=draft.thumbprint,
                notification_sent=False,
            )
            session.add(cert)
            report.add_imported()

        session.commit()
    except Exception as exc:
        session.rollback()
        logger.exception(f"Import of {filename or 'upload'} failed, rolled back")
        raise InternalError("Nepodarilo sa importovať súbor") from exc
    finally:
        session.close()

    logger.info(
        f"Import {filename or 'upload'} ({profile.value}, replace={replace_policy.value}): "
        f"{report.imported} imported, {len(report.errors)} rejected, "
        f"{report.deleted} replaced")
    return report


def apply_replace_policy(session: Session, policy: ReplacePolicy) -> int:
    """Delete the rows the policy supersedes.  Returns the number deleted."""
    if policy is ReplacePolicy.NONE:
        return 0
    query = session.query(Certificate)
    if policy is ReplacePolicy.IMPORTED:
        query = query.filter(Certificate.thumbprint.isnot(None))
    return query.delete(synchronize_session=False)


def _decode_with_timeout(content: bytes, fmt: str, timeout: float) -> list[dict]:
    """
    Run the decoder in a worker thread and stop waiting after ``timeout``
    seconds.  Nothing has been written yet when the timeout fires.
    """
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    future = executor.submit(read_records, content, fmt)
    try:
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError as exc:
        future.cancel()
        logger.warning(f"Decoding {fmt} upload exceeded {timeout:g}s")
        raise ImportTimeoutError() from exc
    finally:
        executor.shutdown(wait=False)
