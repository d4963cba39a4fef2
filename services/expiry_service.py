"""
services.expiry_service - Notification sweep for certificates nearing expiry.

Triggered from outside (cron hitting the check-expiry endpoint); there
is no scheduler in-process.  A certificate is mailed once per expiry
date: the flag is set after a successful send and cleared again by any
manual edit.  Failed sends leave the flag alone so the next sweep
retries them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from db.models import Certificate
from services.certificate_service import CertificateService
from services.notification_service import NotificationData

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
STATUS_ERROR = "error"


def utcnow() -> datetime:
    """Naive UTC, matching how the DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def days_remaining(expiry_date: datetime, now: datetime) -> int:
    return math.ceil((expiry_date - now) / timedelta(days=1))


@dataclass
class SweepReport:
    total_checked: int = 0
    success_count: int = 0
    failure_count: int = 0
    results: list[dict] = field(default_factory=list)

    @property
    def message(self) -> str:
        if not self.total_checked:
            return "Žiadne certifikáty na odoslanie notifikácií"
        return (f"Kontrola dokončená. Úspešne: {self.success_count}, "
                f"Chyby: {self.failure_count}")

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "totalChecked": self.total_checked,
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "results": self.results,
        }


class ExpiryService:

    @staticmethod
    def due(session: Session, now: datetime,
            window_days: int = DEFAULT_WINDOW_DAYS) -> list[Certificate]:
        """Unnotified certificates with an address expiring within the window."""
        horizon = now + timedelta(days=window_days)
        return (
            session.query(Certificate)
            .filter(
                Certificate.expiry_date <= horizon,
                Certificate.notification_sent.is_(False),
                Certificate.email_address.isnot(None),
            )
            .order_by(Certificate.expiry_date.asc(), Certificate.id.asc())
            .all()
        )

    @staticmethod
    def sweep(
        session: Session,
        mailer,
        now: Optional[datetime] = None,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> SweepReport:
        """
        Mail every due certificate.  The flag is committed per certificate
        so a crash halfway never re-sends mails already delivered.
        """
        now = now or utcnow()
        report = SweepReport()
        due = ExpiryService.due(session, now, window_days)
        report.total_checked = len(due)

        for cert in due:
            remaining = days_remaining(cert.expiry_date, now)
            entry = {
                "id": cert.id,
                "name": cert.name,
                "email": cert.email_address,
                "daysRemaining": remaining,
            }
            data = NotificationData(
                certificate_name=cert.name,
                expiry_date=cert.expiry_date,
                days_remaining=remaining,
                recipient_email=cert.email_address,
            )

            try:
                result = mailer.send_notification(data)
            except Exception as exc:
                logger.exception(f"Notification for certificate {cert.id} raised")
                report.failure_count += 1
                entry.update(status=STATUS_ERROR,
                             error=str(exc) or "Chyba pri odosielaní emailu")
                report.results.append(entry)
                continue

            if result.success:
                CertificateService.mark_notified(session, cert)
                session.commit()
                report.success_count += 1
                entry["status"] = STATUS_SUCCESS
            else:
                report.failure_count += 1
                entry.update(status=STATUS_FAILED, error=result.error or "Neznáma chyba")
            report.results.append(entry)

        logger.info(f"Expiry sweep: {report.total_checked} due, "
                    f"{report.success_count} sent, {report.failure_count} failed")
        return report
