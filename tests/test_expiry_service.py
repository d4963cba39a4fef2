from datetime import datetime, timedelta

import pytest

from db.models import Certificate
from services.expiry_service import ExpiryService, days_remaining

NOW = datetime(2025, 6, 1, 8, 0)


def _add(session, name, expiry, email="owner@example.com", notified=False):
    cert = Certificate(name=name, expiry_date=expiry, email_address=email,
                       notification_sent=notified)
    session.add(cert)
    session.commit()
    return cert


def test_window_boundary(session, mailer):
    """Exactly 30 days out is due; 31 days out is not."""
    _add(session, "edge", NOW + timedelta(days=30))
    _add(session, "outside", NOW + timedelta(days=31))

    report = ExpiryService.sweep(session, mailer, now=NOW)

    assert report.total_checked == 1
    assert [d.certificate_name for d in mailer.sent] == ["edge"]
    assert mailer.sent[0].days_remaining == 30


def test_already_expired_is_included_with_negative_days(session, mailer):
    _add(session, "gone", NOW - timedelta(days=3))
    report = ExpiryService.sweep(session, mailer, now=NOW)
    assert report.results[0]["daysRemaining"] == -3
    assert report.results[0]["status"] == "success"


def test_skips_flagged_and_addressless(session, mailer):
    _add(session, "done", NOW + timedelta(days=5), notified=True)
    _add(session, "nobody", NOW + timedelta(days=5), email=None)
    report = ExpiryService.sweep(session, mailer, now=NOW)
    assert report.total_checked == 0
    assert report.to_dict()["message"] == "Žiadne certifikáty na odoslanie notifikácií"
    assert mailer.sent == []


def test_second_sweep_sends_nothing(session, mailer):
    cert = _add(session, "once", NOW + timedelta(days=10))

    first = ExpiryService.sweep(session, mailer, now=NOW)
    second = ExpiryService.sweep(session, mailer, now=NOW)

    assert first.success_count == 1
    assert second.total_checked == 0
    assert len(mailer.sent) == 1
    session.refresh(cert)
    assert cert.notification_sent is True


def test_failed_send_is_retried_next_time(session, mailer):
    cert = _add(session, "flaky", NOW + timedelta(days=2), email="down@example.com")
    mailer.fail_for.add("down@example.com")

    report = ExpiryService.sweep(session, mailer, now=NOW)
    assert report.failure_count == 1
    assert report.results[0]["status"] == "failed"
    assert report.results[0]["error"] == "mailbox unavailable"
    session.refresh(cert)
    assert cert.notification_sent is False

    mailer.fail_for.clear()
    retry = ExpiryService.sweep(session, mailer, now=NOW)
    assert retry.success_count == 1


def test_mailer_exception_does_not_stop_the_sweep(session, mailer):
    _add(session, "a", NOW + timedelta(days=1), email="boom@example.com")
    _add(session, "b", NOW + timedelta(days=2), email="ok@example.com")
    mailer.raise_for.add("boom@example.com")

    report = ExpiryService.sweep(session, mailer, now=NOW)

    assert report.to_dict() == {
        "message": "Kontrola dokončená. Úspešne: 1, Chyby: 1",
        "totalChecked": 2,
        "successCount": 1,
        "failureCount": 1,
        "results": [
            {"id": 1, "name": "a", "email": "boom@example.com", "daysRemaining": 1,
             "status": "error", "error": "smtp exploded"},
            {"id": 2, "name": "b", "email": "ok@example.com", "daysRemaining": 2,
             "status": "success"},
        ],
    }


def test_edit_rearms_notification(session, mailer):
    from services.certificate_service import CertificateService

    cert = _add(session, "renew", NOW + timedelta(days=3))
    ExpiryService.sweep(session, mailer, now=NOW)

    CertificateService.update(session, cert, {
        "name": "renew", "expiryDate": "2025-06-20", "emailAddress": "owner@example.com"})
    session.commit()

    report = ExpiryService.sweep(session, mailer, now=NOW)
    assert report.success_count == 1
    assert len(mailer.sent) == 2


@pytest.mark.parametrize("delta, expected", [
    (timedelta(days=1), 1),
    (timedelta(hours=1), 1),
    (timedelta(days=2, seconds=1), 3),
    (timedelta(0), 0),
    (-timedelta(hours=23), 0),
    (-timedelta(days=1, hours=1), -1),
])
def test_days_remaining_rounds_up(delta, expected):
    assert days_remaining(NOW + delta, NOW) == expected


def test_delivery_flagged_through_certificate_service(session, mailer, monkeypatch):
    from services.certificate_service import CertificateService

    flagged = []
    real_mark = CertificateService.mark_notified

    def spy(sess, cert):
        flagged.append(cert.name)
        real_mark(sess, cert)

    monkeypatch.setattr(CertificateService, "mark_notified", staticmethod(spy))
    _add(session, "sent", NOW + timedelta(days=3))
    mailer.fail_for.add("bounce@example.com")
    _add(session, "bounced", NOW + timedelta(days=3), email="bounce@example.com")

    ExpiryService.sweep(session, mailer, now=NOW)
    assert flagged == ["sent"]
