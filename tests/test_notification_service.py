import smtplib
from datetime import datetime

import pytest

import services.notification_service as notification
from services.notification_service import (
    NotificationData, SmtpMailer, SmtpSettings,
    build_message, days_word, render_html, render_subject, render_text,
)


def _data(name="vpn.example.sk", days=12):
    return NotificationData(
        certificate_name=name,
        expiry_date=datetime(2025, 7, 4),
        days_remaining=days,
        recipient_email="owner@example.sk",
    )


class FakeSMTP:
    """Stands in for smtplib.SMTP; records the conversation."""

    instances = []
    fail_with = None
    login_error = None

    def __init__(self, host, port, timeout=None):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.host, self.port, self.timeout = host, port, timeout
        self.calls = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False

    def ehlo(self):
        self.calls.append("ehlo")

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user, password))
        if FakeSMTP.login_error is not None:
            raise FakeSMTP.login_error

    def noop(self):
        self.calls.append("noop")

    def sendmail(self, from_addr, to_addrs, msg):
        self.sent.append((from_addr, to_addrs, msg))


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    FakeSMTP.login_error = None
    monkeypatch.setattr(notification.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


@pytest.mark.parametrize("days, word", [
    (1, "deň"), (2, "dni"), (4, "dni"), (5, "dní"), (30, "dní"), (0, "dni"), (-3, "dni"),
])
def test_days_word(days, word):
    assert days_word(days) == word


def test_text_body():
    body = render_text(_data(days=1))
    assert "certifikát \"vpn.example.sk\"" in body
    assert "Dátum expirácie: 04.07.2025" in body
    assert "Zostáva: 1 deň" in body


def test_subject():
    assert render_subject(_data()) == "⚠️ Certifikát čoskoro expiruje - vpn.example.sk"


def test_html_escapes_name():
    page = render_html(_data(name="<b>evil</b> & co"))
    assert "<b>evil</b>" not in page
    assert "&lt;b&gt;evil&lt;/b&gt; &amp; co" in page
    assert "12 dní" in page


def test_message_has_both_parts():
    msg = build_message(_data(), "noreply@example.sk")
    assert msg["To"] == "owner@example.sk"
    assert msg["From"] == "noreply@example.sk"
    assert [p.get_content_type() for p in msg.get_payload()] == ["text/plain", "text/html"]


def test_send_success(fake_smtp):
    mailer = SmtpMailer(SmtpSettings(host="smtp.example.sk", port=587, username="bot",
                                     password="secret", from_address="noreply@example.sk"))
    result = mailer.send_notification(_data())

    assert result.success is True
    conn = fake_smtp.instances[0]
    assert (conn.host, conn.port) == ("smtp.example.sk", 587)
    assert conn.calls == ["ehlo", "starttls", "ehlo", ("login", "bot", "secret"), "quit"]
    from_addr, to_addrs, _ = conn.sent[0]
    assert from_addr == "noreply@example.sk"
    assert to_addrs == ["owner@example.sk"]


def test_no_tls_no_login(fake_smtp):
    mailer = SmtpMailer(SmtpSettings(host="relay", port=25, use_tls=False))
    assert mailer.send_notification(_data()).success
    assert fake_smtp.instances[0].calls == ["ehlo", "quit"]


def test_send_failure_is_reported_not_raised(fake_smtp):
    fake_smtp.fail_with = ConnectionRefusedError("connection refused")
    mailer = SmtpMailer(SmtpSettings(host="down"))
    result = mailer.send_notification(_data())
    assert result.success is False
    assert "connection refused" in result.error


def test_smtp_protocol_error(fake_smtp):
    fake_smtp.fail_with = smtplib.SMTPServerDisconnected()
    result = SmtpMailer(SmtpSettings(host="x")).send_notification(_data())
    assert result.success is False
    assert result.error == "SMTPServerDisconnected"


def test_verify(fake_smtp):
    mailer = SmtpMailer(SmtpSettings(host="relay", use_tls=False))
    assert mailer.verify() is True
    assert "noop" in fake_smtp.instances[0].calls

    fake_smtp.fail_with = OSError("no route")
    assert mailer.verify() is False


def test_rejected_login_still_closes_connection(fake_smtp):
    """A failed handshake must not leave the socket open."""
    fake_smtp.login_error = smtplib.SMTPAuthenticationError(535, b"bad credentials")
    mailer = SmtpMailer(SmtpSettings(host="smtp.example.sk", username="bot", password="wrong"))

    result = mailer.send_notification(_data())
    assert result.success is False
    conn = fake_smtp.instances[0]
    assert conn.calls[-1] == "quit"
    assert conn.sent == []

    assert mailer.verify() is False
    assert fake_smtp.instances[1].calls[-1] == "quit"
