"""
services.notification_service - Expiry e-mails and SMTP transport.

The expiry sweep only depends on the mailer contract:

    mailer.send_notification(NotificationData) -> EmailResult

SmtpMailer is the production implementation.  It never raises; a
failed send comes back as EmailResult(success=False, error=...).
"""

from __future__ import annotations

import html
import logging
import smtplib
from dataclasses import dataclass
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class NotificationData:
    certificate_name: str
    expiry_date: datetime
    days_remaining: int
    recipient_email: str


@dataclass
class EmailResult:
    success: bool
    error: Optional[str] = None


@dataclass
class SmtpSettings:
    host: str
    port: int = 587
    username: str = ""
    password: str = ""
    from_address: str = "certreg@localhost"
    use_tls: bool = True
    timeout: float = 30.0


# ── Rendering ─────────────────────────────────────────────────────────

def days_word(days: int) -> str:
    """Slovak plural for 'day'."""
    if days == 1:
        return "deň"
    if days < 5:
        return "dni"
    return "dní"


def format_date(value: datetime) -> str:
    return value.strftime("%d.%m.%Y")


def render_subject(data: NotificationData) -> str:
    return f"⚠️ Certifikát čoskoro expiruje - {data.certificate_name}"


def render_text(data: NotificationData) -> str:
    return (
        "Dobrý deň,\n\n"
        f"upozorňujeme Vás, že certifikát \"{data.certificate_name}\" čoskoro expiruje.\n\n"
        f"Dátum expirácie: {format_date(data.expiry_date)}\n"
        f"Zostáva: {data.days_remaining} {days_word(data.days_remaining)}\n\n"
        "Prosím, obnovte certifikát čo najskôr.\n\n"
        "S pozdravom,\n"
        "Certificate Registry System\n"
    )


_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <style>
      body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
      .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
      .header {{ background-color: #f97316; color: white; padding: 20px; border-radius: 5px 5px 0 0; }}
      .content {{ background-color: #f9fafb; padding: 20px; border: 1px solid #e5e7eb; }}
      .info-box {{ background-color: white; padding: 15px; margin: 15px 0; border-left: 4px solid #f97316; }}
      .footer {{ background-color: #f3f4f6; padding: 15px; text-align: center; font-size: 12px; color: #6b7280; }}
      .warning {{ color: #dc2626; font-weight: bold; }}
    </style>
  </head>
  <body>
    <div class="container">
      <div class="header">
        <h2 style="margin: 0;">⚠️ Upozornenie na expiráciu certifikátu</h2>
      </div>
      <div class="content">
        <p>Dobrý deň,</p>
        <p>upozorňujeme Vás, že certifikát <strong>"{name}"</strong> čoskoro expiruje.</p>
        <div class="info-box">
          <p style="margin: 5px 0;"><strong>Názov certifikátu:</strong> {name}</p>
          <p style="margin: 5px 0;"><strong>Dátum expirácie:</strong> {date}</p>
          <p style="margin: 5px 0;" class="warning"><strong>Zostáva:</strong> {days} {days_word}</p>
        </div>
        <p><strong>Prosím, obnovte certifikát čo najskôr.</strong></p>
        <p style="margin-top: 20px;">S pozdravom,<br><strong>Certificate Registry System</strong></p>
      </div>
      <div class="footer">
        <p>Toto je automaticky generovaná správa. Neodpovedajte na tento email.</p>
      </div>
    </div>
  </body>
</html>
"""


def render_html(data: NotificationData) -> str:
    return _HTML_TEMPLATE.format(
        name=html.escape(data.certificate_name),
        date=format_date(data.expiry_date),
        days=data.days_remaining,
        days_word=days_word(data.days_remaining),
    )


def build_message(data: NotificationData, from_address: str) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["From"] = from_address
    msg["To"] = data.recipient_email
    msg["Subject"] = render_subject(data)
    msg.attach(MIMEText(render_text(data), "plain", "utf-8"))
    msg.attach(MIMEText(render_html(data), "html", "utf-8"))
    return msg


# ── Transport ─────────────────────────────────────────────────────────

class SmtpMailer:
    """
    One SMTP connection per message; volume is a handful of mails per
    sweep.
    """

    def __init__(self, settings: SmtpSettings):
        self.settings = settings

    def _open(self) -> smtplib.SMTP:
        s = self.settings
        return smtplib.SMTP(s.host, s.port, timeout=s.timeout)

    def _handshake(self, server: smtplib.SMTP) -> None:
        s = self.settings
        server.ehlo()
        if s.use_tls:
            server.starttls()
            server.ehlo()
        if s.username:
            server.login(s.username, s.password)

    def send_notification(self, data: NotificationData) -> EmailResult:
        msg = build_message(data, self.settings.from_address)
        try:
            with self._open() as server:
                self._handshake(server)
                server.sendmail(self.settings.from_address,
                                [data.recipient_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"Failed to send expiry mail to {data.recipient_email}: {exc}")
            return EmailResult(success=False, error=str(exc) or exc.__class__.__name__)

        logger.info(f"Expiry mail sent to {data.recipient_email}")
        return EmailResult(success=True)

    def verify(self) -> bool:
        """Open and close a connection; True when the SMTP config works."""
        try:
            with self._open() as server:
                self._handshake(server)
                server.noop()
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning(f"SMTP configuration check failed: {exc}")
            return False
        return True
