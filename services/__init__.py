"""
services - Business-logic layer sitting between API and DB.
"""

from services.certificate_service import CertificateService     # noqa: F401
from services.expiry_service import ExpiryService, SweepReport   # noqa: F401
from services.notification_service import (                     # noqa: F401
    EmailResult, NotificationData, SmtpMailer, SmtpSettings,
)
