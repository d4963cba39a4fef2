"""
CertReg - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


def _env_bool(key: str, default: str) -> bool:
    return os.environ.get(key, default).strip().lower() in ("1", "true", "yes", "on")


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("CERTREG_DB", f"sqlite:///{BASE_DIR / 'certreg.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("CERTREG_HOST", "0.0.0.0")
PORT   = int(os.environ.get("CERTREG_PORT", "5000"))
DEBUG  = os.environ.get("CERTREG_DEBUG", "0") == "1"
SECRET = os.environ.get("CERTREG_SECRET", "certreg-dev-key-change-in-prod")
LOG_LEVEL = os.environ.get("CERTREG_LOG_LEVEL", "INFO").upper()

# Anonymous GET on /certificates (mutations always need a session)
PUBLIC_READ = _env_bool("CERTREG_PUBLIC_READ", "1")

# ── Import ─────────────────────────────────────────────────────────────
# Profile: "manual" (local-language headers) or "automated" (CN/Valid_To/thumbprint)
IMPORT_PROFILE = os.environ.get("CERTREG_IMPORT_PROFILE", "automated")
# Replace policy per profile: "all", "imported" (thumbprint rows only) or "none".
# Unset means the profile default (manual: all, automated: imported).
REPLACE_POLICIES = {
    "manual":    os.environ.get("CERTREG_REPLACE_POLICY_MANUAL"),
    "automated": os.environ.get("CERTREG_REPLACE_POLICY_AUTOMATED"),
}
IMPORT_MAX_BYTES = int(os.environ.get("CERTREG_IMPORT_MAX_BYTES", str(5 * 1024 * 1024)))
IMPORT_MAX_ROWS  = int(os.environ.get("CERTREG_IMPORT_MAX_ROWS", "1000"))
IMPORT_TIMEOUT   = float(os.environ.get("CERTREG_IMPORT_TIMEOUT", "30"))

# ── Expiry notifications ───────────────────────────────────────────────
EXPIRY_WINDOW_DAYS = int(os.environ.get("CERTREG_EXPIRY_WINDOW_DAYS", "30"))

# ── SMTP ───────────────────────────────────────────────────────────────
SMTP_HOST    = os.environ.get("CERTREG_SMTP_HOST", "localhost")
SMTP_PORT    = int(os.environ.get("CERTREG_SMTP_PORT", "587"))
SMTP_USER    = os.environ.get("CERTREG_SMTP_USER", "")
SMTP_PASS    = os.environ.get("CERTREG_SMTP_PASS", "")
SMTP_FROM    = os.environ.get("CERTREG_SMTP_FROM", "certreg@localhost")
SMTP_TLS     = _env_bool("CERTREG_SMTP_TLS", "1")
SMTP_TIMEOUT = float(os.environ.get("CERTREG_SMTP_TIMEOUT", "30"))

# ── Auth ───────────────────────────────────────────────────────────────
MIN_PASSWORD_LENGTH = 6
