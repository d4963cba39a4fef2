"""
db.models - SQLAlchemy ORM declarations.

Tables
------
certificates - one row per tracked certificate.  A non-null thumbprint
               marks rows created by automated import; manual entries
               leave it empty.
users        - administrators allowed to mutate the registry.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, DateTime, Boolean, Index,
)
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class Base(DeclarativeBase):
    pass


class Certificate(Base):
    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # ── Registry data ──────────────────────────────────────────────────
    name          = Column(String(500), nullable=False)
    valid_from    = Column(DateTime, nullable=True)
    expiry_date   = Column(DateTime, nullable=False, index=True)
    email_address = Column(String(255), nullable=True)
    thumbprint    = Column(String(255), nullable=True, index=True)

    # ── Set by the expiry sweep, cleared on every manual edit ─────────
    notification_sent = Column(Boolean, nullable=False, default=False)

    # ── Timestamps ─────────────────────────────────────────────────────
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("ix_sweep", "notification_sent", "expiry_date"),
    )

    # ── Serialisation ──────────────────────────────────────────────────
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "validFrom": _iso(self.valid_from),
            "expiryDate": _iso(self.expiry_date),
            "emailAddress": self.email_address,
            "thumbprint": self.thumbprint,
            "notificationSent": bool(self.notification_sent),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class User(Base):
    __tablename__ = "users"

    id            = Column(Integer, primary_key=True, autoincrement=True)
    username      = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at    = Column(DateTime, default=_utcnow)

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username}
