"""
db.engine - Engine bootstrap and session factory.

The Database handle is built once by the process entry point (see
main.create_app) and passed to whoever needs a session; there is no
module-level engine.  The connection string can be swapped to Postgres
by changing config.DB_URL; no other code needs to change.
"""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base


class Database:
    """Owns one engine and its session factory."""

    def __init__(self, db_url: str):
        self.url = db_url
        self.engine = create_engine(db_url, echo=False, future=True)

        if "sqlite" in db_url:
            @event.listens_for(self.engine, "connect")
            def _sqlite_pragmas(dbapi_conn, _rec):
                cur = dbapi_conn.cursor()
                cur.execute("PRAGMA journal_mode=WAL")
                cur.execute("PRAGMA foreign_keys=ON")
                cur.execute("PRAGMA synchronous=NORMAL")
                cur.close()

        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_all(self) -> None:
        """Emit CREATE TABLE for every model."""
        Base.metadata.create_all(self.engine)

    def session(self) -> Session:
        """Return a new session.  Caller is responsible for .close()."""
        return self._session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


def init_db(db_url: str) -> Database:
    """Create the engine, apply SQLite pragmas, and emit CREATE TABLE."""
    db = Database(db_url)
    db.create_all()
    return db
