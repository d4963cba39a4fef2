"""
db - Database layer.

Public API:
    init_db(url)        → Database (engine + tables)
    Database.session()  → new Session
    Certificate, User   → ORM models
"""

from db.engine import Database, init_db              # noqa: F401
from db.models import Base, Certificate, User         # noqa: F401
