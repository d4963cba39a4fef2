"""
api - REST API layer.

All route modules register on a single Flask Blueprint
with url_prefix /api/v1.  The store handle and mailer are
constructed by main.create_app and read back through
get_db() / get_mailer().
"""

from flask import Blueprint, current_app

api_bp = Blueprint("api", __name__, url_prefix="/api/v1")

DB_EXTENSION = "certreg.db"
MAILER_EXTENSION = "certreg.mailer"


def get_db():
    return current_app.extensions[DB_EXTENSION]


def get_mailer():
    return current_app.extensions[MAILER_EXTENSION]


# Import route modules so their @api_bp decorators execute
from api import routes_certificates   # noqa: F401, E402
from api import routes_import         # noqa: F401, E402
from api import routes_expiry         # noqa: F401, E402
from api import routes_auth           # noqa: F401, E402
from api import errors                # noqa: F401, E402
