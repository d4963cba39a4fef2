"""
import_engine - Certificate import pipeline (CSV / XLS / XLSX).

Public API:
    run_import(db, file_content, mimetype=, filename=, profile=, replace_policy=) → ImportReport
    ImportProfile, ReplacePolicy
"""

from import_engine.importer import run_import                      # noqa: F401
from import_engine.report import ImportReport                      # noqa: F401
from import_engine.field_map import ImportProfile, ReplacePolicy   # noqa: F401
