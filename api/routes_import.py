"""
api.routes_import - /api/v1/certificates/import endpoint.

Accepts one spreadsheet (.csv / .xls / .xlsx) via multipart upload.
"""

from flask import current_app, request, jsonify
from werkzeug.exceptions import RequestEntityTooLarge

from api import api_bp, get_db
from api.auth import login_required
from errors import FileTooLargeError, ValidationError
from import_engine import run_import
from import_engine.field_map import parse_profile, policy_for_profile


@api_bp.route("/certificates/import", methods=["POST"])
@login_required
def api_import_certificates():
    """
    POST /api/v1/certificates/import?profile=manual|automated

    Multipart: field name 'file'.  Always 200 once the file itself is
    accepted, even when every row was rejected.
    """
    cfg = current_app.config
    try:
        profile = parse_profile(request.args.get("profile"),
                                default=parse_profile(cfg["IMPORT_PROFILE"]))
    except ValueError:
        raise ValidationError("Neznámy importný profil")
    replace_policy = policy_for_profile(profile, cfg["REPLACE_POLICIES"])

    max_bytes = cfg["IMPORT_MAX_BYTES"]
    try:
        f = request.files.get("file")
    except RequestEntityTooLarge:
        raise FileTooLargeError.for_limit(max_bytes)
    if not f:
        raise ValidationError("Súbor nebol nahraný")

    # One byte past the limit is enough for the size guard to fire
    content = f.stream.read(max_bytes + 1)

    report = run_import(
        get_db(),
        content,
        mimetype=f.mimetype,
        filename=f.filename,
        profile=profile,
        replace_policy=replace_policy,
        max_bytes=max_bytes,
        max_rows=cfg["IMPORT_MAX_ROWS"],
        decode_timeout=cfg["IMPORT_TIMEOUT"],
    )
    return jsonify(report.to_dict())
