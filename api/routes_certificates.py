"""
api.routes_certificates - /api/v1/certificates CRUD endpoints.
"""

from flask import request, jsonify

from api import api_bp, get_db
from api.auth import login_required, read_access
from errors import ValidationError
from services.certificate_service import CertificateService


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Neplatné telo požiadavky (očakáva sa JSON objekt)")
    return data


@api_bp.route("/certificates")
@read_access
def list_certificates():
    """GET /api/v1/certificates - all certificates, soonest expiry first."""
    session = get_db().session()
    try:
        certs = CertificateService.list_all(session)
        return jsonify({"certificates": [c.to_dict() for c in certs]})
    finally:
        session.close()


@api_bp.route("/certificates/<int:cert_id>")
@read_access
def get_certificate(cert_id: int):
    """GET /api/v1/certificates/{id}"""
    session = get_db().session()
    try:
        cert = CertificateService.get_or_404(session, cert_id)
        return jsonify(cert.to_dict())
    finally:
        session.close()


@api_bp.route("/certificates", methods=["POST"])
@login_required
def create_certificate():
    """
    POST /api/v1/certificates

    JSON body: {name, expiryDate, emailAddress?, validFrom?}
    """
    data = _json_body()
    session = get_db().session()
    try:
        cert = CertificateService.create(session, data)
        session.commit()
        return jsonify({"message": "Certifikát bol úspešne vytvorený",
                        "certificate": cert.to_dict()}), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/certificates/<int:cert_id>", methods=["PUT"])
@login_required
def update_certificate(cert_id: int):
    """PUT /api/v1/certificates/{id}  (full replace, clears notificationSent)"""
    data = _json_body()
    session = get_db().session()
    try:
        cert = CertificateService.get_or_404(session, cert_id)
        CertificateService.update(session, cert, data)
        session.commit()
        return jsonify({"message": "Certifikát bol úspešne aktualizovaný",
                        "certificate": cert.to_dict()})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/certificates/<int:cert_id>", methods=["DELETE"])
@login_required
def delete_certificate(cert_id: int):
    """DELETE /api/v1/certificates/{id}"""
    session = get_db().session()
    try:
        cert = CertificateService.get_or_404(session, cert_id)
        CertificateService.delete(session, cert)
        session.commit()
        return jsonify({"message": "Certifikát bol úspešne zmazaný", "deleted": cert_id})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
