from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from ..errors import ValidationError
from ..extensions import db
from ..notifications import notify_application_decision
from ..security import current_user_id, require_owner_or_applicant, require_property_owner, roles_required
from ..services import (
    LocalDocumentStore,
    add_document,
    approve_application,
    check_availability,
    delete_application,
    get_application,
    list_applications,
    reject_application,
    submit_application,
)
from ..services.ledger import get_property

bp = Blueprint("applications", __name__)


def _parse_date(value, field):
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be in YYYY-MM-DD format")


def _parse_int(value, field):
    """Accept a JSON integer or a string of digits; floats are never truncated."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        digits = value.strip()
        if digits.isascii() and digits.isdigit():
            return int(digits)
    raise ValidationError(f"{field} must be a whole number")


def _duration_policy():
    config = current_app.config
    return {
        "options": tuple(config.get("LEASE_DURATION_OPTIONS", ())),
        "allow_custom": config.get("ALLOW_CUSTOM_LEASE_DURATION", False),
        "max_months": config.get("MAX_LEASE_DURATION_MONTHS", 120),
    }


def _document_store():
    return LocalDocumentStore(current_app.config["UPLOAD_FOLDER"])


@bp.get("/properties/<int:property_id>/units/<unit_number>/availability")
@jwt_required()
def unit_availability(property_id, unit_number):
    """Advisory availability read; approval re-checks under lock"""
    prop = get_property(db.session, property_id)
    require_property_owner(prop)

    excluding = request.args.get("excluding_application_id")
    if excluding is not None:
        excluding = _parse_int(excluding, "excluding_application_id")

    result = check_availability(db.session, property_id, unit_number, excluding_application_id=excluding, prop=prop)
    return jsonify(result.to_dict()), 200


@bp.get("/properties/<int:property_id>/applications")
@jwt_required()
def property_applications(property_id):
    prop = get_property(db.session, property_id)
    require_property_owner(prop)

    status = request.args.get("status")
    applications = list_applications(db.session, property_id, status=status)
    return jsonify({
        "total": len(applications),
        "applications": [a.serialize() for a in applications],
    }), 200


@bp.post("/applications")
@roles_required("tenant")
def create_application():
    """Submit a rental application for a unit"""
    data = request.get_json(silent=True) or {}

    for field in ("property_id", "unit_number", "move_in_date"):
        if data.get(field) in (None, ""):
            raise ValidationError(f"{field} is required")

    application = submit_application(
        db.session,
        applicant_id=current_user_id(),
        property_id=_parse_int(data["property_id"], "property_id"),
        unit_number=str(data["unit_number"]),
        move_in_date=_parse_date(data["move_in_date"], "move_in_date"),
        notes=data.get("notes"),
    )
    return jsonify({"success": True, "application": application.serialize()}), 201


@bp.get("/applications/<int:application_id>")
@jwt_required()
def application_detail(application_id):
    application = get_application(db.session, application_id)
    require_owner_or_applicant(application)
    return jsonify(application.serialize()), 200


@bp.post("/applications/<int:application_id>/documents")
@jwt_required()
def upload_document(application_id):
    application = get_application(db.session, application_id)
    if application.applicant_id != current_user_id():
        require_property_owner(application.rental_property)

    file = request.files.get("file")
    if file is None:
        raise ValidationError("file is required")

    document = add_document(db.session, application_id, file, _document_store())
    return jsonify({"success": True, "document": document.serialize()}), 201


@bp.post("/applications/<int:application_id>/approve")
@jwt_required()
def approve(application_id):
    data = request.get_json(silent=True) or {}
    if data.get("lease_duration_months") is None:
        raise ValidationError("lease_duration_months is required")
    months = _parse_int(data["lease_duration_months"], "lease_duration_months")

    application = get_application(db.session, application_id)
    require_property_owner(application.rental_property)

    tenant = approve_application(
        db.session,
        application_id,
        months,
        notifier=notify_application_decision,
        **_duration_policy(),
    )
    return jsonify({
        "success": True,
        "tenant_id": tenant.id,
        "message": "Application approved successfully. A new tenant record has been created.",
    }), 200


@bp.post("/applications/<int:application_id>/reject")
@jwt_required()
def reject(application_id):
    data = request.get_json(silent=True) or {}

    application = get_application(db.session, application_id)
    require_property_owner(application.rental_property)

    reject_application(
        db.session,
        application_id,
        data.get("rejection_reason"),
        notifier=notify_application_decision,
    )
    return jsonify({"success": True, "message": "Application rejected successfully."}), 200


@bp.delete("/applications/<int:application_id>")
@jwt_required()
def remove_application(application_id):
    application = get_application(db.session, application_id)
    require_owner_or_applicant(application)

    result = delete_application(db.session, application_id, store=_document_store())
    payload = {"success": result.success}
    if result.warning:
        payload["warning"] = result.warning
    return jsonify(payload), 200
