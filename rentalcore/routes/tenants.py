# rentalcore/routes/tenants.py
from datetime import datetime

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from ..errors import Forbidden, NotFound, ValidationError
from ..extensions import db
from ..models import Tenant
from ..security import current_user_id, require_property_owner
from ..services import summarize_schedule, terminate_tenancy

bp = Blueprint("tenants", __name__)


def _get_tenant(tenant_id):
    t = db.session.get(Tenant, tenant_id)
    if t is None:
        raise NotFound(f"Tenant {tenant_id} not found")
    return t


@bp.get("/tenants/<int:tenant_id>")
@jwt_required()
def get_tenant(tenant_id):
    t = _get_tenant(tenant_id)
    if current_user_id() not in (t.user_id, t.rental_property.owner_id):
        raise Forbidden("You do not have access to this tenancy")

    response = t.serialize()
    response.update({
        "payments": [p.serialize() for p in t.payments],
        "schedule": summarize_schedule(t.payments),
    })
    return jsonify(response), 200


@bp.post("/tenants/<int:tenant_id>/terminate")
@jwt_required()
def terminate(tenant_id):
    data = request.get_json(silent=True) or {}
    t = _get_tenant(tenant_id)
    require_property_owner(t.rental_property)

    termination_date = data.get("termination_date")
    if termination_date:
        try:
            termination_date = datetime.strptime(termination_date, '%Y-%m-%d').date()
        except (TypeError, ValueError):
            raise ValidationError("termination_date must be in YYYY-MM-DD format")
    else:
        termination_date = None

    t = terminate_tenancy(db.session, tenant_id, termination_date=termination_date)
    return jsonify({"success": True, "tenant": t.serialize()}), 200
