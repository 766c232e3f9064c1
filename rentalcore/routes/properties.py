from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from ..extensions import db
from ..security import require_property_owner
from ..services import count_occupying_tenants
from ..services.ledger import get_property

bp = Blueprint("properties", __name__)


@bp.get("/properties/<int:property_id>/occupancy")
@jwt_required()
def occupancy(property_id):
    """Ledger counters next to the live tenant count"""
    prop = get_property(db.session, property_id)
    require_property_owner(prop)

    occupying = count_occupying_tenants(db.session, property_id)
    return jsonify({
        "property_id": prop.id,
        "total_units": prop.total_units,
        "occupied_units": prop.occupied_units,
        "available_units": prop.available_units,
        "occupancy_rate": round(prop.occupied_units / prop.total_units * 100, 1) if prop.total_units else 0.0,
        "occupying_tenants": occupying,
        "in_sync": occupying == prop.occupied_units,
    }), 200
