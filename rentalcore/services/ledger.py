"""Occupancy ledger: the per-property ``occupied_units`` counter."""
import logging

from sqlalchemy import func, select

from ..errors import Conflict, NotFound, UnitUnavailable
from ..models import Property, Tenant
from ..models.tenant import OCCUPYING_STATUSES
from .availability import PropertyAtCapacity
from .unit_of_work import atomic

logger = logging.getLogger(__name__)


def get_property(session, property_id):
    prop = session.get(Property, property_id)
    if prop is None:
        raise NotFound(f"Property {property_id} not found")
    return prop


def lock_property(session, property_id):
    """Load the property row under ``SELECT ... FOR UPDATE``.

    Holding this lock serializes every approval for the property until the
    surrounding transaction ends. Backends without row locks (SQLite) ignore
    the clause and fall back on the tenant uniqueness index.
    """
    prop = session.execute(
        select(Property)
        .where(Property.id == property_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if prop is None:
        raise NotFound(f"Property {property_id} not found")
    return prop


def increment_occupancy(session, prop):
    if prop.occupied_units >= prop.total_units:
        raise UnitUnavailable(PropertyAtCapacity(occupied=prop.occupied_units, total=prop.total_units))
    prop.occupied_units = Property.occupied_units + 1
    session.flush()
    logger.debug("Property %s occupancy incremented", prop.id)


def decrement_occupancy(session, prop):
    if prop.occupied_units <= 0:
        raise Conflict(f"Property {prop.id} has no occupied units to release")
    prop.occupied_units = Property.occupied_units - 1
    session.flush()
    logger.debug("Property %s occupancy decremented", prop.id)


def count_occupying_tenants(session, property_id):
    return session.execute(
        select(func.count(Tenant.id)).where(
            Tenant.property_id == property_id,
            Tenant.status.in_(OCCUPYING_STATUSES),
        )
    ).scalar_one()


def reconcile_occupancy(session, property_id):
    """Rewrite ``occupied_units`` from the tenant table. Returns (before, after).

    More occupying tenants than units cannot be written back; that raises
    ``Conflict`` and leaves the counter alone for someone to sort out.
    """
    with atomic(session):
        prop = lock_property(session, property_id)
        before = prop.occupied_units
        after = count_occupying_tenants(session, property_id)
        if after > prop.total_units:
            logger.error(
                "Property %s has %s occupying tenants for %s units; counter left at %s",
                property_id, after, prop.total_units, before,
            )
            raise Conflict(
                f"Property {property_id} has {after} occupying tenants but only "
                f"{prop.total_units} units"
            )
        if before != after:
            logger.warning(
                "Property %s occupancy drifted: ledger=%s tenants=%s",
                property_id, before, after,
            )
            prop.occupied_units = after
    return before, after
