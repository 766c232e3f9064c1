"""
Unit availability.

``check_availability`` answers whether a unit can be granted to an
application. The answer is either available, or unavailable with exactly one
reason variant:

- ``AlreadyDecided``: another application holds the unit. That is an
  approved application whose tenancy still stands, or a pending application
  that was submitted before the one being evaluated. Applications queue in
  submission order, so the earliest pending one can be approved and later
  ones can only be rejected while it stands. With no application to
  evaluate, any pending application is reported.
- ``UnitOccupied``: an active or pending tenancy holds the unit.
- ``PropertyAtCapacity``: every unit of the property is occupied.

Checks run in that order. A result read outside the approving transaction is
advisory only; approval runs the check again under the property lock.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import select

from ..errors import NotFound, ValidationError
from ..models import Property, RentalApplication, Tenant
from ..models.application import APPROVED, PENDING
from ..models.tenant import OCCUPYING_STATUSES


@dataclass(frozen=True)
class AlreadyDecided:
    status: str
    application_id: int

    kind = "already_decided"

    def describe(self):
        return f"This unit already has a {self.status} application."

    def to_dict(self):
        return {
            "kind": self.kind,
            "details": {"application_status": self.status, "application_id": self.application_id},
        }


@dataclass(frozen=True)
class UnitOccupied:
    tenant_id: Optional[int]

    kind = "unit_occupied"

    def describe(self):
        return "This unit is currently occupied by a tenant."

    def to_dict(self):
        return {"kind": self.kind, "details": {"tenant_id": self.tenant_id}}


@dataclass(frozen=True)
class PropertyAtCapacity:
    occupied: int
    total: int

    kind = "property_at_capacity"

    def describe(self):
        return f"Property is at capacity ({self.occupied}/{self.total} units occupied)."

    def to_dict(self):
        return {"kind": self.kind, "details": {"occupied_units": self.occupied, "total_units": self.total}}


UnavailableReason = Union[AlreadyDecided, UnitOccupied, PropertyAtCapacity]


@dataclass(frozen=True)
class Availability:
    reason: Optional[UnavailableReason] = None

    @property
    def is_available(self):
        return self.reason is None

    def to_dict(self):
        if self.reason is None:
            return {"is_available": True}
        return {
            "is_available": False,
            "reason": self.reason.to_dict(),
            "message": self.reason.describe(),
        }


AVAILABLE = Availability()


def normalize_unit_number(unit_number):
    """Unit identifiers are compared after trimming surrounding whitespace."""
    if not isinstance(unit_number, str) or not unit_number.strip():
        raise ValidationError("unit_number is required")
    return unit_number.strip()


def _queue_position(application):
    return (application.submitted_at, application.id)


def _standing_application(session, property_id, unit_number, excluding_application_id):
    query = (
        select(RentalApplication)
        .where(
            RentalApplication.property_id == property_id,
            RentalApplication.unit_number == unit_number,
            RentalApplication.status.in_((PENDING, APPROVED)),
        )
        .order_by(RentalApplication.submitted_at, RentalApplication.id)
    )
    evaluated = None
    if excluding_application_id is not None:
        query = query.where(RentalApplication.id != excluding_application_id)
        evaluated = session.get(RentalApplication, excluding_application_id)
    candidates = session.execute(query).scalars().all()

    for other in candidates:
        if other.status != APPROVED:
            continue
        # A terminated tenancy releases the unit its application was granted
        if other.tenancy is None or other.tenancy.is_occupying:
            return other

    for other in candidates:
        if other.status != PENDING:
            continue
        if evaluated is None or _queue_position(other) < _queue_position(evaluated):
            return other
    return None


def _occupying_tenant(session, property_id, unit_number):
    return session.execute(
        select(Tenant)
        .where(
            Tenant.property_id == property_id,
            Tenant.unit_number == unit_number,
            Tenant.status.in_(OCCUPYING_STATUSES),
        )
        .order_by(Tenant.id)
        .limit(1)
    ).scalar_one_or_none()


def check_availability(session, property_id, unit_number, excluding_application_id=None, prop=None):
    """Decide whether ``unit_number`` of ``property_id`` can be granted.

    ``prop`` lets a caller holding the locked property row pass it in so the
    capacity check reads the locked values.
    """
    unit_number = normalize_unit_number(unit_number)
    if prop is None:
        prop = session.get(Property, property_id)
        if prop is None:
            raise NotFound(f"Property {property_id} not found")

    competitor = _standing_application(session, property_id, unit_number, excluding_application_id)
    if competitor is not None:
        return Availability(AlreadyDecided(status=competitor.status, application_id=competitor.id))

    tenant = _occupying_tenant(session, property_id, unit_number)
    if tenant is not None:
        return Availability(UnitOccupied(tenant_id=tenant.id))

    if prop.occupied_units >= prop.total_units:
        return Availability(PropertyAtCapacity(occupied=prop.occupied_units, total=prop.total_units))

    return AVAILABLE
