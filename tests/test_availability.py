"""Unit availability reasons and their precedence."""
from datetime import date

import pytest

from rentalcore.errors import NotFound, ValidationError
from rentalcore.models import Tenant
from rentalcore.services import (
    AlreadyDecided,
    PropertyAtCapacity,
    UnitOccupied,
    approve_application,
    check_availability,
    reject_application,
    terminate_tenancy,
)


def test_free_unit_is_available(session, building):
    result = check_availability(session, building.id, "Unit 1")

    assert result.is_available
    assert result.reason is None
    assert result.to_dict() == {"is_available": True}


def test_active_tenant_makes_unit_occupied(session, nearly_full):
    result = check_availability(session, nearly_full.id, "Unit 3")

    assert not result.is_available
    assert isinstance(result.reason, UnitOccupied)
    tenant = Tenant.query.filter_by(property_id=nearly_full.id, unit_number="Unit 3").one()
    assert result.reason.tenant_id == tenant.id
    assert result.to_dict()["reason"] == {"kind": "unit_occupied", "details": {"tenant_id": tenant.id}}


def test_pending_tenant_also_occupies(session, building, alice):
    session.add(Tenant(
        user_id=alice.id, property_id=building.id, unit_number="Unit 2",
        lease_start=date(2026, 1, 1), lease_end=date(2027, 1, 1),
        monthly_rent=building.monthly_rent, status="pending",
    ))
    session.commit()

    assert isinstance(check_availability(session, building.id, "Unit 2").reason, UnitOccupied)


def test_full_property_reports_capacity(session, building):
    building.occupied_units = 10
    session.commit()

    result = check_availability(session, building.id, "Unit 7")

    assert result.reason == PropertyAtCapacity(occupied=10, total=10)
    assert result.to_dict()["reason"]["details"] == {"occupied_units": 10, "total_units": 10}


def test_pending_application_shows_without_exclusion(session, building, alice, make_application):
    application = make_application(building, alice, unit_number="Unit 4")

    result = check_availability(session, building.id, "Unit 4")

    assert result.reason == AlreadyDecided(status="pending", application_id=application.id)


def test_earlier_pending_application_goes_first(session, building, alice, bob, make_application):
    first = make_application(building, alice, unit_number="Unit 4")
    second = make_application(building, bob, unit_number="Unit 4")

    assert check_availability(session, building.id, "Unit 4", excluding_application_id=first.id).is_available
    result = check_availability(session, building.id, "Unit 4", excluding_application_id=second.id)
    assert result.reason == AlreadyDecided(status="pending", application_id=first.id)


def test_rejecting_the_first_applicant_lets_the_next_through(session, building, alice, bob, make_application):
    first = make_application(building, alice, unit_number="Unit 4")
    second = make_application(building, bob, unit_number="Unit 4")
    reject_application(session, first.id, "Withdrew")

    assert check_availability(session, building.id, "Unit 4", excluding_application_id=second.id).is_available


def test_approved_competitor_is_reported_before_its_tenant(session, building, alice, bob, make_application):
    first = make_application(building, alice, unit_number="Unit 4")
    second = make_application(building, bob, unit_number="Unit 4")
    approve_application(session, first.id, 12)

    result = check_availability(session, building.id, "Unit 4", excluding_application_id=second.id)

    assert result.reason == AlreadyDecided(status="approved", application_id=first.id)


def test_terminated_tenancy_releases_approved_application(session, building, alice, bob, make_application):
    first = make_application(building, alice, unit_number="Unit 4")
    second = make_application(building, bob, unit_number="Unit 4")
    tenant = approve_application(session, first.id, 12)
    terminate_tenancy(session, tenant.id)

    assert check_availability(session, building.id, "Unit 4", excluding_application_id=second.id).is_available


def test_rejected_application_never_blocks(session, building, alice, make_application):
    make_application(building, alice, unit_number="Unit 5", status="rejected")

    assert check_availability(session, building.id, "Unit 5").is_available


def test_unknown_property(session, building):
    with pytest.raises(NotFound):
        check_availability(session, building.id + 100, "Unit 1")


def test_unit_number_is_trimmed_before_lookup(session, nearly_full):
    result = check_availability(session, nearly_full.id, "  Unit 3 ")

    assert isinstance(result.reason, UnitOccupied)


@pytest.mark.parametrize("unit", ["", "   ", None])
def test_blank_unit_number_is_invalid(session, building, unit):
    with pytest.raises(ValidationError):
        check_availability(session, building.id, unit)
