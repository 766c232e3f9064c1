"""Application registry: submission, rejection, documents, deletion."""
import io
import os
from datetime import date
from decimal import Decimal

import pytest
from werkzeug.datastructures import FileStorage

from rentalcore.errors import (
    ApplicationNotPending,
    Conflict,
    DuplicateApplication,
    NotFound,
    UnitUnavailable,
    ValidationError,
)
from rentalcore.models import ApplicationDocument, Payment, RentalApplication, Tenant
from rentalcore.services import (
    LocalDocumentStore,
    UnitOccupied,
    add_document,
    approve_application,
    delete_application,
    list_applications,
    submit_application,
    validate_lease_duration,
)
from rentalcore.services.applications import mark_approved, reject_application

from .conftest import MOVE_IN


def _pdf(name="payslip.pdf"):
    return FileStorage(stream=io.BytesIO(b"%PDF-1.4 test"), filename=name, content_type="application/pdf")


# ── Submission ─────────────────────────────────────────────────────────

def test_submit_copies_asking_rent(session, building, alice):
    application = submit_application(session, alice.id, building.id, " Unit 10 ", MOVE_IN, notes="Quiet tenant")

    assert application.status == "pending"
    assert application.unit_number == "Unit 10"
    assert application.monthly_rent == Decimal("1500.00")
    assert application.submitted_at is not None


def test_submit_allows_competing_pending_applications(session, building, alice, bob):
    submit_application(session, alice.id, building.id, "Unit 10", MOVE_IN)
    submit_application(session, bob.id, building.id, "Unit 10", MOVE_IN)

    assert RentalApplication.query.filter_by(unit_number="Unit 10").count() == 2


def test_submit_refuses_duplicate_from_same_applicant(session, building, alice):
    submit_application(session, alice.id, building.id, "Unit 10", MOVE_IN)

    with pytest.raises(DuplicateApplication):
        submit_application(session, alice.id, building.id, "Unit 10", MOVE_IN)


def test_submit_refuses_occupied_unit(session, nearly_full, alice):
    with pytest.raises(UnitUnavailable) as exc:
        submit_application(session, alice.id, nearly_full.id, "Unit 1", MOVE_IN)
    assert isinstance(exc.value.reason, UnitOccupied)


def test_submit_padded_unit_matches_occupied_unit(session, nearly_full, alice):
    with pytest.raises(UnitUnavailable) as exc:
        submit_application(session, alice.id, nearly_full.id, "  Unit 1\t", MOVE_IN)
    assert isinstance(exc.value.reason, UnitOccupied)


@pytest.mark.parametrize("unit, move_in", [("", MOVE_IN), ("   ", MOVE_IN), ("Unit 2", "2026-01-01"), (None, MOVE_IN)])
def test_submit_validates_input(session, building, alice, unit, move_in):
    with pytest.raises(ValidationError):
        submit_application(session, alice.id, building.id, unit, move_in)


def test_submit_unknown_property(session, alice):
    with pytest.raises(NotFound):
        submit_application(session, alice.id, 999, "Unit 1", MOVE_IN)


def test_list_filters_by_status(session, building, alice, bob, make_application):
    make_application(building, alice, unit_number="Unit 1")
    make_application(building, bob, unit_number="Unit 2", status="rejected")

    assert len(list_applications(session, building.id)) == 2
    assert [a.unit_number for a in list_applications(session, building.id, status="rejected")] == ["Unit 2"]
    with pytest.raises(ValidationError):
        list_applications(session, building.id, status="archived")


# ── Rejection ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("reason", ["", "   \t", None])
def test_reject_requires_reason(session, building, alice, make_application, reason):
    application = make_application(building, alice)

    with pytest.raises(ValidationError):
        reject_application(session, application.id, reason)
    assert session.get(RentalApplication, application.id).status == "pending"


def test_reject_records_reason_and_leaves_occupancy(session, nearly_full, alice, make_application):
    application = make_application(nearly_full, alice)

    rejected = reject_application(session, application.id, "  Income too low  ")

    assert rejected.status == "rejected"
    assert rejected.rejection_reason == "Income too low"
    assert rejected.decided_at is not None
    assert nearly_full.occupied_units == 9


def test_reject_twice_is_a_conflict(session, building, alice, make_application):
    application = make_application(building, alice)
    reject_application(session, application.id, "No references")

    with pytest.raises(ApplicationNotPending):
        reject_application(session, application.id, "Again")


def test_reject_missing_application(session, building):
    with pytest.raises(NotFound):
        reject_application(session, 4242, "Nope")


# ── Approval step ──────────────────────────────────────────────────────

@pytest.mark.parametrize("months", [1, 3, 6, 9, 12, 18, 24, 36])
def test_standard_durations_are_accepted(months):
    assert validate_lease_duration(months) == months


@pytest.mark.parametrize("months", [0, 2, 7, 48, -6, "12", 12.0, None])
def test_other_durations_are_rejected(months):
    with pytest.raises(ValidationError):
        validate_lease_duration(months)


def test_custom_durations_when_enabled():
    assert validate_lease_duration(7, allow_custom=True) == 7
    with pytest.raises(ValidationError):
        validate_lease_duration(0, allow_custom=True)
    with pytest.raises(ValidationError):
        validate_lease_duration(121, allow_custom=True, max_months=120)


def test_mark_approved_needs_pending(session, building, alice, make_application):
    application = make_application(building, alice, status="rejected")

    with pytest.raises(ApplicationNotPending):
        mark_approved(application, 12)


# ── Documents ──────────────────────────────────────────────────────────

def test_add_document_stores_file(app, session, building, alice, make_application):
    store = LocalDocumentStore(app.config["UPLOAD_FOLDER"])
    application = make_application(building, alice)

    document = add_document(session, application.id, _pdf(), store)

    assert document.name == "payslip.pdf"
    assert document.content_type == "application/pdf"
    assert os.path.isfile(document.storage_path)


def test_add_document_rejects_unknown_type(app, session, building, alice, make_application):
    store = LocalDocumentStore(app.config["UPLOAD_FOLDER"])
    application = make_application(building, alice)

    with pytest.raises(ValidationError):
        add_document(session, application.id, _pdf("run.exe"), store)


def test_add_document_only_while_pending(app, session, building, alice, make_application):
    store = LocalDocumentStore(app.config["UPLOAD_FOLDER"])
    application = make_application(building, alice, status="rejected")

    with pytest.raises(Conflict):
        add_document(session, application.id, _pdf(), store)


# ── Deletion ───────────────────────────────────────────────────────────

def test_delete_cascades_documents(app, session, building, alice, make_application):
    store = LocalDocumentStore(app.config["UPLOAD_FOLDER"])
    application = make_application(building, alice)
    document = add_document(session, application.id, _pdf(), store)
    path = document.storage_path

    result = delete_application(session, application.id, store=store)

    assert result.success and result.warning is None
    assert session.get(RentalApplication, application.id) is None
    assert ApplicationDocument.query.count() == 0
    assert not os.path.exists(path)


def test_delete_approved_keeps_tenancy_and_payments(session, building, alice, make_application):
    application = make_application(building, alice)
    tenant = approve_application(session, application.id, 6)
    tenant_id = tenant.id

    result = delete_application(session, application.id)

    assert result.success
    assert result.warning
    kept = session.get(Tenant, tenant_id)
    assert kept is not None
    assert kept.application_id is None
    assert kept.status == "active"
    assert Payment.query.filter_by(tenant_id=tenant_id).count() == 6
    assert building.occupied_units == 1


def test_delete_missing_application(session, building):
    with pytest.raises(NotFound):
        delete_application(session, 31337)
