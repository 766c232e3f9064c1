"""
Rental application registry.

Applications are submitted ``pending`` and decided exactly once: rejected
here, or approved by ``transitions.approve_application`` which calls
``mark_approved`` inside its own unit of work.
"""
from __future__ import annotations

import logging
from collections import namedtuple
from datetime import date, datetime

from sqlalchemy import select

from ..errors import (
    ApplicationNotPending,
    DuplicateApplication,
    NotFound,
    UnitUnavailable,
    ValidationError,
)
from ..models import ApplicationDocument, RentalApplication
from ..models.application import APPLICATION_STATUSES, APPROVED, PENDING, REJECTED
from .availability import AlreadyDecided, check_availability, normalize_unit_number
from .ledger import get_property
from .unit_of_work import atomic

logger = logging.getLogger(__name__)

DEFAULT_LEASE_DURATIONS = (1, 3, 6, 9, 12, 18, 24, 36)

DeleteResult = namedtuple("DeleteResult", ["success", "warning"])


def validate_lease_duration(months, options=DEFAULT_LEASE_DURATIONS, allow_custom=False, max_months=120):
    if isinstance(months, bool) or not isinstance(months, int):
        raise ValidationError("Lease duration must be a whole number of months")
    if allow_custom:
        if not 1 <= months <= max_months:
            raise ValidationError(f"Lease duration must be between 1 and {max_months} months")
    elif months not in options:
        allowed = ", ".join(str(m) for m in options)
        raise ValidationError(f"Lease duration must be one of: {allowed} months")
    return months


def get_application(session, application_id):
    application = session.get(RentalApplication, application_id)
    if application is None:
        raise NotFound(f"Application {application_id} not found")
    return application


def list_applications(session, property_id, status=None):
    get_property(session, property_id)
    query = select(RentalApplication).where(RentalApplication.property_id == property_id)
    if status:
        if status not in APPLICATION_STATUSES:
            raise ValidationError(f"Unknown application status: {status}")
        query = query.where(RentalApplication.status == status)
    query = query.order_by(RentalApplication.submitted_at.desc(), RentalApplication.id.desc())
    return session.execute(query).scalars().all()


def submit_application(session, applicant_id, property_id, unit_number, move_in_date, notes=None):
    """Record a new pending application at the property's asking rent.

    Other applicants' pending applications for the same unit do not block a
    submission; the new application queues behind them.
    """
    unit_number = normalize_unit_number(unit_number)
    if not isinstance(move_in_date, date):
        raise ValidationError("move_in_date must be a date")

    with atomic(session):
        prop = get_property(session, property_id)

        duplicate = session.execute(
            select(RentalApplication.id).where(
                RentalApplication.applicant_id == applicant_id,
                RentalApplication.property_id == property_id,
                RentalApplication.unit_number == unit_number,
                RentalApplication.status == PENDING,
            )
        ).first()
        if duplicate is not None:
            raise DuplicateApplication(
                f"You already have a pending application for unit {unit_number}"
            )

        availability = check_availability(session, property_id, unit_number, prop=prop)
        reason = availability.reason
        if reason is not None and not (isinstance(reason, AlreadyDecided) and reason.status == PENDING):
            raise UnitUnavailable(
                reason,
                "This unit is no longer available. Please select a different unit.",
            )

        now = datetime.utcnow()
        application = RentalApplication(
            property_id=property_id,
            unit_number=unit_number,
            applicant_id=applicant_id,
            monthly_rent=prop.monthly_rent,
            move_in_date=move_in_date,
            notes=notes,
            status=PENDING,
            submitted_at=now,
            updated_at=now,
        )
        session.add(application)
        session.flush()

    logger.info(
        "Application %s submitted for unit %s at property %s",
        application.id, unit_number, property_id,
    )
    return application


def add_document(session, application_id, file, store):
    with atomic(session):
        application = get_application(session, application_id)
        if not application.is_pending:
            raise ApplicationNotPending(application.id, application.status)
        path = store.save(application.id, file)
        document = ApplicationDocument(
            application_id=application.id,
            name=file.filename,
            content_type=file.mimetype,
            storage_path=path,
        )
        session.add(document)
        application.updated_at = datetime.utcnow()
        session.flush()
    return document


def reject_application(session, application_id, reason):
    reason = reason.strip() if isinstance(reason, str) else ""
    if not reason:
        raise ValidationError("A rejection reason is required")

    with atomic(session):
        application = get_application(session, application_id)
        if not application.is_pending:
            raise ApplicationNotPending(application.id, application.status)
        now = datetime.utcnow()
        application.status = REJECTED
        application.rejection_reason = reason
        application.decided_at = now
        application.updated_at = now

    logger.info("Application %s rejected", application_id)
    return application


def mark_approved(application, lease_duration_months, **duration_policy):
    """Flip a pending application to approved. Caller owns the transaction."""
    validate_lease_duration(lease_duration_months, **duration_policy)
    if not application.is_pending:
        raise ApplicationNotPending(application.id, application.status)
    now = datetime.utcnow()
    application.status = APPROVED
    application.lease_duration_months = lease_duration_months
    application.decided_at = now
    application.updated_at = now
    return application


def delete_application(session, application_id, store=None):
    """Delete an application and its documents.

    An approved application's tenancy and payments are kept; they are
    history of their own once created. The caller gets a warning instead.
    """
    warning = None
    with atomic(session):
        application = get_application(session, application_id)
        if application.status == APPROVED:
            warning = (
                "Application was approved; its tenancy and payment schedule are kept."
            )
            logger.warning("Deleting approved application %s; tenancy retained", application_id)
        session.delete(application)

    if store is not None:
        try:
            store.delete_application_documents(application_id)
        except OSError:
            logger.exception("Could not remove stored documents for application %s", application_id)

    return DeleteResult(success=True, warning=warning)
