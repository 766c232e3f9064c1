"""
Application-to-tenancy transitions.

``approve_application`` turns a pending application into an active tenancy
with its full payment schedule and bumps the property's occupancy, all in
one transaction. The application row and then the property row are locked
before availability is checked again, so two approvals for the same unit
cannot both commit. On backends without row locks the partial unique index
on occupying tenants rejects the loser at flush time, and that violation is
reported as the same unit-unavailable conflict.

Notifications run only after commit and can never change the outcome.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal

from ..errors import (
    ApplicationNotPending,
    NotFound,
    TenancyNotActive,
    ConstraintViolation,
    UnitUnavailable,
    ValidationError,
)
from ..models import Payment, RentalApplication, Tenant
from ..models.tenant import ACTIVE, TERMINATED
from . import applications as registry
from .availability import UnitOccupied, check_availability
from .ledger import decrement_occupancy, increment_occupancy, lock_property
from .schedule import generate_payment_schedule, lease_end_for
from .unit_of_work import atomic

logger = logging.getLogger(__name__)


def _dispatch(notifier, event, application):
    if notifier is None:
        return
    try:
        notifier(event, application)
    except Exception:
        logger.exception("Notification %r for application %s failed", event, application.id)


def _lock_application(session, application_id):
    application = session.get(
        RentalApplication,
        application_id,
        with_for_update=True,
        populate_existing=True,
    )
    if application is None:
        raise NotFound(f"Application {application_id} not found")
    return application


def _lost_race(session, application_id):
    """Work out why a rolled-back approval collided with another writer."""
    application = session.get(RentalApplication, application_id, populate_existing=True)
    if application is None:
        return NotFound(f"Application {application_id} not found")
    if not application.is_pending:
        return ApplicationNotPending(application.id, application.status)
    availability = check_availability(
        session,
        application.property_id,
        application.unit_number,
        excluding_application_id=application.id,
    )
    return UnitUnavailable(availability.reason or UnitOccupied(tenant_id=None))


def approve_application(session, application_id, lease_duration_months, notifier=None, **duration_policy):
    """Approve a pending application. Returns the new ``Tenant``.

    ``duration_policy`` is passed to ``validate_lease_duration``
    (``options``, ``allow_custom``, ``max_months``).
    """
    registry.validate_lease_duration(lease_duration_months, **duration_policy)

    try:
        with atomic(session):
            application = _lock_application(session, application_id)
            if not application.is_pending:
                raise ApplicationNotPending(application.id, application.status)

            prop = lock_property(session, application.property_id)
            availability = check_availability(
                session,
                application.property_id,
                application.unit_number,
                excluding_application_id=application.id,
                prop=prop,
            )
            if not availability.is_available:
                raise UnitUnavailable(availability.reason)

            registry.mark_approved(application, lease_duration_months, **duration_policy)

            lease_start = application.move_in_date
            tenant = Tenant(
                user_id=application.applicant_id,
                property_id=application.property_id,
                unit_number=application.unit_number,
                application=application,
                lease_start=lease_start,
                lease_end=lease_end_for(lease_start, lease_duration_months),
                monthly_rent=application.monthly_rent,
                status=ACTIVE,
            )
            session.add(tenant)
            session.flush()

            schedule = generate_payment_schedule(lease_start, application.monthly_rent, lease_duration_months)
            session.add_all([
                Payment(
                    tenant_id=tenant.id,
                    due_date=entry.due_date,
                    amount=entry.amount,
                    status='pending',
                    late_fee=Decimal('0.00'),
                )
                for entry in schedule
            ])

            increment_occupancy(session, prop)
    except ConstraintViolation as e:
        logger.info("Approval of application %s lost a race: %s", application_id, e.message)
        raise _lost_race(session, application_id) from e

    logger.info(
        "Application %s approved: tenant %s, %s payments scheduled",
        application_id, tenant.id, lease_duration_months,
    )
    _dispatch(notifier, "approved", application)
    return tenant


def reject_application(session, application_id, reason, notifier=None):
    application = registry.reject_application(session, application_id, reason)
    _dispatch(notifier, "rejected", application)
    return application


def terminate_tenancy(session, tenant_id, termination_date=None):
    """End an occupying tenancy and release its unit in the ledger."""
    if termination_date is not None and not isinstance(termination_date, date):
        raise ValidationError("termination_date must be a date")

    with atomic(session):
        tenant = session.get(Tenant, tenant_id, with_for_update=True, populate_existing=True)
        if tenant is None:
            raise NotFound(f"Tenant {tenant_id} not found")
        if not tenant.is_occupying:
            raise TenancyNotActive(f"Tenant {tenant_id} is already {tenant.status}")
        if termination_date is not None:
            if termination_date < tenant.lease_start:
                raise ValidationError("termination_date cannot be before the lease start")
            if termination_date < tenant.lease_end:
                tenant.lease_end = termination_date

        prop = lock_property(session, tenant.property_id)
        tenant.status = TERMINATED
        tenant.terminated_at = datetime.utcnow()
        decrement_occupancy(session, prop)

    logger.info("Tenant %s terminated; unit %s released", tenant_id, tenant.unit_number)
    return tenant
