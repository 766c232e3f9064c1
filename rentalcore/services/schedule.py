"""
Payment schedule generation.

A lease of N months produces exactly N rent obligations. Entry i falls due
``i`` calendar months after the lease start, so the first falls due on the
start date itself. ``relativedelta`` clamps to the last day of shorter
months, and each due date is computed from the original start so a Jan 31
lease stays on the 31st whenever the month allows it.

Full monthly rent is charged for every period, including a first period that
starts mid-month. Proration is not applied.
"""
from __future__ import annotations

from collections import namedtuple
from datetime import date
from decimal import Decimal, InvalidOperation

from dateutil.relativedelta import relativedelta

from ..errors import ValidationError

ScheduledPayment = namedtuple("ScheduledPayment", ["due_date", "amount"])

_CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Coerce a rent figure to a two-place Decimal, rejecting junk input."""
    if isinstance(value, bool):
        raise ValidationError("Monthly rent must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError("Monthly rent must be a number")
    if not amount.is_finite():
        raise ValidationError("Monthly rent must be a number")
    return amount.quantize(_CENTS)


def lease_end_for(lease_start: date, duration_months: int) -> date:
    return lease_start + relativedelta(months=duration_months)


def generate_payment_schedule(lease_start: date, monthly_rent, duration_months: int) -> list[ScheduledPayment]:
    if isinstance(duration_months, bool) or not isinstance(duration_months, int) or duration_months < 1:
        raise ValidationError("Lease duration must be a positive number of months")
    if not isinstance(lease_start, date):
        raise ValidationError("Lease start must be a date")

    amount = to_money(monthly_rent)
    if amount <= 0:
        raise ValidationError("Monthly rent must be greater than 0")

    return [
        ScheduledPayment(due_date=lease_start + relativedelta(months=i), amount=amount)
        for i in range(duration_months)
    ]


def summarize_schedule(schedule) -> dict:
    """Totals for a generated schedule or a tenant's stored payments."""
    entries = list(schedule)
    total = sum((Decimal(str(entry.amount)) for entry in entries), Decimal("0.00"))
    return {
        "payments_count": len(entries),
        "total_amount": float(total),
        "first_due_date": entries[0].due_date.isoformat() if entries else None,
        "last_due_date": entries[-1].due_date.isoformat() if entries else None,
    }
