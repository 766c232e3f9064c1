from .applications import (
    DEFAULT_LEASE_DURATIONS,
    add_document,
    delete_application,
    get_application,
    list_applications,
    submit_application,
    validate_lease_duration,
)
from .availability import (
    AlreadyDecided,
    Availability,
    PropertyAtCapacity,
    UnitOccupied,
    check_availability,
)
from .documents import LocalDocumentStore
from .ledger import count_occupying_tenants, reconcile_occupancy
from .schedule import generate_payment_schedule, lease_end_for, summarize_schedule
from .transitions import approve_application, reject_application, terminate_tenancy
