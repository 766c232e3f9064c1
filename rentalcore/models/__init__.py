from rentalcore.extensions import db

# Core Models
from .user import User
from .property import Property
from .application import RentalApplication, ApplicationDocument
from .tenant import Tenant
from .payment import Payment

__all__ = [
    "db",
    "User",
    "Property",
    "RentalApplication",
    "ApplicationDocument",
    "Tenant",
    "Payment",
]
