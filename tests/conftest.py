"""
Test fixtures for the rentalcore backend.

Each test gets a fresh in-memory SQLite database with an owner, two
applicants and a 10-unit building. ``nearly_full`` seeds 9 resident
tenancies so the ledger starts consistent at 9/10.
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token

from rentalcore import create_app
from rentalcore.config import TestingConfig
from rentalcore.extensions import db as _db
from rentalcore.models import Property, RentalApplication, Tenant, User


# ── Seed data ──────────────────────────────────────────────────────────

MONTHLY_RENT = Decimal("1500.00")
MOVE_IN = date(2026, 1, 1)


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(Config)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def session(app):
    return _db.session


@pytest.fixture
def client(app):
    return app.test_client()


def _user(session, email, role):
    user = User(email=email, full_name=email.split("@")[0].title(), role=role)
    session.add(user)
    session.commit()
    return user


@pytest.fixture
def owner(session):
    return _user(session, "owner@example.com", "owner")


@pytest.fixture
def other_owner(session):
    return _user(session, "someone-else@example.com", "owner")


@pytest.fixture
def alice(session):
    return _user(session, "alice@example.com", "tenant")


@pytest.fixture
def bob(session):
    return _user(session, "bob@example.com", "tenant")


@pytest.fixture
def building(session, owner):
    prop = Property(
        owner_id=owner.id,
        name="Sunset Apartments",
        address="1 Sunset Blvd",
        monthly_rent=MONTHLY_RENT,
        total_units=10,
        occupied_units=0,
    )
    session.add(prop)
    session.commit()
    return prop


@pytest.fixture
def nearly_full(session, building):
    """Units 1-9 are let; unit 10 is the last one free."""
    resident = _user(session, "resident@example.com", "tenant")
    for unit in range(1, 10):
        session.add(Tenant(
            user_id=resident.id,
            property_id=building.id,
            unit_number=f"Unit {unit}",
            lease_start=date(2025, 1, 1),
            lease_end=date(2026, 1, 1),
            monthly_rent=MONTHLY_RENT,
            status="active",
        ))
    building.occupied_units = 9
    session.commit()
    return building


@pytest.fixture
def make_application(session):
    """Insert a pending application directly, bypassing submission checks."""
    counter = {"n": 0}

    def _make(prop, applicant, unit_number="Unit 10", move_in_date=MOVE_IN, monthly_rent=None, status="pending"):
        counter["n"] += 1
        submitted = datetime(2025, 12, 1) + timedelta(minutes=counter["n"])
        application = RentalApplication(
            property_id=prop.id,
            unit_number=unit_number,
            applicant_id=applicant.id,
            monthly_rent=monthly_rent if monthly_rent is not None else prop.monthly_rent,
            move_in_date=move_in_date,
            status=status,
            submitted_at=submitted,
            updated_at=submitted,
        )
        session.add(application)
        session.commit()
        return application

    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(identity=str(user.id), additional_claims={"role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _headers


def occupying_count(session, prop):
    return Tenant.query.filter(
        Tenant.property_id == prop.id,
        Tenant.status.in_(("active", "pending")),
    ).count()
