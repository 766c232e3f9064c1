from datetime import datetime

from sqlalchemy import text

from . import db

ACTIVE = 'active'
PENDING = 'pending'
TERMINATED = 'terminated'
OCCUPYING_STATUSES = (ACTIVE, PENDING)

_OCCUPYING_CLAUSE = text("status IN ('active', 'pending')")


class Tenant(db.Model):
    __tablename__ = 'tenants'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    property_id = db.Column(db.Integer, db.ForeignKey('properties.id'), nullable=False)
    unit_number = db.Column(db.String(50), nullable=False)
    application_id = db.Column(
        db.Integer,
        db.ForeignKey('rental_applications.id', ondelete='SET NULL'),
        nullable=True,
        unique=True,
    )

    # Lease Terms
    lease_start = db.Column(db.Date, nullable=False)
    lease_end = db.Column(db.Date, nullable=False)
    monthly_rent = db.Column(db.Numeric(10, 2), nullable=False)

    status = db.Column(db.String(20), default=ACTIVE, nullable=False)  # active, pending, terminated
    terminated_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('User', backref=db.backref('tenancies', lazy=True))
    rental_property = db.relationship('Property', backref=db.backref('tenants', lazy='dynamic'))
    application = db.relationship('RentalApplication', back_populates='tenancy')
    payments = db.relationship(
        'Payment',
        back_populates='tenant',
        lazy=True,
        order_by='Payment.due_date',
    )

    __table_args__ = (
        # At most one occupying tenancy per unit
        db.Index(
            'uq_tenants_occupied_unit',
            'property_id',
            'unit_number',
            unique=True,
            sqlite_where=_OCCUPYING_CLAUSE,
            postgresql_where=_OCCUPYING_CLAUSE,
        ),
        db.CheckConstraint(
            "status IN ('active', 'pending', 'terminated')",
            name='ck_tenants_status',
        ),
    )

    def __repr__(self):
        return f'<Tenant {self.id}: Unit {self.unit_number} at Property {self.property_id} ({self.status})>'

    @property
    def is_occupying(self):
        return self.status in OCCUPYING_STATUSES

    def serialize(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'property_id': self.property_id,
            'unit_number': self.unit_number,
            'application_id': self.application_id,
            'lease_start': self.lease_start.isoformat(),
            'lease_end': self.lease_end.isoformat(),
            'monthly_rent': float(self.monthly_rent),
            'status': self.status,
            'terminated_at': self.terminated_at.isoformat() if self.terminated_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
