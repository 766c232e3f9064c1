from datetime import datetime

from . import db

PENDING = 'pending'
APPROVED = 'approved'
REJECTED = 'rejected'
APPLICATION_STATUSES = (PENDING, APPROVED, REJECTED)


class RentalApplication(db.Model):
    __tablename__ = 'rental_applications'

    id = db.Column(db.Integer, primary_key=True)
    property_id = db.Column(db.Integer, db.ForeignKey('properties.id'), nullable=False)
    unit_number = db.Column(db.String(50), nullable=False)
    applicant_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    monthly_rent = db.Column(db.Numeric(10, 2), nullable=False)
    move_in_date = db.Column(db.Date, nullable=False)
    notes = db.Column(db.Text, nullable=True)

    # Decision
    status = db.Column(db.String(20), default=PENDING, nullable=False, index=True)  # pending, approved, rejected
    rejection_reason = db.Column(db.Text, nullable=True)
    lease_duration_months = db.Column(db.Integer, nullable=True)
    decided_at = db.Column(db.DateTime, nullable=True)

    submitted_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    rental_property = db.relationship('Property', backref=db.backref('applications', lazy='dynamic'))
    applicant = db.relationship('User', backref=db.backref('applications', lazy='dynamic'))
    documents = db.relationship(
        'ApplicationDocument',
        back_populates='application',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='ApplicationDocument.id',
    )
    # No delete cascade: the tenancy outlives the application it came from
    tenancy = db.relationship('Tenant', back_populates='application', uselist=False)

    __table_args__ = (
        db.Index('ix_rental_applications_unit', 'property_id', 'unit_number'),
        db.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name='ck_rental_applications_status',
        ),
    )

    def __repr__(self):
        return f'<RentalApplication {self.id}: {self.unit_number} at Property {self.property_id} ({self.status})>'

    @property
    def is_pending(self):
        return self.status == PENDING

    def serialize(self):
        return {
            'id': self.id,
            'property_id': self.property_id,
            'unit_number': self.unit_number,
            'applicant_id': self.applicant_id,
            'monthly_rent': float(self.monthly_rent),
            'move_in_date': self.move_in_date.isoformat(),
            'notes': self.notes,
            'status': self.status,
            'rejection_reason': self.rejection_reason,
            'lease_duration_months': self.lease_duration_months,
            'decided_at': self.decided_at.isoformat() if self.decided_at else None,
            'submitted_at': self.submitted_at.isoformat() if self.submitted_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'tenant_id': self.tenancy.id if self.tenancy else None,
            'documents': [doc.serialize() for doc in self.documents],
        }


class ApplicationDocument(db.Model):
    __tablename__ = 'application_documents'

    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(
        db.Integer,
        db.ForeignKey('rental_applications.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(255), nullable=False)
    content_type = db.Column(db.String(100), nullable=True)
    storage_path = db.Column(db.String(500), nullable=False)
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow)

    application = db.relationship('RentalApplication', back_populates='documents')

    def __repr__(self):
        return f'<ApplicationDocument {self.id}: {self.name}>'

    def serialize(self):
        return {
            'id': self.id,
            'application_id': self.application_id,
            'name': self.name,
            'content_type': self.content_type,
            'uploaded_at': self.uploaded_at.isoformat() if self.uploaded_at else None,
        }
