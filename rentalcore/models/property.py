from datetime import datetime

from . import db


class Property(db.Model):
    __tablename__ = 'properties'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(512), nullable=True)

    # Asking rent, copied onto each new application
    monthly_rent = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    # Occupancy ledger
    total_units = db.Column(db.Integer, nullable=False, default=1)
    occupied_units = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = db.relationship('User', backref='properties', lazy=True)

    __table_args__ = (
        db.CheckConstraint('occupied_units >= 0', name='ck_properties_occupied_non_negative'),
        db.CheckConstraint('occupied_units <= total_units', name='ck_properties_occupied_within_total'),
    )

    def __repr__(self):
        return f'<Property {self.id}: {self.name}>'

    @property
    def available_units(self):
        return self.total_units - self.occupied_units

    @property
    def is_full(self):
        return self.occupied_units >= self.total_units

    def serialize(self):
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'name': self.name,
            'address': self.address,
            'monthly_rent': float(self.monthly_rent) if self.monthly_rent is not None else None,
            'total_units': self.total_units,
            'occupied_units': self.occupied_units,
            'available_units': self.available_units,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
