from datetime import datetime

from . import db

PAYMENT_STATUSES = ('pending', 'completed', 'overdue', 'failed')


class Payment(db.Model):
    __tablename__ = 'payments'

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenants.id'), nullable=False, index=True)

    # Scheduled obligation
    due_date = db.Column(db.Date, nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    late_fee = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    status = db.Column(db.String(20), default='pending', nullable=False, index=True)  # pending, completed, overdue, failed
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    tenant = db.relationship('Tenant', back_populates='payments')

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pending', 'completed', 'overdue', 'failed')",
            name='ck_payments_status',
        ),
    )

    def __repr__(self):
        return f'<Payment {self.id}: ${self.amount} due {self.due_date} - {self.status}>'

    def serialize(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "due_date": self.due_date.isoformat(),
            "amount": float(self.amount),
            "late_fee": float(self.late_fee or 0),
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
