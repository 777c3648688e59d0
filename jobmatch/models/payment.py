import uuid
from datetime import datetime
from enum import Enum

from jobmatch.extensions import db


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self):
        return self is not PaymentStatus.PENDING


class PaymentKind(str, Enum):
    SUBSCRIPTION = "subscription"
    JOB_BOOST = "job_boost"


class PaymentProvider(str, Enum):
    STRIPE = "stripe"
    PAYSTACK = "paystack"


class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    amount = db.Column(db.Integer, nullable=False)
    currency = db.Column(db.String(3), nullable=False, default="USD")
    description = db.Column(db.String(255), nullable=False, default="")
    status = db.Column(db.String(20), nullable=False, default=PaymentStatus.PENDING.value)
    kind = db.Column(db.String(20), nullable=False)
    provider = db.Column(db.String(20), nullable=False)
    external_ref = db.Column(db.String(120), unique=True, nullable=False, index=True)
    provider_ref = db.Column(db.String(255), nullable=True)
    job_id = db.Column(db.String(36), db.ForeignKey("jobs.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("amount >= 0", name="ck_payment_amount_non_negative"),
        db.CheckConstraint(
            "(kind = 'job_boost' AND job_id IS NOT NULL) OR "
            "(kind = 'subscription' AND job_id IS NULL)",
            name="ck_payment_kind_job",
        ),
        db.Index("idx_payment_user_created", "user_id", "created_at"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "amount": self.amount,
            "currency": self.currency,
            "description": self.description,
            "status": self.status,
            "kind": self.kind,
            "provider": self.provider,
            "external_ref": self.external_ref,
            "job_id": self.job_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
