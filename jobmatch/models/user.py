import uuid
from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from jobmatch.extensions import db


class SubscriptionStatus:
    NONE = "none"
    ACTIVE = "active"
    CANCELLED = "cancelled"


class User(db.Model):
    __tablename__ = "users"

    # ========== IDENTIFICATION ==========
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # ========== SUBSCRIPTION ==========
    premium = db.Column(db.Boolean, nullable=False, default=False)
    subscription_status = db.Column(db.String(20), nullable=False, default=SubscriptionStatus.NONE)
    subscription_ref = db.Column(db.String(120), nullable=True, index=True)

    # ========== TIMESTAMPS ==========
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "premium": self.premium,
            "subscription_status": self.subscription_status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<User {self.email}>"
