import uuid
from ..extensions import db
from ..utils.dates import utcnow


class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(120), unique=True, nullable=False)
    full_name = db.Column(db.String(200), nullable=True)
    password = db.Column(db.String(200), nullable=False)

    plan = db.Column(db.String(50), default="free", nullable=False)

    # Set by the Stripe webhook once a checkout completes
    stripe_customer_id = db.Column(db.String(255), nullable=True, index=True)
    stripe_subscription_id = db.Column(db.String(255), nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=utcnow)

    def __repr__(self):
        return f"<Profile {self.email} ({self.plan})>"
