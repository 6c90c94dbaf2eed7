"""Database models for the subscriptions module."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean
from medprep.core.database import Base


class Subscription(Base):
    """Subscriber record keyed by email. Never hard-deleted; see `unsubscribed_at`."""

    __tablename__ = "subscriptions"

    email = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=True)
    subscription_tier = Column(String, nullable=False, default="free", index=True)
    opt_in_newsletter = Column(Boolean, nullable=False, default=True)

    # Billing state owned by the payment processor
    payment_subscription_id = Column(String, nullable=True)
    payment_subscription_status = Column(String, nullable=True)
    current_period_starts_at = Column(DateTime, nullable=True)
    current_period_ends_at = Column(DateTime, nullable=True)
    canceled_at = Column(DateTime, nullable=True)

    subscribed_at = Column(DateTime, nullable=False, default=datetime.now)
    unsubscribed_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    @property
    def is_active(self) -> bool:
        return self.unsubscribed_at is None
