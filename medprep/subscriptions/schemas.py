"""Pydantic schemas for the subscriptions module API."""

from typing import Optional, Any, List
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, field_validator

from medprep.core.validation import Email, PaginationQuery


class SubscriptionTier(str, Enum):
    """Closed set of subscription tiers; resource allow-lists use the same values."""

    FREE = "free"
    NEWSLETTER_ONLY = "newsletter_only"
    PREMIUM_BASIC = "premium_basic"
    PREMIUM_PLUS = "premium_plus"


class PaymentSubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    TRIALING = "trialing"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    UNPAID = "unpaid"


class SubscriptionCreate(BaseModel):
    """Body for signing up an email."""

    email: Email
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    opt_in_newsletter: bool = True

    model_config = ConfigDict(extra="forbid")


class SubscriptionUpdate(BaseModel):
    """Partial update; only provided fields change."""

    subscription_tier: Optional[SubscriptionTier] = None
    opt_in_newsletter: Optional[bool] = None
    payment_subscription_status: Optional[PaymentSubscriptionStatus] = None

    model_config = ConfigDict(extra="forbid")


class SubscriptionRead(BaseModel):
    email: str
    user_id: Optional[str] = None
    subscription_tier: SubscriptionTier
    opt_in_newsletter: bool
    payment_subscription_id: Optional[str] = None
    payment_subscription_status: Optional[str] = None
    current_period_starts_at: Optional[datetime] = None
    current_period_ends_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    subscribed_at: datetime
    unsubscribed_at: Optional[datetime] = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubscriptionListQuery(PaginationQuery):
    """Pagination plus filters for the admin listing."""

    subscription_tier: Optional[SubscriptionTier] = None
    opt_in_newsletter: Optional[bool] = None
    payment_subscription_status: Optional[PaymentSubscriptionStatus] = None

    @field_validator("opt_in_newsletter", mode="before")
    @classmethod
    def parse_opt_in(cls, v: Any) -> Optional[bool]:
        # Query strings: only the literal "true" opts in
        if v is None or isinstance(v, bool):
            return v
        return str(v) == "true"


class PaginationInfo(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class SubscriptionPage(BaseModel):
    subscriptions: List[SubscriptionRead]
    pagination: PaginationInfo


class AccessCheck(BaseModel):
    hasAccess: bool
    subscription_tier: Optional[str] = None
    access_levels: List[str] = []
