"""Service layer for subscriber sign-up, tier changes and soft unsubscribe."""

import logging
import math
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from medprep.core.config import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from medprep.core.exceptions import BadRequestError, ConflictError, SubscriptionNotFound
from medprep.subscriptions.dao import SubscriptionDAO
from medprep.subscriptions.models import Subscription
from medprep.subscriptions.schemas import (
    AccessCheck,
    PaginationInfo,
    SubscriptionCreate,
    SubscriptionListQuery,
    SubscriptionPage,
    SubscriptionRead,
    SubscriptionTier,
    SubscriptionUpdate,
)

logger = logging.getLogger(__name__)

# Content categories unlocked by each tier
ACCESS_LEVELS: Dict[str, List[str]] = {
    SubscriptionTier.FREE: ["basic_resources"],
    SubscriptionTier.NEWSLETTER_ONLY: ["basic_resources", "newsletters"],
    SubscriptionTier.PREMIUM_BASIC: [
        "basic_resources",
        "newsletters",
        "premium_content",
        "mock_interviews",
    ],
    SubscriptionTier.PREMIUM_PLUS: [
        "basic_resources",
        "newsletters",
        "premium_content",
        "mock_interviews",
        "tutoring",
        "unlimited_tests",
    ],
}


class SubscriptionService:
    """Service for interacting with Subscription records."""

    def __init__(self, dao: SubscriptionDAO) -> None:
        self.dao = dao

    async def _get_existing(self, email: str) -> Subscription:
        subscription = await self.dao.get_by_email(email)
        if not subscription:
            raise SubscriptionNotFound()
        return subscription

    async def create_subscription(self, subscription_data: SubscriptionCreate) -> SubscriptionRead:
        """Sign up a new email."""
        existing = await self.dao.get_by_email(subscription_data.email)
        if existing:
            raise ConflictError("Email is already subscribed")

        subscription = Subscription(
            email=subscription_data.email,
            subscription_tier=subscription_data.subscription_tier.value,
            opt_in_newsletter=subscription_data.opt_in_newsletter,
        )
        created = await self.dao.create(subscription)
        logger.info(f"Subscription created for {created.email} ({created.subscription_tier})")
        return SubscriptionRead.model_validate(created)

    async def get_subscription(self, email: str) -> SubscriptionRead:
        """Get a subscription by email."""
        return SubscriptionRead.model_validate(await self._get_existing(email))

    async def update_subscription(self, email: str, changes: SubscriptionUpdate) -> SubscriptionRead:
        """Apply a partial update to a subscription."""
        subscription = await self._get_existing(email)
        previous_tier = subscription.subscription_tier

        # Tier and newsletter flag are required columns; only payment status may be cleared
        data = {
            key: value.value if hasattr(value, "value") else value
            for key, value in changes.model_dump(exclude_unset=True).items()
            if value is not None or key == "payment_subscription_status"
        }
        updated = await self.dao.update(subscription, **data)

        if updated.subscription_tier != previous_tier:
            logger.info(f"Subscription tier for {email} changed from {previous_tier} to {updated.subscription_tier}")
        return SubscriptionRead.model_validate(updated)

    async def unsubscribe(self, email: str) -> SubscriptionRead:
        """Soft-unsubscribe: the record stays, access stops."""
        subscription = await self._get_existing(email)
        if subscription.unsubscribed_at:
            raise BadRequestError("Email is already unsubscribed")

        updated = await self.dao.update(subscription, unsubscribed_at=datetime.now(), opt_in_newsletter=False)
        logger.info(f"{email} unsubscribed")
        return SubscriptionRead.model_validate(updated)

    async def resubscribe(self, email: str) -> SubscriptionRead:
        """Undo a previous unsubscribe."""
        subscription = await self._get_existing(email)
        if not subscription.unsubscribed_at:
            raise BadRequestError("Email is not unsubscribed")

        updated = await self.dao.update(subscription, unsubscribed_at=None, opt_in_newsletter=True)
        logger.info(f"{email} resubscribed")
        return SubscriptionRead.model_validate(updated)

    async def list_subscriptions(self, query: SubscriptionListQuery) -> SubscriptionPage:
        """Get one page of subscriptions for the admin listing."""
        page = query.page or DEFAULT_PAGE
        limit = query.limit or DEFAULT_PAGE_SIZE

        items, total = await self.dao.get_page(
            skip=(page - 1) * limit,
            limit=limit,
            subscription_tier=query.subscription_tier.value if query.subscription_tier else None,
            opt_in_newsletter=query.opt_in_newsletter,
            payment_subscription_status=(
                query.payment_subscription_status.value if query.payment_subscription_status else None
            ),
        )
        return SubscriptionPage(
            subscriptions=[SubscriptionRead.model_validate(item) for item in items],
            pagination=PaginationInfo(
                page=page,
                limit=limit,
                total=total,
                totalPages=math.ceil(total / limit),
            ),
        )

    async def check_access(
        self, email: str, resource_type: Optional[str] = None
    ) -> Tuple[AccessCheck, Optional[str]]:
        """
        Report which content categories an email can reach.

        Returns:
            The access summary and an optional message for the envelope
        """
        subscription = await self.dao.get_by_email(email)
        if not subscription or not subscription.is_active:
            return AccessCheck(hasAccess=False), "No active subscription found"

        tier = subscription.subscription_tier
        # Tiers written outside this API may not be known here
        levels = ACCESS_LEVELS.get(tier, [])
        has_access = not resource_type or resource_type in levels
        return AccessCheck(hasAccess=has_access, subscription_tier=tier, access_levels=levels), None
