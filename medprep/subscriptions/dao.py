"""Data access for subscription records."""

from typing import List, Optional, Tuple
from sqlalchemy import select, func, and_, desc
from sqlalchemy.orm import Session

from medprep.core.base_dao import BaseDAO
from medprep.subscriptions.models import Subscription


class SubscriptionDAO(BaseDAO[Subscription]):
    """DB functionality for interaction with `Subscription` objects."""

    def __init__(self, db_session: Session):
        super().__init__(Subscription, db_session)

    async def get_by_email(self, email: str) -> Optional[Subscription]:
        """Get a subscription by email"""
        return await self.get_by_id(email)

    async def get_page(
        self,
        skip: int = 0,
        limit: int = 50,
        subscription_tier: Optional[str] = None,
        opt_in_newsletter: Optional[bool] = None,
        payment_subscription_status: Optional[str] = None,
    ) -> Tuple[List[Subscription], int]:
        """Get one page of subscriptions matching the filters, plus the total match count."""
        conditions = self._filter_conditions(
            {
                "subscription_tier": subscription_tier,
                "opt_in_newsletter": opt_in_newsletter,
                "payment_subscription_status": payment_subscription_status,
            }
        )

        query = select(self.model)
        count_query = select(func.count()).select_from(self.model)
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        query = query.order_by(desc(self.model.subscribed_at), self.model.email).offset(skip).limit(limit)

        items = list(self.db.execute(query).scalars().all())
        total = self.db.execute(count_query).scalar_one()
        return items, total
