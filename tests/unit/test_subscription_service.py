"""
Unit tests for the subscription service.
Tests sign-up, partial updates, soft unsubscribe, pagination and access checks.
"""

import pytest
from unittest.mock import Mock, AsyncMock
from datetime import datetime

from medprep.core.exceptions import BadRequestError, ConflictError, SubscriptionNotFound
from medprep.subscriptions.models import Subscription
from medprep.subscriptions.schemas import (
    SubscriptionCreate,
    SubscriptionListQuery,
    SubscriptionTier,
    SubscriptionUpdate,
)
from medprep.subscriptions.service import SubscriptionService


def _subscription(email="student@example.com", tier="free", unsubscribed_at=None, opt_in=True) -> Subscription:
    return Subscription(
        email=email,
        subscription_tier=tier,
        opt_in_newsletter=opt_in,
        unsubscribed_at=unsubscribed_at,
        subscribed_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1),
    )


async def _apply_update(db_obj, **data):
    for field, value in data.items():
        setattr(db_obj, field, value)
    return db_obj


async def _apply_create(db_obj):
    return await _apply_update(db_obj, subscribed_at=datetime(2024, 1, 1), updated_at=datetime(2024, 1, 1))


class TestSubscriptionServiceCore:
    """Test subscription lifecycle operations"""

    @pytest.fixture
    def mock_dao(self):
        dao = Mock()
        dao.get_by_email = AsyncMock(return_value=None)
        dao.create = AsyncMock(side_effect=_apply_create)
        dao.update = AsyncMock(side_effect=_apply_update)
        dao.get_page = AsyncMock(return_value=([], 0))
        return dao

    @pytest.fixture
    def service(self, mock_dao):
        return SubscriptionService(mock_dao)

    async def test_create_subscription_defaults(self, service, mock_dao):
        created = await service.create_subscription(SubscriptionCreate(email="new@example.com"))

        assert created.email == "new@example.com"
        assert created.subscription_tier == SubscriptionTier.FREE
        assert created.opt_in_newsletter is True
        mock_dao.create.assert_awaited_once()

    async def test_create_duplicate_email_conflicts(self, service, mock_dao):
        mock_dao.get_by_email.return_value = _subscription()

        with pytest.raises(ConflictError) as exc_info:
            await service.create_subscription(SubscriptionCreate(email="student@example.com"))

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "Email is already subscribed"
        mock_dao.create.assert_not_called()

    async def test_get_missing_subscription(self, service):
        with pytest.raises(SubscriptionNotFound) as exc_info:
            await service.get_subscription("missing@example.com")

        assert exc_info.value.status_code == 404

    async def test_update_changes_only_provided_fields(self, service, mock_dao):
        mock_dao.get_by_email.return_value = _subscription(opt_in=False)

        updated = await service.update_subscription(
            "student@example.com", SubscriptionUpdate(subscription_tier=SubscriptionTier.PREMIUM_PLUS)
        )

        assert updated.subscription_tier == SubscriptionTier.PREMIUM_PLUS
        assert updated.opt_in_newsletter is False
        mock_dao.update.assert_awaited_once()
        assert mock_dao.update.await_args.kwargs == {"subscription_tier": "premium_plus"}

    async def test_update_skips_null_required_fields(self, service, mock_dao):
        mock_dao.get_by_email.return_value = _subscription(tier="premium_basic")

        updated = await service.update_subscription(
            "student@example.com", SubscriptionUpdate(subscription_tier=None, opt_in_newsletter=None)
        )

        assert updated.subscription_tier == SubscriptionTier.PREMIUM_BASIC
        assert updated.opt_in_newsletter is True
        assert mock_dao.update.await_args.kwargs == {}

    async def test_unsubscribe_sets_timestamp_and_opts_out(self, service, mock_dao):
        mock_dao.get_by_email.return_value = _subscription()

        updated = await service.unsubscribe("student@example.com")

        assert updated.unsubscribed_at is not None
        assert updated.opt_in_newsletter is False

    async def test_unsubscribe_twice_rejected(self, service, mock_dao):
        mock_dao.get_by_email.return_value = _subscription(unsubscribed_at=datetime(2024, 2, 1))

        with pytest.raises(BadRequestError) as exc_info:
            await service.unsubscribe("student@example.com")

        assert exc_info.value.message == "Email is already unsubscribed"

    async def test_resubscribe_clears_timestamp(self, service, mock_dao):
        mock_dao.get_by_email.return_value = _subscription(unsubscribed_at=datetime(2024, 2, 1), opt_in=False)

        updated = await service.resubscribe("student@example.com")

        assert updated.unsubscribed_at is None
        assert updated.opt_in_newsletter is True

    async def test_resubscribe_active_rejected(self, service, mock_dao):
        mock_dao.get_by_email.return_value = _subscription()

        with pytest.raises(BadRequestError) as exc_info:
            await service.resubscribe("student@example.com")

        assert exc_info.value.message == "Email is not unsubscribed"


class TestSubscriptionListing:
    """Test the paginated admin listing"""

    @pytest.fixture
    def mock_dao(self):
        dao = Mock()
        dao.get_page = AsyncMock(return_value=([_subscription()], 101))
        return dao

    @pytest.fixture
    def service(self, mock_dao):
        return SubscriptionService(mock_dao)

    async def test_defaults_and_total_pages(self, service, mock_dao):
        page = await service.list_subscriptions(SubscriptionListQuery())

        assert page.pagination.page == 1
        assert page.pagination.limit == 50
        assert page.pagination.total == 101
        assert page.pagination.totalPages == 3
        mock_dao.get_page.assert_awaited_once_with(
            skip=0, limit=50, subscription_tier=None, opt_in_newsletter=None, payment_subscription_status=None
        )

    async def test_filters_and_offset_passed_to_dao(self, service, mock_dao):
        query = SubscriptionListQuery(page="3", limit="20", subscription_tier="premium_basic", opt_in_newsletter="false")

        await service.list_subscriptions(query)

        mock_dao.get_page.assert_awaited_once_with(
            skip=40,
            limit=20,
            subscription_tier="premium_basic",
            opt_in_newsletter=False,
            payment_subscription_status=None,
        )


class TestAccessCheck:
    """Test the tier access summary"""

    @pytest.fixture
    def mock_dao(self):
        dao = Mock()
        dao.get_by_email = AsyncMock(return_value=_subscription(tier="premium_basic"))
        return dao

    @pytest.fixture
    def service(self, mock_dao):
        return SubscriptionService(mock_dao)

    async def test_no_subscription(self, service, mock_dao):
        mock_dao.get_by_email.return_value = None

        access, message = await service.check_access("nobody@example.com")

        assert access.hasAccess is False
        assert message == "No active subscription found"

    async def test_access_levels_for_tier(self, service):
        access, message = await service.check_access("student@example.com")

        assert access.hasAccess is True
        assert access.subscription_tier == SubscriptionTier.PREMIUM_BASIC
        assert "mock_interviews" in access.access_levels
        assert message is None

    async def test_resource_type_outside_tier(self, service):
        access, _ = await service.check_access("student@example.com", "tutoring")

        assert access.hasAccess is False

    async def test_unknown_stored_tier_has_no_levels(self, service, mock_dao):
        mock_dao.get_by_email.return_value = _subscription(tier="legacy_gold")

        access, message = await service.check_access("student@example.com", "basic_resources")

        assert access.hasAccess is False
        assert access.subscription_tier == "legacy_gold"
        assert access.access_levels == []
        assert message is None
