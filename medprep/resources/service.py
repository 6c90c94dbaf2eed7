"""Service layer for resource downloads and resource administration."""

import logging
from datetime import datetime
from typing import List, Optional

from medprep.core.config import SIGNED_URL_EXPIRES_IN
from medprep.core.exceptions import (
    ConflictError,
    InsufficientAccess,
    NoActiveSubscription,
    ResourceNotFound,
)
from medprep.core.storage import SignedUrlIssuer
from medprep.resources.dao import ResourceDAO, ResourceDownloadDAO
from medprep.resources.models import Resource
from medprep.resources.schemas import (
    ResourceCreate,
    ResourceDownloadUrl,
    ResourceRead,
    ResourceUpdate,
)
from medprep.subscriptions.dao import SubscriptionDAO
from medprep.subscriptions.models import Subscription

logger = logging.getLogger(__name__)


class ResourceAccessService:
    """
    Decides whether a subscriber may download a resource.

    Nothing is cached between calls: every request re-reads the subscription
    and the resource, so tier changes, unsubscribes and deactivations apply
    to the very next request.
    """

    def __init__(
        self,
        subscription_dao: SubscriptionDAO,
        resource_dao: ResourceDAO,
        download_dao: ResourceDownloadDAO,
        issuer: SignedUrlIssuer,
    ) -> None:
        self.subscription_dao = subscription_dao
        self.resource_dao = resource_dao
        self.download_dao = download_dao
        self.issuer = issuer

    async def _get_active_subscription(self, email: str) -> Subscription:
        subscription = await self.subscription_dao.get_by_email(email)
        if not subscription or not subscription.is_active:
            raise NoActiveSubscription()
        return subscription

    async def get_resource_download_url(
        self, email: str, resource_id: str, source: Optional[str] = None
    ) -> ResourceDownloadUrl:
        """
        Issue a signed download URL for a resource.

        Args:
            email: Subscriber email
            resource_id: Resource to download
            source: Optional attribution tag stored with the download log

        Returns:
            The signed URL and its lifetime in seconds

        Raises:
            NoActiveSubscription: no subscription, or it was unsubscribed
            ResourceNotFound: resource missing or inactive
            InsufficientAccess: subscription tier not allowed for the resource
            UpstreamServiceError: the storage service could not sign the URL
        """
        subscription = await self._get_active_subscription(email)
        logger.debug(f"Subscription found for {email} ({subscription.subscription_tier})")

        # Both predicates run against this single read of the resource
        resource = await self.resource_dao.get_by_id(resource_id)
        if resource is None:
            raise ResourceNotFound()
        if subscription.subscription_tier not in resource.allowed_tiers:
            raise InsufficientAccess()
        if not resource.is_active:
            raise ResourceNotFound()

        download_url = await self.issuer.create_signed_url(resource.file_path, SIGNED_URL_EXPIRES_IN)

        await self._log_download(email, resource_id, source)

        return ResourceDownloadUrl(downloadUrl=download_url, expiresIn=SIGNED_URL_EXPIRES_IN)

    async def _log_download(self, email: str, resource_id: str, source: Optional[str]) -> None:
        # The URL is already issued; a failed audit write must not fail the request
        try:
            await self.download_dao.log_download(email, resource_id, source)
        except Exception as e:
            logger.warning(f"Failed to log download of {resource_id} by {email}: {e}")

    async def get_user_resources(self, email: str) -> List[ResourceRead]:
        """List the active resources the subscriber's tier can download."""
        subscription = await self._get_active_subscription(email)
        resources = await self.resource_dao.get_for_tier(subscription.subscription_tier)
        return [ResourceRead.model_validate(resource) for resource in resources]


class ResourceAdminService:
    """Administrative CRUD over resources. Callers must sit behind the admin gate."""

    def __init__(self, dao: ResourceDAO) -> None:
        self.dao = dao

    async def _get_existing(self, resource_id: str) -> Resource:
        resource = await self.dao.get_by_id(resource_id)
        if not resource:
            raise ResourceNotFound("Resource not found")
        return resource

    async def get_all_resources(self) -> List[ResourceRead]:
        """Get every resource, active or not."""
        resources = await self.dao.get_all()
        return [ResourceRead.model_validate(resource) for resource in resources]

    async def create_resource(self, resource_data: ResourceCreate) -> ResourceRead:
        """Register a new resource."""
        if await self.dao.get_by_id(resource_data.id):
            raise ConflictError("Resource already exists")

        resource = Resource(
            id=resource_data.id,
            name=resource_data.name,
            description=resource_data.description,
            file_path=resource_data.file_path,
            is_active=resource_data.is_active,
        )
        resource.set_allowed_tiers(tier.value for tier in resource_data.allowed_tiers)
        created = await self.dao.create(resource)
        logger.info(f"Resource {created.id} created for tiers {created.allowed_tiers}")
        return ResourceRead.model_validate(created)

    async def update_resource(self, resource_id: str, changes: ResourceUpdate) -> ResourceRead:
        """Apply a partial update to a resource."""
        resource = await self._get_existing(resource_id)

        # Only description may be cleared with an explicit null
        data = {
            key: value
            for key, value in changes.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }
        tiers = data.pop("allowed_tiers", None)
        if tiers is not None:
            resource.set_allowed_tiers(tier.value for tier in tiers)

        updated = await self.dao.update(resource, updated_at=datetime.now(), **data)
        logger.info(f"Resource {resource_id} updated: {sorted(changes.model_fields_set)}")
        return ResourceRead.model_validate(updated)

    async def delete_resource(self, resource_id: str) -> None:
        """Delete a resource and its tier entries."""
        await self._get_existing(resource_id)
        await self.dao.delete(resource_id)
        logger.info(f"Resource {resource_id} deleted")
