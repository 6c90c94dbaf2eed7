from fastapi import APIRouter, Depends, Query
from typing import Annotated, Optional

from medprep.core.dependencies import SessionDep, AdminDep
from medprep.core.responses import ApiResponse
from medprep.core.validation import Email
from medprep.subscriptions.dao import SubscriptionDAO
from medprep.subscriptions.schemas import (
    AccessCheck,
    SubscriptionCreate,
    SubscriptionListQuery,
    SubscriptionPage,
    SubscriptionRead,
    SubscriptionUpdate,
)
from medprep.subscriptions.service import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


# Dependency factory
def get_subscription_service(session: SessionDep) -> SubscriptionService:
    return SubscriptionService(SubscriptionDAO(session))


SubscriptionServiceDep = Annotated[SubscriptionService, Depends(get_subscription_service)]


@router.post("", response_model=ApiResponse[SubscriptionRead], status_code=201)
async def create_subscription(
    subscription_data: SubscriptionCreate, service: SubscriptionServiceDep
) -> ApiResponse[SubscriptionRead]:
    subscription = await service.create_subscription(subscription_data)
    return ApiResponse(data=subscription, message="Subscription created successfully")


@router.get("", response_model=ApiResponse[SubscriptionPage], dependencies=[AdminDep])
async def list_subscriptions(
    query: Annotated[SubscriptionListQuery, Query()], service: SubscriptionServiceDep
) -> ApiResponse[SubscriptionPage]:
    return ApiResponse(data=await service.list_subscriptions(query))


@router.get("/{email}", response_model=ApiResponse[SubscriptionRead])
async def get_subscription(email: Email, service: SubscriptionServiceDep) -> ApiResponse[SubscriptionRead]:
    return ApiResponse(data=await service.get_subscription(email))


@router.patch("/{email}", response_model=ApiResponse[SubscriptionRead])
async def update_subscription(
    email: Email, changes: SubscriptionUpdate, service: SubscriptionServiceDep
) -> ApiResponse[SubscriptionRead]:
    subscription = await service.update_subscription(email, changes)
    return ApiResponse(data=subscription, message="Subscription updated successfully")


@router.post("/{email}/unsubscribe", response_model=ApiResponse[SubscriptionRead])
async def unsubscribe(email: Email, service: SubscriptionServiceDep) -> ApiResponse[SubscriptionRead]:
    subscription = await service.unsubscribe(email)
    return ApiResponse(data=subscription, message="Successfully unsubscribed")


@router.post("/{email}/resubscribe", response_model=ApiResponse[SubscriptionRead])
async def resubscribe(email: Email, service: SubscriptionServiceDep) -> ApiResponse[SubscriptionRead]:
    subscription = await service.resubscribe(email)
    return ApiResponse(data=subscription, message="Successfully resubscribed")


@router.get("/{email}/access", response_model=ApiResponse[AccessCheck])
async def check_access(
    email: Email, service: SubscriptionServiceDep, resource_type: Optional[str] = None
) -> ApiResponse[AccessCheck]:
    access, message = await service.check_access(email, resource_type)
    return ApiResponse(data=access, message=message)
