from fastapi import APIRouter, Depends
from typing import List, Annotated, Optional

from medprep.core.dependencies import SessionDep, SignedUrlIssuerDep, AdminDep
from medprep.core.responses import ApiResponse
from medprep.core.validation import Email, ResourceId
from medprep.resources.dao import ResourceDAO, ResourceDownloadDAO
from medprep.resources.schemas import (
    ResourceCreate,
    ResourceDownloadUrl,
    ResourceRead,
    ResourceUpdate,
)
from medprep.resources.service import ResourceAccessService, ResourceAdminService
from medprep.subscriptions.dao import SubscriptionDAO

router = APIRouter(prefix="/resources", tags=["Resources"])


# Dependency factories
def get_resource_access_service(session: SessionDep, issuer: SignedUrlIssuerDep) -> ResourceAccessService:
    return ResourceAccessService(
        subscription_dao=SubscriptionDAO(session),
        resource_dao=ResourceDAO(session),
        download_dao=ResourceDownloadDAO(session),
        issuer=issuer,
    )


def get_resource_admin_service(session: SessionDep) -> ResourceAdminService:
    return ResourceAdminService(ResourceDAO(session))


# Type aliases for dependencies
AccessDep = Annotated[ResourceAccessService, Depends(get_resource_access_service)]
ResourceAdminDep = Annotated[ResourceAdminService, Depends(get_resource_admin_service)]


# --- Admin routes ---


@router.get("", response_model=ApiResponse[List[ResourceRead]], dependencies=[AdminDep])
async def get_all_resources(service: ResourceAdminDep) -> ApiResponse[List[ResourceRead]]:
    return ApiResponse(data=await service.get_all_resources())


@router.post("", response_model=ApiResponse[ResourceRead], status_code=201, dependencies=[AdminDep])
async def create_resource(resource_data: ResourceCreate, service: ResourceAdminDep) -> ApiResponse[ResourceRead]:
    resource = await service.create_resource(resource_data)
    return ApiResponse(data=resource, message="Resource created successfully")


@router.patch("/{resource_id}", response_model=ApiResponse[ResourceRead], dependencies=[AdminDep])
async def update_resource(
    resource_id: ResourceId, changes: ResourceUpdate, service: ResourceAdminDep
) -> ApiResponse[ResourceRead]:
    resource = await service.update_resource(resource_id, changes)
    return ApiResponse(data=resource, message="Resource updated successfully")


@router.delete("/{resource_id}", response_model=ApiResponse[None], dependencies=[AdminDep])
async def delete_resource(resource_id: ResourceId, service: ResourceAdminDep) -> ApiResponse[None]:
    await service.delete_resource(resource_id)
    return ApiResponse(data=None, message="Resource deleted successfully")


# --- Subscriber routes ---


@router.get("/{email}/{resource_id}/download", response_model=ApiResponse[ResourceDownloadUrl])
async def get_resource_download_url(
    email: Email, resource_id: ResourceId, service: AccessDep, source: Optional[str] = None
) -> ApiResponse[ResourceDownloadUrl]:
    download = await service.get_resource_download_url(email, resource_id, source)
    return ApiResponse(data=download, message="Download URL generated successfully")


@router.get("/{email}", response_model=ApiResponse[List[ResourceRead]])
async def get_user_resources(email: Email, service: AccessDep) -> ApiResponse[List[ResourceRead]]:
    return ApiResponse(data=await service.get_user_resources(email))
