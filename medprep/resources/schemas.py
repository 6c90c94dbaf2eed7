"""Pydantic schemas for the resources module API."""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator

from medprep.subscriptions.schemas import SubscriptionTier


def _required(value: str, message: str) -> str:
    if not value or not value.strip():
        raise ValueError(message)
    return value


class ResourceCreate(BaseModel):
    """Body for registering a downloadable resource."""

    id: str
    name: str
    description: Optional[str] = None
    file_path: str
    allowed_tiers: List[SubscriptionTier]
    is_active: bool = True

    model_config = ConfigDict(extra="forbid")

    @field_validator("id")
    @classmethod
    def id_required(cls, v: str) -> str:
        return _required(v, "Resource ID is required")

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return _required(v, "Resource name is required")

    @field_validator("file_path")
    @classmethod
    def file_path_required(cls, v: str) -> str:
        return _required(v, "File path is required")

    @field_validator("allowed_tiers")
    @classmethod
    def at_least_one_tier(cls, v: List[SubscriptionTier]) -> List[SubscriptionTier]:
        if not v:
            raise ValueError("At least one tier must be allowed")
        return v


class ResourceUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: Optional[str] = None
    description: Optional[str] = None
    file_path: Optional[str] = None
    allowed_tiers: Optional[List[SubscriptionTier]] = None
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _required(v, "Resource name cannot be empty")

    @field_validator("file_path")
    @classmethod
    def file_path_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _required(v, "File path cannot be empty")

    @field_validator("allowed_tiers")
    @classmethod
    def tiers_not_empty(cls, v: Optional[List[SubscriptionTier]]) -> Optional[List[SubscriptionTier]]:
        if v is not None and not v:
            raise ValueError("At least one tier must be allowed")
        return v


class ResourceRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    file_path: str
    allowed_tiers: List[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ResourceDownloadUrl(BaseModel):
    downloadUrl: str
    expiresIn: int
