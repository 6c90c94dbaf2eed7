"""Pydantic schemas for the logging module API."""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class LogRead(BaseModel):
    """Stored request log entry."""
    id: int
    timestamp: datetime
    method: str
    path: str
    status_code: int
    client_ip: Optional[str] = None
    request_headers: Optional[str] = None
    request_body: Optional[str] = None
    response_body: Optional[str] = None
    processing_time: Optional[float] = None  # in milliseconds
    user_agent: Optional[str] = None
    username: Optional[str] = None
    hostname: Optional[str] = None
    application_id: Optional[str] = Field(default=None, title="Application ID")

    model_config = ConfigDict(from_attributes=True)


class StatusCount(BaseModel):
    status_code: int
    count: int
    description: str


class StatusDistribution(BaseModel):
    status_distribution: List[StatusCount]
    period_hours: int
    timestamp: datetime
