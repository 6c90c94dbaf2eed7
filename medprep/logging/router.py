# medprep/logging/router.py
"""Admin API for reading the request log."""

from fastapi import APIRouter, Depends, Query, Response
from typing import List, Optional

from medprep.core.dependencies import SessionDep, AdminDep
from medprep.core.exceptions import BadRequestError
from medprep.core.responses import ApiResponse
from medprep.logging.schemas import LogRead, StatusDistribution
from medprep.logging.service import LogService
from medprep.logging.dao import LogDAO


router = APIRouter(
    prefix="/logs",
    tags=["logs"],
    dependencies=[AdminDep],
)


# ===== DEPENDENCY INJECTION =====


def get_log_dao(session: SessionDep) -> LogDAO:
    """Get LogDAO instance."""
    return LogDAO(session)


def get_log_service(log_dao: LogDAO = Depends(get_log_dao)) -> LogService:
    """Get LogService instance."""
    return LogService(log_dao)


@router.get("", response_model=ApiResponse[List[LogRead]])
async def get_logs(
    response: Response,
    limit: int = Query(50, ge=1, le=1000, description="Maximum number of logs to return"),
    offset: int = Query(0, ge=0, description="Number of logs to skip"),
    hours: int = Query(24, ge=1, le=168, description="Time window in hours"),
    log_id: Optional[int] = Query(None, description="Specific log ID to retrieve"),
    status_min: Optional[int] = Query(None, ge=100, le=599, description="Minimum status code"),
    status_max: Optional[int] = Query(None, ge=100, le=599, description="Maximum status code"),
    search: Optional[str] = Query(None, description="Search term for filtering logs"),
    log_service: LogService = Depends(get_log_service),
) -> ApiResponse[List[LogRead]]:
    """Get logs with pagination and filtering."""
    if status_min is not None and status_max is not None and status_min > status_max:
        raise BadRequestError("status_min cannot be greater than status_max")

    logs = await log_service.get_logs_with_filters(
        limit=limit,
        offset=offset,
        hours=hours,
        log_id=log_id,
        status_min=status_min,
        status_max=status_max,
        search=search,
    )

    total_count = await log_service.get_logs_count_with_filters(
        hours=hours, status_min=status_min, status_max=status_max, search=search
    )

    # Set pagination headers
    response.headers["X-Total-Count"] = str(total_count)
    response.headers["X-Page-Size"] = str(limit)
    response.headers["X-Page-Offset"] = str(offset)

    return ApiResponse(data=logs)


@router.get("/errors", response_model=ApiResponse[List[LogRead]])
async def get_error_logs(
    hours: int = Query(24, ge=1, le=168, description="Time window in hours"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of error logs"),
    log_service: LogService = Depends(get_log_service),
) -> ApiResponse[List[LogRead]]:
    """Get 4xx and 5xx responses."""
    return ApiResponse(data=await log_service.get_error_logs(hours=hours, limit=limit))


@router.get("/status-distribution", response_model=ApiResponse[StatusDistribution])
async def get_status_distribution(
    hours: int = Query(24, ge=1, le=168, description="Time window in hours"),
    log_service: LogService = Depends(get_log_service),
) -> ApiResponse[StatusDistribution]:
    """Get count of responses per status code."""
    return ApiResponse(data=await log_service.get_status_distribution(hours=hours))
