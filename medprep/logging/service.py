# medprep/logging/service.py
"""Service layer for reading the request log."""

from typing import List, Optional
from datetime import datetime, timedelta

from medprep.logging.dao import LogDAO
from medprep.logging.schemas import LogRead, StatusCount, StatusDistribution


class LogService:
    """Service for retrieving and summarizing request log data."""

    def __init__(self, log_dao: LogDAO):
        self.dao = log_dao

    async def get_logs_with_filters(
        self,
        limit: int = 50,
        offset: int = 0,
        hours: int = 24,
        log_id: Optional[int] = None,
        status_min: Optional[int] = None,
        status_max: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[LogRead]:
        """Get logs with pagination and filtering."""
        logs = await self.dao.get_logs_with_filters(
            limit=limit,
            offset=offset,
            hours=hours,
            log_id=log_id,
            status_min=status_min,
            status_max=status_max,
            search=search,
        )
        return [LogRead.model_validate(log) for log in logs]

    async def get_logs_count_with_filters(
        self,
        hours: int = 24,
        status_min: Optional[int] = None,
        status_max: Optional[int] = None,
        search: Optional[str] = None,
    ) -> int:
        return await self.dao.count_logs_with_filters(
            hours=hours, status_min=status_min, status_max=status_max, search=search
        )

    async def get_status_distribution(self, hours: int = 24) -> StatusDistribution:
        """Get count of responses per status code with a readable description."""
        rows = await self.dao.get_status_distribution(hours)
        return StatusDistribution(
            status_distribution=[
                StatusCount(
                    status_code=row["status_code"],
                    count=row["count"],
                    description=self._get_status_description(row["status_code"]),
                )
                for row in rows
            ],
            period_hours=hours,
            timestamp=datetime.now(),
        )

    async def get_error_logs(self, hours: int = 24, limit: int = 100) -> List[LogRead]:
        """Get 4xx and 5xx responses within the time window."""
        since = datetime.now() - timedelta(hours=hours)
        logs = await self.dao.get_logs_by_status_range(400, 599, since, limit)
        return [LogRead.model_validate(log) for log in logs]

    def _get_status_description(self, status_code: int) -> str:
        """Get human-readable description for status code."""
        if 200 <= status_code < 300:
            return "Success"
        elif 300 <= status_code < 400:
            return "Redirect"
        elif 400 <= status_code < 500:
            return "Client Error"
        elif 500 <= status_code < 600:
            return "Server Error"
        return "Unknown"
