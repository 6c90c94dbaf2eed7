# medprep/logging/dao.py
"""Data access for the request log table."""

from sqlalchemy.orm import Session
from sqlalchemy import select, func, or_, cast, String, desc
from typing import List, Dict, Any, Optional
from datetime import datetime, timedelta

from medprep.core.base_dao import BaseDAO
from medprep.logging.models import Log


class LogDAO(BaseDAO[Log]):
    """DAO for Log operations."""

    def __init__(self, db_session: Session):
        super().__init__(Log, db_session)

    def _apply_filters(
        self,
        query,
        hours: int,
        status_min: Optional[int],
        status_max: Optional[int],
        search: Optional[str],
    ):
        time_threshold = datetime.now() - timedelta(hours=hours)
        query = query.where(self.model.timestamp >= time_threshold)

        if status_min is not None:
            query = query.where(self.model.status_code >= status_min)
        if status_max is not None:
            query = query.where(self.model.status_code <= status_max)

        if search:
            search_term = f"%{search}%"
            query = query.where(
                or_(
                    self.model.path.ilike(search_term),
                    self.model.method.ilike(search_term),
                    self.model.client_ip.ilike(search_term),
                    self.model.username.ilike(search_term),
                    self.model.hostname.ilike(search_term),
                    # Convert status_code to string for searching
                    cast(self.model.status_code, String).ilike(search_term),
                )
            )
        return query

    async def get_logs_with_filters(
        self,
        limit: int = 50,
        offset: int = 0,
        hours: int = 24,
        log_id: Optional[int] = None,
        status_min: Optional[int] = None,
        status_max: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Log]:
        """Get logs with time window, status range and free-text filters."""
        if log_id:
            log = await self.get_by_id(log_id)
            return [log] if log else []

        query = self._apply_filters(select(self.model), hours, status_min, status_max, search)
        query = query.order_by(self.model.timestamp.desc()).offset(offset).limit(limit)

        return list(self.db.execute(query).scalars().all())

    async def count_logs_with_filters(
        self,
        hours: int = 24,
        status_min: Optional[int] = None,
        status_max: Optional[int] = None,
        search: Optional[str] = None,
    ) -> int:
        """Get total count of logs matching the filters."""
        query = self._apply_filters(
            select(func.count()).select_from(self.model), hours, status_min, status_max, search
        )
        return self.db.execute(query).scalar_one()

    async def get_status_distribution(self, hours: int = 24) -> List[Dict[str, Any]]:
        """Get count of logs per status code within the time window."""
        time_threshold = datetime.now() - timedelta(hours=hours)
        query = (
            select(self.model.status_code, func.count())
            .where(self.model.timestamp >= time_threshold)
            .group_by(self.model.status_code)
            .order_by(self.model.status_code)
        )

        result = self.db.execute(query).all()
        return [{"status_code": row[0], "count": row[1]} for row in result]

    async def get_logs_by_status_range(
        self, status_min: int, status_max: int, since: datetime, limit: int = 100
    ) -> List[Log]:
        """Get logs within a status code range, newest first."""
        query = (
            select(self.model)
            .where(self.model.status_code.between(status_min, status_max))
            .where(self.model.timestamp >= since)
            .order_by(desc(self.model.timestamp))
            .limit(limit)
        )

        return list(self.db.execute(query).scalars().all())
