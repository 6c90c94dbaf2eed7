from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import List, Optional
from medprep.core.base_dao import BaseDAO
from medprep.resources.models import Resource, ResourceTier, ResourceDownload


class ResourceDAO(BaseDAO[Resource]):
    """DB functionality for interaction with `Resource` objects."""

    def __init__(self, db_session: Session):
        super().__init__(Resource, db_session)

    async def get_all(self, skip: int = 0, limit: Optional[int] = None, **filters) -> List[Resource]:
        """Get all resources ordered by name"""
        stmt = select(Resource).order_by(Resource.name).offset(skip)
        conditions = self._filter_conditions(filters)
        if conditions:
            stmt = stmt.where(*conditions)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_for_tier(self, tier: str) -> List[Resource]:
        """Get active resources whose allowed tiers include `tier`"""
        stmt = (
            select(Resource)
            .join(ResourceTier, ResourceTier.resource_id == Resource.id)
            .where(ResourceTier.tier == tier, Resource.is_active.is_(True))
            .order_by(Resource.name)
        )
        result = self.db.execute(stmt)
        return list(result.scalars().unique().all())


class ResourceDownloadDAO(BaseDAO[ResourceDownload]):
    """Append-only writes to the download log."""

    def __init__(self, db_session: Session):
        super().__init__(ResourceDownload, db_session)

    async def log_download(self, email: str, resource_id: str, source: Optional[str] = None) -> ResourceDownload:
        """Record a download; the session is rolled back if the write fails"""
        record = ResourceDownload(email=email, resource_id=resource_id, download_source=source)
        try:
            return await self.create(record)
        except Exception:
            self.db.rollback()
            raise
