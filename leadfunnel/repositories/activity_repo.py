"""
Activity log repository.
"""
import uuid
from typing import Optional, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.models.activity import ActivityLog
from leadfunnel.repositories.base import BaseRepository


class ActivityLogRepository(BaseRepository[ActivityLog]):
    """Repository for ActivityLog operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(ActivityLog, session)

    def add(
        self,
        company_id: uuid.UUID,
        action: str,
        entity_type: str,
        entity_id: Optional[uuid.UUID] = None,
        actor_id: Optional[str] = None,
        description: Optional[str] = None,
        meta_data: Optional[dict] = None
    ) -> ActivityLog:
        """Stage an entry in the current transaction without committing."""
        activity = ActivityLog(
            company_id=company_id,
            actor_id=actor_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            description=description,
            meta_data=meta_data or {}
        )
        self.session.add(activity)
        return activity

    async def log(self, company_id: uuid.UUID, action: str, entity_type: str, **fields) -> ActivityLog:
        """Create an activity log entry."""
        activity = self.add(company_id, action, entity_type, **fields)
        await self.session.commit()
        await self.session.refresh(activity)
        return activity

    async def get_recent(self, company_id: uuid.UUID, limit: int = 10) -> List[ActivityLog]:
        """Get recent activity for a company."""
        query = select(ActivityLog).where(
            ActivityLog.company_id == company_id
        ).order_by(ActivityLog.created_at.desc()).limit(limit)
        result = await self.session.exec(query)
        return list(result.all())
