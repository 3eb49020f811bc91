"""
Activity service - activity feed.
"""
import uuid
from typing import Optional, List

from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.repositories.activity_repo import ActivityLogRepository
from leadfunnel.models.activity import ActivityLog


class ActivityService:
    """Service for activity logging."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.activity_repo = ActivityLogRepository(session)

    async def log(
        self,
        company_id: uuid.UUID,
        action: str,
        entity_type: str,
        entity_id: Optional[uuid.UUID] = None,
        actor_id: Optional[str] = None,
        description: Optional[str] = None,
        meta_data: Optional[dict] = None
    ) -> ActivityLog:
        """Log an activity."""
        return await self.activity_repo.log(
            company_id,
            action,
            entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            description=description,
            meta_data=meta_data
        )

    async def get_recent(self, company_id: uuid.UUID, limit: int = 10) -> List[ActivityLog]:
        """Get recent activity for the dashboard."""
        return await self.activity_repo.get_recent(company_id, limit)
