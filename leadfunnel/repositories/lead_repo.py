"""
Lead repository with pipeline counts and activation locking.
"""
import uuid
from typing import Optional, List, Dict
from datetime import datetime

from sqlmodel import select, col
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func, update

from leadfunnel.core.pagination import create_paginated_response
from leadfunnel.models.lead import Lead, LeadStatus, CONVERSATION_STAGES
from leadfunnel.repositories.base import BaseRepository


class LeadRepository(BaseRepository[Lead]):
    """Repository for Lead operations. Every query is scoped to a company."""

    def __init__(self, session: AsyncSession):
        super().__init__(Lead, session)

    async def get_for_company(self, company_id: uuid.UUID, lead_id: uuid.UUID) -> Optional[Lead]:
        """Get a lead only if it belongs to the company."""
        lead = await self.get(lead_id)
        if not lead or lead.company_id != company_id:
            return None
        return lead

    async def count_by_status(self, company_id: uuid.UUID) -> Dict[str, int]:
        """Count leads per status in one grouped query."""
        query = select(Lead.status, func.count()).where(
            Lead.company_id == company_id
        ).group_by(Lead.status)

        result = await self.session.exec(query)
        counts = {status.value: 0 for status in LeadStatus}
        for status, count in result.all():
            counts[status] = count
        return counts

    async def count_scored(self, company_id: uuid.UUID) -> int:
        """Count leads with any score, whatever their status."""
        query = select(func.count()).select_from(Lead).where(
            Lead.company_id == company_id,
            col(Lead.score).is_not(None)
        )
        result = await self.session.exec(query)
        return result.one()

    async def count_activated_since(self, company_id: uuid.UUID, since: datetime) -> int:
        query = select(func.count()).select_from(Lead).where(
            Lead.company_id == company_id,
            Lead.status == LeadStatus.ACTIVATED.value,
            col(Lead.activated_at) >= since
        )
        result = await self.session.exec(query)
        return result.one()

    async def sample_scores(self, company_id: uuid.UUID, limit: int = 100) -> List[int]:
        """Scores of the most recently created scored leads."""
        query = select(Lead.score).where(
            Lead.company_id == company_id,
            col(Lead.score).is_not(None)
        ).order_by(col(Lead.created_at).desc()).limit(limit)
        result = await self.session.exec(query)
        return list(result.all())

    async def list_conversations(self, company_id: uuid.UUID) -> List[Lead]:
        """Leads that completed the qualification conversation."""
        query = select(Lead).where(
            Lead.company_id == company_id,
            col(Lead.status).in_([s.value for s in CONVERSATION_STAGES])
        )
        result = await self.session.exec(query)
        return list(result.all())

    async def list_by_status(
        self,
        company_id: uuid.UUID,
        status: LeadStatus,
        limit: Optional[int] = None
    ) -> List[Lead]:
        """Oldest first, so prospecting works through the backlog in arrival order."""
        return list(await self.list(
            company_id,
            {"status": status.value},
            order_by="created_at",
            order_desc=False,
            limit=limit
        ))

    async def search(
        self,
        company_id: uuid.UUID,
        status: Optional[LeadStatus] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        """Paginated listing: best score first (unscored last), then newest."""
        query = self._scoped(
            select(Lead), company_id, {"status": status.value if status else None}
        )

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.session.exec(count_query)
        total = total_result.one()

        query = query.order_by(
            col(Lead.score).is_(None),
            col(Lead.score).desc(),
            col(Lead.created_at).desc()
        )
        offset = (page - 1) * limit
        query = query.offset(offset).limit(limit)

        result = await self.session.exec(query)
        items = result.all()

        return create_paginated_response(items, total, page, limit)

    async def lock_for_activation(self, company_id: uuid.UUID, lead_ids: List[uuid.UUID]) -> List[Lead]:
        """Load the company's requested leads with a row lock (no-op on SQLite)."""
        query = select(Lead).where(
            Lead.company_id == company_id,
            col(Lead.id).in_(lead_ids)
        ).with_for_update().execution_options(populate_existing=True)
        result = await self.session.exec(query)
        return list(result.all())

    async def activate_within_quota(
        self,
        company_id: uuid.UUID,
        lead_ids: List[uuid.UUID],
        since: datetime,
        capacity: int,
        operator_id: str,
        now: datetime
    ) -> int:
        """
        Activate the leads in one conditional UPDATE, without committing.

        The quota is re-counted inside the statement itself, so the write only
        lands while `activated since + len(lead_ids) <= capacity` still holds
        at the moment the row lock is taken. Returns the number of rows
        written; anything short of len(lead_ids) means nothing may be kept.
        """
        lead_table = Lead.__table__
        counted = lead_table.alias("counted")
        activated_since = (
            select(func.count())
            .select_from(counted)
            .where(
                counted.c.company_id == company_id,
                counted.c.status == LeadStatus.ACTIVATED.value,
                counted.c.activated_at >= since
            )
            .scalar_subquery()
        )
        statement = (
            update(lead_table)
            .where(
                lead_table.c.company_id == company_id,
                lead_table.c.id.in_(lead_ids),
                lead_table.c.status == LeadStatus.AVAILABLE.value,
                activated_since + len(lead_ids) <= capacity
            )
            .values(
                status=LeadStatus.ACTIVATED.value,
                activated_at=now,
                activated_by=operator_id,
                updated_at=now
            )
        )
        # Core statement on the session connection: same transaction, identity map untouched
        connection = await self.session.connection()
        result = await connection.execute(statement)
        return result.rowcount

    async def update_status(self, lead: Lead, status: LeadStatus) -> Lead:
        """Move a lead to another status and commit."""
        lead.status = status.value
        lead.updated_at = datetime.utcnow()
        self.session.add(lead)
        await self.session.commit()
        await self.session.refresh(lead)
        return lead
