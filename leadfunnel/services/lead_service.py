"""
Lead service - read access to a company's leads.
"""
import uuid
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.core.exceptions import NotFoundError
from leadfunnel.models.lead import Lead, LeadStatus
from leadfunnel.repositories.lead_repo import LeadRepository


class LeadService:
    """Service for lead operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.lead_repo = LeadRepository(session)

    async def get(self, company_id: uuid.UUID, lead_id: uuid.UUID) -> Lead:
        """Get a lead by ID."""
        lead = await self.lead_repo.get_for_company(company_id, lead_id)
        if not lead:
            raise NotFoundError("Lead", str(lead_id))
        return lead

    async def list(
        self,
        company_id: uuid.UUID,
        status: Optional[LeadStatus] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        """List leads with an optional status filter and pagination."""
        return await self.lead_repo.search(company_id, status, page, limit)
