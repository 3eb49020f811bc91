"""
Company and prospecting profile repositories.
"""
import uuid
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.models.company import Company, ProspectingProfile
from leadfunnel.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    """Repository for Company operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Company, session)

    async def lock(self, company_id: uuid.UUID) -> Optional[Company]:
        """
        Load the company holding a row lock until the transaction ends.
        Serializes quota-consuming writes per company on PostgreSQL.
        """
        query = (
            select(Company)
            .where(Company.id == company_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(query)
        return result.first()


class ProspectingProfileRepository(BaseRepository[ProspectingProfile]):
    """Repository for ProspectingProfile operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(ProspectingProfile, session)

    async def get_for_company(self, company_id: uuid.UUID) -> Optional[ProspectingProfile]:
        return await self.get_by_field("company_id", company_id)
