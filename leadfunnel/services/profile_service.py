"""
Profile service - the company's ideal customer profile.
"""
import uuid

from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.core.exceptions import NotFoundError
from leadfunnel.models.activity import Actions
from leadfunnel.models.company import ProspectingProfile
from leadfunnel.repositories.activity_repo import ActivityLogRepository
from leadfunnel.repositories.company_repo import CompanyRepository, ProspectingProfileRepository
from leadfunnel.schemas.profile import ProfileUpdate


class ProfileService:
    """Service for prospecting profile operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.company_repo = CompanyRepository(session)
        self.profile_repo = ProspectingProfileRepository(session)
        self.activity_repo = ActivityLogRepository(session)

    async def get(self, company_id: uuid.UUID) -> ProspectingProfile:
        profile = await self.profile_repo.get_for_company(company_id)
        if not profile:
            raise NotFoundError("Prospecting profile")
        return profile

    async def upsert(
        self,
        company_id: uuid.UUID,
        actor_id: str,
        profile_data: ProfileUpdate
    ) -> ProspectingProfile:
        """Create the profile on first save, replace it afterwards."""
        if not await self.company_repo.get(company_id):
            raise NotFoundError("Company", str(company_id))

        data = profile_data.model_dump(mode="json")
        profile = await self.profile_repo.get_for_company(company_id)

        if profile:
            profile = await self.profile_repo.update(profile.id, data)
        else:
            data["company_id"] = company_id
            profile = await self.profile_repo.create(data)

        await self.activity_repo.log(
            company_id,
            Actions.PROFILE_UPDATED,
            "prospecting_profile",
            entity_id=profile.id,
            actor_id=actor_id,
            description=f"Prospecting profile saved for niche '{profile.niche}'",
            meta_data={"cities": profile.cities}
        )
        return profile
