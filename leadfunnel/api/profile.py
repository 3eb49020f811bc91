"""
Prospecting profile API routes.
"""
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.database import get_session
from leadfunnel.services.profile_service import ProfileService
from leadfunnel.schemas.profile import ProfileUpdate, ProfileResponse
from leadfunnel.api.deps import get_current_user, CurrentUser

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("/", response_model=ProfileResponse)
async def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get the company's prospecting profile."""
    return await ProfileService(session).get(current_user.company_id)


@router.put("/", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Create or replace the company's prospecting profile."""
    return await ProfileService(session).upsert(
        current_user.company_id,
        current_user.user_id,
        profile_data
    )
