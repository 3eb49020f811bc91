"""
Leads API routes.
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.database import get_session
from leadfunnel.core.pagination import PaginatedResponse
from leadfunnel.models.lead import LeadStatus
from leadfunnel.services.activation_service import ActivationService
from leadfunnel.services.lead_service import LeadService
from leadfunnel.services.prospecting_service import ProspectingService
from leadfunnel.schemas.lead import (
    LeadResponse, ActivationRequest, ActivationResult, DispatchResult,
)
from leadfunnel.api.deps import get_current_user, CurrentUser

router = APIRouter(prefix="/api/leads", tags=["leads"])


@router.get("/", response_model=PaginatedResponse[LeadResponse])
async def list_leads(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[LeadStatus] = None,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List leads, best score first, with pagination."""
    lead_service = LeadService(session)
    return await lead_service.list(current_user.company_id, status, page, limit)


@router.post("/activate", response_model=ActivationResult)
async def activate_leads(
    request: ActivationRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """
    Claim available leads for direct outreach.
    All or nothing; counts against the company's daily capacity.
    """
    activation_service = ActivationService(session)
    return await activation_service.activate(
        current_user.company_id,
        request.lead_ids,
        current_user.user_id
    )


@router.post("/prospect", response_model=DispatchResult)
async def prospect_leads(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Send the next batch of prospectable leads to the contact automation."""
    prospecting_service = ProspectingService(session)
    return await prospecting_service.dispatch(current_user.company_id, current_user.user_id)


@router.get("/{lead_id}", response_model=LeadResponse)
async def get_lead(
    lead_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get a lead by ID."""
    lead_service = LeadService(session)
    return await lead_service.get(current_user.company_id, lead_id)
