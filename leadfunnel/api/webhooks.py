"""
Inbound webhooks for the lead automation.
"""
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.database import get_session
from leadfunnel.services.ingestion_service import IngestionService
from leadfunnel.schemas.common import MessageResponse
from leadfunnel.schemas.lead import LeadIngest, QualificationResult, IngestResponse

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


@router.post("/leads", response_model=IngestResponse)
async def ingest_lead(
    payload: LeadIngest,
    session: AsyncSession = Depends(get_session)
):
    """Receive a new lead from the automation."""
    lead = await IngestionService(session).ingest_lead(payload)
    return IngestResponse(lead_id=lead.id)


@router.get("/leads", response_model=MessageResponse)
async def webhook_status():
    """Lets the automation check that the webhook is reachable."""
    return MessageResponse(message="Lead webhook is active", timestamp=datetime.utcnow())


@router.post("/qualification", response_model=IngestResponse)
async def receive_qualification(
    payload: QualificationResult,
    session: AsyncSession = Depends(get_session)
):
    """Receive the outcome of a qualification conversation."""
    lead = await IngestionService(session).apply_qualification(payload)
    return IngestResponse(lead_id=lead.id)
