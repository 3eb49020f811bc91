"""
Prospecting service - hands prospectable leads to the contact automation.
"""
import logging
import uuid
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.config import settings
from leadfunnel.core.exceptions import NotFoundError, UpstreamDeliveryError
from leadfunnel.models.activity import Actions
from leadfunnel.models.company import ProspectingProfile
from leadfunnel.models.lead import Lead, LeadStatus
from leadfunnel.repositories.activity_repo import ActivityLogRepository
from leadfunnel.repositories.company_repo import ProspectingProfileRepository
from leadfunnel.repositories.lead_repo import LeadRepository
from leadfunnel.schemas.lead import DispatchResult
from leadfunnel.services.integrations.base import ContactDispatcher
from leadfunnel.services.integrations.contact import get_contact_dispatcher

logger = logging.getLogger(__name__)


def build_contact_payload(lead: Lead, profile: ProspectingProfile) -> dict:
    """Payload for the contact automation; the profile goes through unchanged."""
    return {
        "lead_id": str(lead.id),
        "company_id": str(lead.company_id),
        "company_name": lead.company_name,
        "phone": lead.phone,
        "whatsapp": lead.whatsapp,
        "profile": {
            "niche": profile.niche,
            "client_type": profile.client_type,
            "min_ticket": profile.min_ticket,
            "requires_decision_maker": profile.requires_decision_maker,
            "min_urgency": profile.min_urgency,
        },
    }


class ProspectingService:
    """Service for starting contact with prospectable leads."""

    def __init__(self, session: AsyncSession, dispatcher: Optional[ContactDispatcher] = None):
        self.session = session
        self.dispatcher = dispatcher
        self.lead_repo = LeadRepository(session)
        self.profile_repo = ProspectingProfileRepository(session)
        self.activity_repo = ActivityLogRepository(session)

    async def dispatch(self, company_id: uuid.UUID, actor_id: Optional[str] = None) -> DispatchResult:
        """
        Move up to PROSPECTING_BATCH_SIZE prospectable leads to in_contact and
        send each to the automation. A lead whose delivery fails goes back to
        prospectable; the others are unaffected.
        """
        profile = await self.profile_repo.get_for_company(company_id)
        if not profile:
            raise NotFoundError("Prospecting profile")

        leads = await self.lead_repo.list_by_status(
            company_id, LeadStatus.PROSPECTABLE, limit=settings.PROSPECTING_BATCH_SIZE
        )
        if not leads:
            return DispatchResult(message="No prospectable leads at the moment")

        dispatcher = self.dispatcher or get_contact_dispatcher()
        result = DispatchResult()

        for lead in leads:
            await self.lead_repo.update_status(lead, LeadStatus.IN_CONTACT)

            try:
                await dispatcher.dispatch(build_contact_payload(lead, profile))
            except Exception as e:
                # any failure puts the lead back in the prospectable pool
                error = e.message if isinstance(e, UpstreamDeliveryError) else str(e)
                logger.error(f"Failed to dispatch lead {lead.id} to contact automation: {error}")
                await self.lead_repo.update_status(lead, LeadStatus.PROSPECTABLE)
                logger.warning(f"Lead {lead.id} reverted to prospectable")
                await self.activity_repo.log(
                    company_id,
                    Actions.LEAD_DISPATCH_FAILED,
                    "lead",
                    entity_id=lead.id,
                    actor_id=actor_id,
                    description=f"Contact with '{lead.company_name}' could not be started",
                    meta_data={"error": error}
                )
                result.failed.append(lead.id)
                continue

            await self.activity_repo.log(
                company_id,
                Actions.LEAD_DISPATCHED,
                "lead",
                entity_id=lead.id,
                actor_id=actor_id,
                description=f"Contact with '{lead.company_name}' started"
            )
            result.dispatched.append(lead.id)

        result.message = f"{len(result.dispatched)} lead(s) sent for prospecting"
        logger.info(
            f"Company {company_id}: dispatched {len(result.dispatched)}, failed {len(result.failed)}"
        )
        return result
