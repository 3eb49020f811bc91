"""
Ingestion service - leads and qualification outcomes pushed by the automation.
"""
import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.analytics.pipeline import ensure_transition
from leadfunnel.core.exceptions import NotFoundError, ValidationError
from leadfunnel.models.activity import Actions
from leadfunnel.models.lead import Lead, LeadStatus
from leadfunnel.repositories.activity_repo import ActivityLogRepository
from leadfunnel.repositories.company_repo import CompanyRepository
from leadfunnel.repositories.lead_repo import LeadRepository
from leadfunnel.schemas.lead import LeadIngest, QualificationResult

logger = logging.getLogger(__name__)

INTEGRATION_ACTOR = "automation"


class IngestionService:
    """Service for inbound lead data."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.company_repo = CompanyRepository(session)
        self.lead_repo = LeadRepository(session)
        self.activity_repo = ActivityLogRepository(session)

    async def ingest_lead(self, payload: LeadIngest) -> Lead:
        """Create a lead for an existing company."""
        if payload.status == LeadStatus.ACTIVATED:
            raise ValidationError("Leads cannot be created already activated", "status")

        company = await self.company_repo.get(payload.company_id)
        if not company:
            raise NotFoundError("Company", str(payload.company_id))

        data = payload.model_dump(mode="json")
        data["company_id"] = payload.company_id

        lead = await self.lead_repo.create(data)
        await self.activity_repo.log(
            company.id,
            Actions.LEAD_INGESTED,
            "lead",
            entity_id=lead.id,
            actor_id=INTEGRATION_ACTOR,
            description=f"Lead '{lead.company_name}' received",
            meta_data={"status": lead.status, "city": lead.city}
        )
        logger.info(f"Lead {lead.id} ingested for company {company.id} as {lead.status}")
        return lead

    async def apply_qualification(self, payload: QualificationResult) -> Lead:
        """Store the outcome of a qualification conversation on the lead."""
        lead = await self.lead_repo.get_for_company(payload.company_id, payload.lead_id)
        if not lead:
            raise NotFoundError("Lead", str(payload.lead_id))

        previous_status = lead.status
        ensure_transition(previous_status, payload.status)

        changes = payload.model_dump(
            mode="json", exclude_unset=True, exclude={"lead_id", "company_id"}
        )
        changes["status"] = payload.status.value

        lead = await self.lead_repo.update(lead.id, changes)
        await self.activity_repo.log(
            lead.company_id,
            Actions.LEAD_QUALIFIED,
            "lead",
            entity_id=lead.id,
            actor_id=INTEGRATION_ACTOR,
            description=f"Lead '{lead.company_name}' moved to {lead.status}",
            meta_data={"old_status": previous_status, "new_status": lead.status, "score": lead.score}
        )
        return lead
