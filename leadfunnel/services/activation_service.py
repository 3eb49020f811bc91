"""
Activation service - operators claim available leads within the daily quota.
"""
import logging
import uuid
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.core.clock import start_of_local_day, utcnow
from leadfunnel.core.exceptions import (
    ValidationError, NotFoundError, ConflictError, QuotaExceededError, describe_ids,
)
from leadfunnel.models.activity import Actions
from leadfunnel.models.lead import LeadStatus
from leadfunnel.repositories.activity_repo import ActivityLogRepository
from leadfunnel.repositories.company_repo import CompanyRepository
from leadfunnel.repositories.lead_repo import LeadRepository
from leadfunnel.schemas.lead import ActivationResult

logger = logging.getLogger(__name__)


class ActivationService:
    """Service for the available -> activated transition."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.company_repo = CompanyRepository(session)
        self.lead_repo = LeadRepository(session)
        self.activity_repo = ActivityLogRepository(session)

    async def _remaining(self, company_id: uuid.UUID, capacity: int, since) -> int:
        activated_today = await self.lead_repo.count_activated_since(company_id, since)
        return max(capacity - activated_today, 0)

    async def activate(
        self,
        company_id: uuid.UUID,
        lead_ids: List[uuid.UUID],
        operator_id: str
    ) -> ActivationResult:
        """
        Activate a batch of leads, all or nothing.

        Ownership, state and quota are checked up front for precise errors,
        then the status is written by one conditional UPDATE that re-checks
        state and quota itself. Concurrent batches for the same company
        therefore cannot overrun the daily capacity on any backend.
        """
        if not lead_ids:
            raise ValidationError("At least one lead id is required", "lead_ids")
        if len(set(lead_ids)) != len(lead_ids):
            raise ValidationError("Lead ids must not repeat", "lead_ids")

        try:
            company = await self.company_repo.lock(company_id)
            if not company:
                raise NotFoundError("Company", str(company_id))

            leads = await self.lead_repo.lock_for_activation(company_id, lead_ids)

            found = {lead.id for lead in leads}
            missing = [lead_id for lead_id in lead_ids if lead_id not in found]
            if missing:
                raise NotFoundError("Lead", describe_ids(missing))

            not_available = [lead.id for lead in leads if lead.status != LeadStatus.AVAILABLE]
            if not_available:
                raise ConflictError(
                    f"Leads not available for activation: {describe_ids(not_available)}"
                )

            since = start_of_local_day(company.timezone)
            remaining = await self._remaining(company_id, company.daily_capacity, since)
            if len(lead_ids) > remaining:
                raise QuotaExceededError(remaining)

            # The locks above are no-ops on some backends; the write re-checks
            # state and quota itself and must touch every requested row.
            now = utcnow()
            written = await self.lead_repo.activate_within_quota(
                company_id, lead_ids, since, company.daily_capacity, operator_id, now
            )
            if written != len(lead_ids):
                remaining = await self._remaining(company_id, company.daily_capacity, since)
                logger.warning(
                    f"Company {company_id}: activation lost a concurrent race "
                    f"({written}/{len(lead_ids)} rows, {remaining} remaining)"
                )
                if len(lead_ids) > remaining:
                    raise QuotaExceededError(remaining)
                raise ConflictError("Leads changed while being activated; reload and try again")

            self.activity_repo.add(
                company_id,
                Actions.LEADS_ACTIVATED,
                "lead",
                actor_id=operator_id,
                description=f"{len(leads)} lead(s) activated",
                meta_data={"lead_ids": [str(lead_id) for lead_id in lead_ids]}
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        # The UPDATE bypassed the identity map
        for lead in leads:
            await self.session.refresh(lead)

        logger.info(f"Company {company_id}: {len(lead_ids)} lead(s) activated by {operator_id}")

        return ActivationResult(
            activated=lead_ids,
            activated_at=now,
            remaining_today=remaining - len(lead_ids),
            message=f"{len(lead_ids)} lead(s) activated successfully",
        )
