"""
Analytics service - loads pipeline data and runs the funnel, conversation
and insight engines for one company.
"""
import uuid
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.analytics.conversations import analyze_conversations
from leadfunnel.analytics.funnel import calculate_funnel_metrics, rate
from leadfunnel.analytics.insights import generate_insights
from leadfunnel.config import AnalyticsPolicy, settings
from leadfunnel.core.clock import start_of_local_day
from leadfunnel.core.exceptions import NotFoundError
from leadfunnel.repositories.company_repo import CompanyRepository
from leadfunnel.repositories.lead_repo import LeadRepository
from leadfunnel.schemas.analytics import (
    StageCounts, FunnelMetrics, ConversationAnalysis, Insight, InsightInputs,
    DashboardSummary, ReportSummary,
)


class AnalyticsService:
    """Service for dashboard analytics."""

    def __init__(self, session: AsyncSession, policy: AnalyticsPolicy = None):
        self.session = session
        self.policy = policy or settings.ANALYTICS
        self.lead_repo = LeadRepository(session)
        self.company_repo = CompanyRepository(session)

    async def stage_counts(self, company_id: uuid.UUID) -> StageCounts:
        return StageCounts.from_mapping(await self.lead_repo.count_by_status(company_id))

    async def activated_today(self, company_id: uuid.UUID) -> int:
        """Activations since local midnight in the company's timezone."""
        company = await self.company_repo.get(company_id)
        if not company:
            raise NotFoundError("Company", str(company_id))
        since = start_of_local_day(company.timezone)
        return await self.lead_repo.count_activated_since(company_id, since)

    async def funnel(self, company_id: uuid.UUID) -> FunnelMetrics:
        counts = await self.stage_counts(company_id)
        return calculate_funnel_metrics(counts, self.policy.funnel)

    async def conversations(self, company_id: uuid.UUID) -> ConversationAnalysis:
        leads = await self.lead_repo.list_conversations(company_id)
        return analyze_conversations(leads)

    async def insight_inputs(self, company_id: uuid.UUID) -> InsightInputs:
        counts = await self.stage_counts(company_id)
        limits = self.policy.insights

        scored_count = await self.lead_repo.count_scored(company_id)
        score_sample = []
        # Only pay for the sample when a score rule can fire
        if scored_count > limits.score_min_scored:
            score_sample = await self.lead_repo.sample_scores(company_id, limits.score_sample_size)

        return InsightInputs(
            prospectable=counts.prospectable,
            in_contact=counts.in_contact,
            qualified=counts.qualified,
            available=counts.available,
            activated_today=await self.activated_today(company_id),
            total_activated=counts.activated,
            discarded=counts.discarded,
            scored_count=scored_count,
            score_sample=score_sample,
        )

    async def insights(self, company_id: uuid.UUID) -> List[Insight]:
        inputs = await self.insight_inputs(company_id)
        return generate_insights(inputs, self.policy.insights)

    async def summary(self, company_id: uuid.UUID) -> DashboardSummary:
        counts = await self.stage_counts(company_id)
        return DashboardSummary(
            prospecting=counts.prospectable,
            in_qualification=counts.in_contact + counts.qualified,
            available=counts.available,
            activated_today=await self.activated_today(company_id),
        )

    async def report(self, company_id: uuid.UUID) -> ReportSummary:
        counts = await self.stage_counts(company_id)
        qualified_total = counts.qualified + counts.available + counts.activated

        return ReportSummary(
            total_leads=counts.total,
            activated=counts.activated,
            discarded=counts.discarded,
            in_process=counts.prospectable + counts.in_contact + counts.qualified,
            qualified_total=qualified_total,
            ai_efficiency=rate(qualified_total, qualified_total + counts.discarded),
            activation_rate=rate(counts.activated, qualified_total),
            conversations=await self.conversations(company_id),
        )
