"""
Dashboard API routes.
"""
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.database import get_session
from leadfunnel.services.activity_service import ActivityService
from leadfunnel.services.analytics_service import AnalyticsService
from leadfunnel.schemas.analytics import (
    DashboardSummary, Insight, FunnelMetrics, ConversationAnalysis, ReportSummary,
)
from leadfunnel.schemas.common import ActivityResponse
from leadfunnel.api.deps import get_current_user, CurrentUser

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
async def get_summary(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Headline counters for the dashboard cards."""
    return await AnalyticsService(session).summary(current_user.company_id)


@router.get("/insights", response_model=List[Insight])
async def get_insights(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Prioritized recommendations (at most five)."""
    return await AnalyticsService(session).insights(current_user.company_id)


@router.get("/funnel", response_model=FunnelMetrics)
async def get_funnel(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    return await AnalyticsService(session).funnel(current_user.company_id)


@router.get("/conversations", response_model=ConversationAnalysis)
async def get_conversations(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    return await AnalyticsService(session).conversations(current_user.company_id)


@router.get("/report", response_model=ReportSummary)
async def get_report(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Totals, efficiency rates and conversation analysis for the reports page."""
    return await AnalyticsService(session).report(current_user.company_id)


@router.get("/activity")
async def get_activity(
    limit: int = Query(10, ge=1, le=50),
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get recent activity."""
    activity_service = ActivityService(session)
    activities = await activity_service.get_recent(current_user.company_id, limit)
    items = [ActivityResponse.model_validate(activity) for activity in activities]
    return {"items": items, "total": len(items)}
