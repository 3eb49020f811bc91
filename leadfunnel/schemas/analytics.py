"""
Analytics schemas - funnel, conversation and insight results.
"""
from enum import Enum
from typing import Optional, List, Mapping

from pydantic import BaseModel

from leadfunnel.models.lead import LeadStatus


class StageCounts(BaseModel):
    """Lead count per pipeline stage for one company."""
    prospectable: int = 0
    in_contact: int = 0
    qualified: int = 0
    available: int = 0
    activated: int = 0
    discarded: int = 0

    @classmethod
    def from_mapping(cls, counts: Mapping[str, int]) -> "StageCounts":
        """Build from a {status: count} mapping; missing stages count as zero."""
        return cls(**{
            stage.value: int(counts.get(stage.value, 0))
            for stage in LeadStatus
        })

    @property
    def total(self) -> int:
        return (
            self.prospectable + self.in_contact + self.qualified
            + self.available + self.activated + self.discarded
        )


class Conversions(BaseModel):
    """Stage-to-stage conversion rates, in percent."""
    prospectable_to_contact: float = 0
    contact_to_qualified: float = 0
    qualified_to_available: float = 0
    available_to_activated: float = 0


class DropPoint(BaseModel):
    """A transition converting below its healthy threshold."""
    from_stage: LeadStatus
    to_stage: LeadStatus
    drop_rate: float
    count: int


class FunnelMetrics(BaseModel):
    prospectable: int
    in_contact: int
    qualified: int
    available: int
    activated: int
    discarded: int
    conversions: Conversions
    drop_points: List[DropPoint]


class InterestBreakdown(BaseModel):
    hot: int = 0
    warm: int = 0
    cold: int = 0
    unclassified: int = 0


class DiscardReason(BaseModel):
    reason: str
    count: int
    percentage: float


class ConversationAnalysis(BaseModel):
    total_conversations: int
    by_interest: InterestBreakdown
    avg_score: int
    top_reasons: List[DiscardReason]


class InsightType(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    INFO = "info"
    ALERT = "alert"


class Insight(BaseModel):
    """A human-readable dashboard reading with an optional call to action."""
    type: InsightType
    title: str
    message: str
    action: Optional[str] = None
    action_url: Optional[str] = None


class InsightInputs(BaseModel):
    """Everything the insight rules look at."""
    prospectable: int = 0
    in_contact: int = 0
    qualified: int = 0
    available: int = 0
    activated_today: int = 0
    total_activated: int = 0
    discarded: int = 0
    scored_count: int = 0
    score_sample: List[int] = []


class DashboardSummary(BaseModel):
    prospecting: int
    in_qualification: int
    available: int
    activated_today: int


class ReportSummary(BaseModel):
    total_leads: int
    activated: int
    discarded: int
    in_process: int
    qualified_total: int
    ai_efficiency: float
    activation_rate: float
    conversations: ConversationAnalysis
