"""
Conversation analysis over leads that finished the qualification chat.
"""
import math
from collections import Counter
from typing import Iterable, List, Optional

from leadfunnel.models.lead import Lead, LeadStatus, Classification
from leadfunnel.schemas.analytics import ConversationAnalysis, InterestBreakdown, DiscardReason

TOP_REASONS_LIMIT = 5


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def average_score(scores: Iterable[Optional[int]]) -> float:
    present = [s for s in scores if s is not None]
    if not present:
        return 0.0
    return sum(present) / len(present)


def count_interest(leads: List[Lead]) -> InterestBreakdown:
    breakdown = InterestBreakdown()
    for lead in leads:
        if lead.classification == Classification.HOT:
            breakdown.hot += 1
        elif lead.classification == Classification.WARM:
            breakdown.warm += 1
        elif lead.classification == Classification.COLD:
            breakdown.cold += 1
        elif not lead.classification:
            breakdown.unclassified += 1
    return breakdown


def rank_discard_reasons(
    leads: List[Lead],
    total_conversations: int,
    limit: int = TOP_REASONS_LIMIT
) -> List[DiscardReason]:
    """Most frequent discard reasons; percentages are over all conversations."""
    reasons = Counter(
        lead.discard_reason
        for lead in leads
        if lead.status == LeadStatus.DISCARDED and lead.discard_reason
    )
    # Counter keeps first-seen order, sorted() is stable: ties stay in that order
    ranked = sorted(reasons.items(), key=lambda item: item[1], reverse=True)

    return [
        DiscardReason(
            reason=reason,
            count=count,
            percentage=count / total_conversations * 100 if total_conversations > 0 else 0,
        )
        for reason, count in ranked[:limit]
    ]


def analyze_conversations(leads: Iterable[Lead]) -> ConversationAnalysis:
    """
    Summarize classification, score and discard reasons.

    Expects only leads in qualified, available, activated or discarded.
    """
    leads = list(leads)
    total = len(leads)

    return ConversationAnalysis(
        total_conversations=total,
        by_interest=count_interest(leads),
        avg_score=round_half_up(average_score(lead.score for lead in leads)),
        top_reasons=rank_discard_reasons(leads, total),
    )
