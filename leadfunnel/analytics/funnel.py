"""
Funnel metrics - conversion rates and drop points from stage counts.
"""
from typing import List

from leadfunnel.config import FunnelThresholds
from leadfunnel.models.lead import LeadStatus
from leadfunnel.schemas.analytics import StageCounts, Conversions, DropPoint, FunnelMetrics


def rate(numerator: int, denominator: int) -> float:
    """Percentage, or 0 when there is nothing to divide by."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100


def calculate_conversions(counts: StageCounts) -> Conversions:
    return Conversions(
        prospectable_to_contact=rate(counts.in_contact, counts.prospectable + counts.in_contact),
        contact_to_qualified=rate(counts.qualified, counts.in_contact),
        qualified_to_available=rate(counts.available, counts.qualified),
        available_to_activated=rate(counts.activated, counts.available),
    )


def find_drop_points(
    counts: StageCounts,
    conversions: Conversions,
    thresholds: FunnelThresholds
) -> List[DropPoint]:
    """
    Flag transitions converting below their threshold.

    `count` is denominator minus numerator over the current snapshot, not a
    cohort flow, so later stages can report a negative count.
    """
    transitions = [
        (
            LeadStatus.PROSPECTABLE, LeadStatus.IN_CONTACT,
            conversions.prospectable_to_contact, thresholds.prospectable_to_contact,
            counts.prospectable + counts.in_contact, counts.in_contact,
        ),
        (
            LeadStatus.IN_CONTACT, LeadStatus.QUALIFIED,
            conversions.contact_to_qualified, thresholds.contact_to_qualified,
            counts.in_contact, counts.qualified,
        ),
        (
            LeadStatus.QUALIFIED, LeadStatus.AVAILABLE,
            conversions.qualified_to_available, thresholds.qualified_to_available,
            counts.qualified, counts.available,
        ),
        (
            LeadStatus.AVAILABLE, LeadStatus.ACTIVATED,
            conversions.available_to_activated, thresholds.available_to_activated,
            counts.available, counts.activated,
        ),
    ]

    drop_points = []
    for from_stage, to_stage, conversion, threshold, denominator, numerator in transitions:
        if denominator > 0 and conversion < threshold:
            drop_points.append(DropPoint(
                from_stage=from_stage,
                to_stage=to_stage,
                drop_rate=100 - conversion,
                count=denominator - numerator,
            ))
    return drop_points


def calculate_funnel_metrics(
    counts: StageCounts,
    thresholds: FunnelThresholds = FunnelThresholds()
) -> FunnelMetrics:
    """Build the funnel view for one company's stage counts."""
    conversions = calculate_conversions(counts)
    return FunnelMetrics(
        **counts.model_dump(),
        conversions=conversions,
        drop_points=find_drop_points(counts, conversions, thresholds),
    )
