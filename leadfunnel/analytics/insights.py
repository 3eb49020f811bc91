"""
Dashboard insight rules.

Each rule is an independent (predicate, builder) pair over the same inputs.
Rules run in the order listed; the first `max_insights` that fire are kept.
"""
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional

from leadfunnel.analytics.conversations import round_half_up
from leadfunnel.analytics.funnel import rate
from leadfunnel.config import InsightThresholds
from leadfunnel.schemas.analytics import Insight, InsightInputs, InsightType


@dataclass(frozen=True)
class InsightContext:
    inputs: InsightInputs
    limits: InsightThresholds

    @property
    def in_qualification(self) -> int:
        return self.inputs.in_contact + self.inputs.qualified

    @property
    def processed(self) -> int:
        return self.inputs.total_activated + self.inputs.discarded

    @property
    def efficiency(self) -> float:
        return rate(self.inputs.total_activated, self.processed)

    @property
    def discard_rate(self) -> float:
        return rate(self.inputs.discarded, self.processed)

    @property
    def qualification_rate(self) -> float:
        return rate(self.inputs.qualified, self.inputs.in_contact)

    @property
    def activation_rate_today(self) -> int:
        """Whole percent, as shown on the dashboard."""
        return round_half_up(rate(
            self.inputs.activated_today,
            self.inputs.available + self.inputs.activated_today
        ))

    @property
    def sampled_average_score(self) -> Optional[float]:
        sample = self.inputs.score_sample[:self.limits.score_sample_size]
        if not sample:
            return None
        return sum(sample) / len(sample)


class InsightRule(NamedTuple):
    name: str
    applies: Callable[[InsightContext], bool]
    build: Callable[[InsightContext], Insight]


# ===== AI EFFICIENCY =====

def _high_efficiency(ctx: InsightContext) -> bool:
    return ctx.processed > 0 and ctx.efficiency >= ctx.limits.high_efficiency_pct


def _low_efficiency(ctx: InsightContext) -> bool:
    return (
        ctx.processed > ctx.limits.min_processed_for_warning
        and ctx.efficiency < ctx.limits.low_efficiency_pct
    )


# ===== BOTTLENECKS =====

def _contact_bottleneck(ctx: InsightContext) -> bool:
    return (
        ctx.inputs.prospectable > ctx.limits.bottleneck_min_prospectable
        and ctx.inputs.in_contact < ctx.limits.bottleneck_max_in_contact
    )


def _low_qualification(ctx: InsightContext) -> bool:
    return (
        ctx.inputs.in_contact > ctx.limits.low_qualification_min_in_contact
        and ctx.inputs.qualified < ctx.inputs.in_contact * ctx.limits.low_qualification_ratio
    )


def _activation_opportunity(ctx: InsightContext) -> bool:
    return (
        ctx.inputs.available > ctx.limits.activation_opportunity_min_available
        and ctx.inputs.activated_today == 0
    )


# ===== PATTERNS =====

def _high_automation_low_conversion(ctx: InsightContext) -> bool:
    return (
        ctx.inputs.prospectable > ctx.limits.automation_min_prospectable
        and ctx.in_qualification > ctx.limits.automation_min_in_qualification
        and ctx.inputs.total_activated < ctx.limits.automation_max_activated
    )


def _good_scalability(ctx: InsightContext) -> bool:
    return (
        ctx.inputs.prospectable > ctx.limits.scalability_min_prospectable
        and ctx.in_qualification > ctx.limits.scalability_min_in_qualification
    )


# ===== CONTEXTUAL =====

def _ready_for_activation(ctx: InsightContext) -> bool:
    return ctx.inputs.available > 0


def _low_activation_rate_today(ctx: InsightContext) -> bool:
    return (
        ctx.inputs.activated_today > 0
        and ctx.inputs.available > 0
        and ctx.activation_rate_today < ctx.limits.activation_rate_ceiling_pct
    )


def _high_average_score(ctx: InsightContext) -> bool:
    average = ctx.sampled_average_score
    return (
        ctx.inputs.scored_count > ctx.limits.score_min_scored
        and average is not None
        and average >= ctx.limits.high_score
    )


def _low_average_score(ctx: InsightContext) -> bool:
    average = ctx.sampled_average_score
    return (
        ctx.inputs.scored_count > ctx.limits.score_min_scored
        and ctx.inputs.scored_count > ctx.limits.low_score_min_scored
        and average is not None
        and average < ctx.limits.low_score
    )


# ===== CRITICAL =====

def _idle_pipeline(ctx: InsightContext) -> bool:
    return (
        ctx.inputs.available == 0
        and ctx.in_qualification == 0
        and ctx.inputs.prospectable == 0
        and ctx.inputs.total_activated == 0
    )


def _elevated_discard_rate(ctx: InsightContext) -> bool:
    return (
        ctx.inputs.discarded > 0
        and ctx.processed > ctx.limits.discard_min_processed
        and ctx.discard_rate > ctx.limits.discard_rate_pct
    )


RULES: List[InsightRule] = [
    InsightRule(
        "high_efficiency",
        _high_efficiency,
        lambda ctx: Insight(
            type=InsightType.SUCCESS,
            title="High AI efficiency",
            message=f"{ctx.efficiency:.0f}% of processed leads were qualified. The automation is working well.",
        ),
    ),
    InsightRule(
        "low_efficiency",
        _low_efficiency,
        lambda ctx: Insight(
            type=InsightType.WARNING,
            title="AI efficiency below expectations",
            message=f"{ctx.efficiency:.0f}% qualification. Consider adjusting the prospecting criteria.",
            action="View funnel",
            action_url="/funnel",
        ),
    ),
    InsightRule(
        "contact_bottleneck",
        _contact_bottleneck,
        lambda ctx: Insight(
            type=InsightType.WARNING,
            title="Bottleneck at the contact stage",
            message=(
                f"{ctx.inputs.prospectable} leads waiting, but only {ctx.inputs.in_contact} in contact. "
                "The AI may be overloaded or converting poorly on first contact."
            ),
            action="View funnel",
            action_url="/funnel",
        ),
    ),
    InsightRule(
        "low_qualification",
        _low_qualification,
        lambda ctx: Insight(
            type=InsightType.WARNING,
            title="Low qualification conversion",
            message=(
                f"{ctx.qualification_rate:.0f}% of leads in contact are being qualified. "
                "The conversation flow may need adjusting."
            ),
            action="View reports",
            action_url="/reports",
        ),
    ),
    InsightRule(
        "activation_opportunity",
        _activation_opportunity,
        lambda ctx: Insight(
            type=InsightType.INFO,
            title="Activation opportunity",
            message=(
                f"{ctx.inputs.available} qualified leads waiting. "
                "Activate them to speed up the sales process."
            ),
            action="View leads",
            action_url="/leads",
        ),
    ),
    InsightRule(
        "high_automation_low_conversion",
        _high_automation_low_conversion,
        lambda ctx: Insight(
            type=InsightType.WARNING,
            title="High automation, low conversion",
            message=(
                "Many leads are being processed but few are activated. "
                "There may be a sales bottleneck or qualification needs tightening."
            ),
            action="View reports",
            action_url="/reports",
        ),
    ),
    InsightRule(
        "good_scalability",
        _good_scalability,
        lambda ctx: Insight(
            type=InsightType.SUCCESS,
            title="Good operational scalability",
            message=(
                f"{ctx.inputs.prospectable + ctx.in_qualification} leads in simultaneous processing. "
                "The AI is operating at scale."
            ),
        ),
    ),
    InsightRule(
        "ready_for_activation",
        _ready_for_activation,
        lambda ctx: Insight(
            type=InsightType.SUCCESS,
            title=f"{ctx.inputs.available} lead(s) ready for activation",
            message="Qualified leads are waiting for your contact.",
            action="Activate now",
            action_url="/leads",
        ),
    ),
    InsightRule(
        "low_activation_rate_today",
        _low_activation_rate_today,
        lambda ctx: Insight(
            type=InsightType.INFO,
            title=f"Today's activation rate: {ctx.activation_rate_today}%",
            message="There are still leads available for activation.",
        ),
    ),
    InsightRule(
        "high_average_score",
        _high_average_score,
        lambda ctx: Insight(
            type=InsightType.SUCCESS,
            title="High average score",
            message=(
                f"An average score of {ctx.sampled_average_score:.0f} indicates "
                "good quality among qualified leads."
            ),
        ),
    ),
    InsightRule(
        "low_average_score",
        _low_average_score,
        lambda ctx: Insight(
            type=InsightType.WARNING,
            title="Low average score",
            message=(
                f"An average score of {ctx.sampled_average_score:.0f} suggests "
                "qualification needs improving."
            ),
            action="View reports",
            action_url="/reports",
        ),
    ),
    InsightRule(
        "idle_pipeline",
        _idle_pipeline,
        lambda ctx: Insight(
            type=InsightType.ALERT,
            title="No leads in process",
            message="The system has no activity. Check the prospecting integration.",
        ),
    ),
    InsightRule(
        "elevated_discard_rate",
        _elevated_discard_rate,
        lambda ctx: Insight(
            type=InsightType.WARNING,
            title="Elevated discard rate",
            message=(
                f"{ctx.discard_rate:.0f}% of leads were discarded. "
                "Review the qualification criteria."
            ),
            action="View settings",
            action_url="/settings",
        ),
    ),
]


def generate_insights(
    inputs: InsightInputs,
    limits: InsightThresholds = InsightThresholds(),
    rules: Optional[List[InsightRule]] = None
) -> List[Insight]:
    """Evaluate every rule in order and keep the first `max_insights` that fire."""
    ctx = InsightContext(inputs=inputs, limits=limits)
    insights = [
        rule.build(ctx)
        for rule in (rules if rules is not None else RULES)
        if rule.applies(ctx)
    ]
    return insights[:limits.max_insights]
