"""
Lead status state machine.
"""
from typing import Dict, Set, Union

from leadfunnel.core.exceptions import ConflictError
from leadfunnel.models.lead import LeadStatus

ALLOWED_TRANSITIONS: Dict[LeadStatus, Set[LeadStatus]] = {
    LeadStatus.PROSPECTABLE: {LeadStatus.IN_CONTACT},
    # back to prospectable only when contact dispatch fails
    LeadStatus.IN_CONTACT: {
        LeadStatus.PROSPECTABLE,
        LeadStatus.QUALIFIED,
        LeadStatus.AVAILABLE,
        LeadStatus.DISCARDED,
    },
    LeadStatus.QUALIFIED: {LeadStatus.AVAILABLE, LeadStatus.DISCARDED},
    LeadStatus.AVAILABLE: {LeadStatus.ACTIVATED, LeadStatus.DISCARDED},
    LeadStatus.ACTIVATED: set(),
    LeadStatus.DISCARDED: set(),
}

TERMINAL_STATES = {
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
}

StatusLike = Union[LeadStatus, str]


def can_transition(current: StatusLike, target: StatusLike) -> bool:
    """True when `current -> target` is a pipeline move or a same-state update of a live lead."""
    current, target = LeadStatus(current), LeadStatus(target)
    if current == target:
        return current not in TERMINAL_STATES
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: StatusLike, target: StatusLike) -> None:
    if not can_transition(current, target):
        raise ConflictError(
            f"Cannot move lead from '{LeadStatus(current).value}' to '{LeadStatus(target).value}'"
        )
