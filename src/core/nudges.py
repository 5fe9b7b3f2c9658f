"""Nudge model and push eligibility - Pure functions.

Nudges are prompts the planning engine surfaces about trip progress. Only a
few of them are worth a push notification: the ones that unblock a trip for
its leader or mark a milestone for every traveler. Everything else stays
in-app so the group is not over-notified.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NudgeType(str, Enum):
    """Nudge types produced by the planning engine."""
    # Celebratory (all users)
    FIRST_AVAILABILITY_SUBMITTED = "first_availability_submitted"
    AVAILABILITY_HALF_SUBMITTED = "availability_half_submitted"
    STRONG_OVERLAP_DETECTED = "strong_overlap_detected"
    DATES_LOCKED = "dates_locked"
    # Leader actions
    LEADER_READY_TO_PROPOSE = "leader_ready_to_propose"
    LEADER_CAN_LOCK_DATES = "leader_can_lock_dates"
    # Traveler guidance
    TRAVELER_TOO_MANY_WINDOWS = "traveler_too_many_windows"
    # Confirmation
    LEADER_PROPOSING_LOW_COVERAGE = "leader_proposing_low_coverage"


class NudgeAudience(str, Enum):
    """Who a nudge is addressed to."""
    LEADER = "leader"
    TRAVELER = "traveler"
    ALL = "all"


# Closed allow-list. New nudge types are not pushed until added here.
PUSH_ELIGIBLE_TYPES = frozenset({
    NudgeType.LEADER_CAN_LOCK_DATES.value,     # unblocks the trip, leader only
    NudgeType.LEADER_READY_TO_PROPOSE.value,   # actionable for the leader
    NudgeType.DATES_LOCKED.value,              # milestone for all travelers
})


def is_push_eligible(nudge_type: str) -> bool:
    """Check if a nudge type warrants a push notification.

    Pure function. Unknown types return False.

    Args:
        nudge_type: Nudge type string

    Returns:
        True if the type is on the push allow-list
    """
    if isinstance(nudge_type, Enum):
        nudge_type = nudge_type.value
    return nudge_type in PUSH_ELIGIBLE_TYPES


@dataclass(frozen=True)
class Nudge:
    """A nudge computed for a trip.

    Attributes:
        type: Nudge type string (open enumeration)
        audience: 'leader', 'traveler' or 'all'
        dedupe_key: Key the nudge engine used to dedupe this nudge
        payload: Free-form payload (message, dates, coverage, ...)
    """
    type: str
    audience: str = NudgeAudience.ALL.value
    dedupe_key: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def push_eligible(self) -> bool:
        return is_push_eligible(self.type)


def parse_nudge(data: dict[str, Any]) -> Nudge:
    """Parse a nudge from its JSON form.

    Pure function.

    Raises:
        KeyError: If the nudge has no type
    """
    return Nudge(
        type=str(data["type"]),
        audience=data.get("audience") or NudgeAudience.ALL.value,
        dedupe_key=data.get("dedupeKey"),
        payload=dict(data.get("payload") or {}),
    )
