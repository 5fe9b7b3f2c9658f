"""Push audience and priority rules - Pure functions.

This module decides who receives each kind of push notification and which
pushes bypass the daily cap. All functions are pure with no side effects;
the shell fetches memberships and participants and hands them in.
"""

from enum import Enum
from typing import Any

from src.core.membership import is_active_membership
from src.core.nudges import Nudge, NudgeAudience
from src.core.trip import Trip


class PushType(str, Enum):
    """Push notification types."""
    # P0
    TRIP_CREATED_NOTIFY = "trip_created_notify"
    TRIP_CANCELED = "trip_canceled"
    FIRST_DATES_SUGGESTED = "first_dates_suggested"
    DATES_PROPOSED_BY_LEADER = "dates_proposed_by_leader"
    DATES_LOCKED = "dates_locked"
    ITINERARY_GENERATED = "itinerary_generated"
    JOIN_REQUEST_RECEIVED = "join_request_received"
    JOIN_REQUEST_APPROVED = "join_request_approved"
    # P1
    LEADER_READY_TO_PROPOSE = "leader_ready_to_propose"
    WINDOW_SUPPORTED_AUTHOR = "window_supported_author"
    EXPENSE_ADDED = "expense_added"
    ACCOMMODATION_SELECTED = "accommodation_selected"
    FIRST_IDEA_CONTRIBUTED = "first_idea_contributed"
    PREP_REMINDER_7D = "prep_reminder_7d"
    TRIP_STARTED = "trip_started"
    LEADER_TRANSFERRED = "leader_transferred"


# Exempt from the daily cap
P0_TYPES = frozenset({
    PushType.TRIP_CREATED_NOTIFY.value,
    PushType.TRIP_CANCELED.value,
    PushType.FIRST_DATES_SUGGESTED.value,
    PushType.DATES_PROPOSED_BY_LEADER.value,
    PushType.DATES_LOCKED.value,
    PushType.ITINERARY_GENERATED.value,
    PushType.JOIN_REQUEST_RECEIVED.value,
    PushType.JOIN_REQUEST_APPROVED.value,
})

# All active travelers except the acting user
_EXCLUDE_ACTOR_TYPES = frozenset({
    PushType.TRIP_CREATED_NOTIFY.value,
    PushType.TRIP_CANCELED.value,
    PushType.FIRST_DATES_SUGGESTED.value,
    PushType.DATES_PROPOSED_BY_LEADER.value,
    PushType.EXPENSE_ADDED.value,
    PushType.FIRST_IDEA_CONTRIBUTED.value,
})

# Every active traveler, actor included
_ALL_TRAVELER_TYPES = frozenset({
    PushType.DATES_LOCKED.value,
    PushType.ACCOMMODATION_SELECTED.value,
    PushType.PREP_REMINDER_7D.value,
    PushType.TRIP_STARTED.value,
})

# Audience is drawn from the active traveler list
_TRAVELER_BASED_TYPES = (
    _EXCLUDE_ACTOR_TYPES
    | _ALL_TRAVELER_TYPES
    | {PushType.ITINERARY_GENERATED.value}
)

INACTIVE_PARTICIPANT_STATUSES = frozenset({"left", "removed"})


def needs_traveler_ids(push_type: str) -> bool:
    """Check if resolving a push type's audience needs the traveler list.

    Pure function.
    """
    if isinstance(push_type, Enum):
        push_type = push_type.value
    return push_type in _TRAVELER_BASED_TYPES


def is_p0_type(push_type: str) -> bool:
    """Check if a push type is P0 (exempt from the daily cap).

    Pure function.
    """
    if isinstance(push_type, Enum):
        push_type = push_type.value
    return push_type in P0_TYPES


def get_active_traveler_ids(
    trip: Trip,
    memberships: list[dict[str, Any]],
    participants: list[dict[str, Any]],
) -> list[str]:
    """Compute the active travelers of a trip.

    Pure function.

    - Hosted trips: only participants with status 'active'
    - Collaborative trips: active circle members, minus anyone whose
      participant record says they left or were removed

    Args:
        trip: The trip
        memberships: Membership documents of the trip's circle
        participants: Participant documents of the trip

    Returns:
        User IDs in membership order
    """
    if trip.is_hosted:
        return [
            p["userId"] for p in participants
            if p.get("status") == "active" and p.get("userId")
        ]

    status_by_user = {
        p.get("userId"): p.get("status") or "active"
        for p in participants
    }

    return [
        m["userId"] for m in memberships
        if m.get("userId")
        and is_active_membership(m)
        and status_by_user.get(m["userId"]) not in INACTIVE_PARTICIPANT_STATUSES
    ]


def resolve_target_users(
    push_type: str,
    trip: Trip,
    context: dict[str, Any],
    traveler_ids: list[str],
) -> list[str]:
    """Resolve which users should receive a push.

    Pure function.

    Args:
        push_type: Push notification type
        trip: The trip the push is about
        context: Type-specific context (actorUserId, requesterId, ...)
        traveler_ids: Active traveler IDs of the trip

    Returns:
        Target user IDs (empty for unknown types)
    """
    if isinstance(push_type, Enum):
        push_type = push_type.value

    actor = context.get("actorUserId")

    if push_type in _EXCLUDE_ACTOR_TYPES:
        return [u for u in traveler_ids if u != actor]

    if push_type in _ALL_TRAVELER_TYPES:
        return list(traveler_ids)

    if push_type == PushType.ITINERARY_GENERATED.value:
        # The leader triggered the generation
        return [u for u in traveler_ids if u != trip.created_by]

    if push_type == PushType.JOIN_REQUEST_RECEIVED.value:
        return [trip.created_by] if trip.created_by else []

    if push_type == PushType.JOIN_REQUEST_APPROVED.value:
        requester = context.get("requesterId")
        return [requester] if requester else []

    if push_type == PushType.LEADER_TRANSFERRED.value:
        new_leader = context.get("newLeaderId")
        return [new_leader] if new_leader else []

    if push_type == PushType.WINDOW_SUPPORTED_AUTHOR.value:
        author = context.get("authorUserId")
        if author and author != actor:
            return [author]
        return []

    if push_type == PushType.LEADER_READY_TO_PROPOSE.value:
        return [trip.created_by] if trip.created_by else []

    return []


def resolve_nudge_audience(
    nudge: Nudge,
    trip: Trip,
    traveler_ids: list[str],
) -> list[str]:
    """Resolve recipients of a nudge push.

    Pure function.
    """
    if nudge.audience == NudgeAudience.LEADER.value:
        return [trip.created_by] if trip.created_by else []

    if nudge.audience == NudgeAudience.TRAVELER.value:
        return [u for u in traveler_ids if u != trip.created_by]

    if nudge.audience == NudgeAudience.ALL.value:
        return list(traveler_ids)

    return []
