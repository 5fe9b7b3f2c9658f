"""Pending action derivation - Pure functions.

Works out what a user still has to do on a trip given its state and the
user's own planning input. The result is sorted by priority so callers can
hand it straight to `get_trip_primary_href`.
"""

from dataclasses import dataclass, field
from typing import Any

from src.core.trip import PendingAction, Trip


SCHEDULING_STATUSES = frozenset({"proposed", "scheduling"})


@dataclass(frozen=True)
class PlanningState:
    """Scheduling input collected for a trip.

    Attributes:
        user_date_picks: The viewing user's date picks (top3_heatmap mode)
        user_vote: The viewing user's vote, if any
        availabilities: Availability rows for all users (legacy mode)
        votes: All date votes
        date_windows: Suggested date windows (date_windows mode)
        window_supports: Supports on date windows
    """
    user_date_picks: tuple[dict[str, Any], ...] = field(default_factory=tuple)
    user_vote: dict[str, Any] | None = None
    availabilities: tuple[dict[str, Any], ...] = field(default_factory=tuple)
    votes: tuple[dict[str, Any], ...] = field(default_factory=tuple)
    date_windows: tuple[dict[str, Any], ...] = field(default_factory=tuple)
    window_supports: tuple[dict[str, Any], ...] = field(default_factory=tuple)


def _action(trip: Trip, action_type: str, priority: int, label: str, timestamp: str | None) -> PendingAction:
    return PendingAction(
        action_type=action_type,
        priority=priority,
        label=label,
        href=f"/trips/{trip.id}",
        timestamp=timestamp,
    )


def _scheduling_action(trip: Trip, user_id: str, planning: PlanningState) -> PendingAction | None:
    """Scheduling prompt for a traveler who has not weighed in yet."""
    if trip.scheduling_mode == "date_windows":
        suggested = any(w.get("suggestedBy") == user_id for w in planning.date_windows)
        supported = any(s.get("userId") == user_id for s in planning.window_supports)
        if suggested or supported:
            return None
        label = "Add your dates"
    elif trip.scheduling_mode == "top3_heatmap":
        if planning.user_date_picks:
            return None
        label = "Share your dates"
    else:
        if any(a.get("userId") == user_id for a in planning.availabilities):
            return None
        label = "Mark availability"

    return _action(trip, "scheduling_required", 1, label, trip.last_activity)


def derive_pending_actions(
    trip: Trip,
    user_id: str,
    planning: PlanningState,
    is_participant: bool,
    is_current_user_traveler: bool = True,
) -> list[PendingAction]:
    """Derive pending actions for a user on a trip.

    Pure function.

    Args:
        trip: Trip being viewed
        user_id: Viewing user
        planning: Scheduling input collected so far
        is_participant: Whether the user is a participant (hosted trips)
        is_current_user_traveler: Whether the user is an active traveler

    Returns:
        Pending actions sorted by priority (1 first)
    """
    actions: list[PendingAction] = []
    is_leader = trip.created_by == user_id

    if trip.is_collaborative:
        if is_current_user_traveler and trip.status in SCHEDULING_STATUSES:
            action = _scheduling_action(trip, user_id, planning)
            if action is not None:
                actions.append(action)

        if is_current_user_traveler and trip.status == "voting" and not planning.user_vote:
            actions.append(_action(trip, "date_vote", 2, "Vote on dates", trip.last_activity))

        # Leader is always a traveler
        if is_leader and trip.status == "voting" and planning.votes:
            actions.append(_action(trip, "date_vote", 2, "Finalize dates", trip.last_activity))

    if trip.is_hosted:
        if not is_participant and trip.status != "locked":
            actions.append(_action(trip, "other_input", 2, "Join trip", trip.created_at))

        if is_leader:
            if trip.status == "locked" and trip.itinerary_status == "collecting_ideas":
                actions.append(
                    _action(trip, "itinerary_review", 3, "Generate itinerary", trip.last_activity)
                )
            elif trip.itinerary_status == "drafting":
                actions.append(
                    _action(trip, "itinerary_review", 3, "Review itinerary draft", trip.last_activity)
                )

    return sorted(actions, key=lambda a: a.priority)
