"""Push message formatting - Pure functions.

This module turns push types and their context into notification copy and
deep-link data. All functions are pure with no side effects.

Copy guardrails: calm and friendly. Never "You must", "Required" or
"Incomplete". The title is always the trip name, which is more useful than
the app name when scanning a lock screen.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from src.core.trip import Trip


@dataclass(frozen=True)
class PushMessage:
    """Notification copy.

    Attributes:
        title: Notification title (trip name)
        body: Notification body
    """
    title: str
    body: str


def _format_date(date_str: str) -> str:
    """Format an ISO date as 'Feb 7'."""
    d = datetime.strptime(date_str[:10], "%Y-%m-%d")
    return f"{d.strftime('%b')} {d.day}"


def format_date_range(start_date: str, end_date: str) -> str:
    """Format a date range as 'Feb 7–Feb 9'.

    Pure function.
    """
    return f"{_format_date(start_date)}–{_format_date(end_date)}"


def _title(ctx: dict[str, Any], trip: Trip) -> str:
    return ctx.get("tripName") or trip.name


def _itinerary_generated(ctx: dict[str, Any], user_id: str, trip: Trip) -> str:
    if (ctx.get("version") or 1) == 1:
        return "The itinerary is ready! Take a look and share your thoughts."
    return "Itinerary updated based on feedback — see what changed."


def _dates_locked(ctx: dict[str, Any], user_id: str, trip: Trip) -> str:
    if trip.created_by == user_id:
        return f"You confirmed {ctx.get('dates')}. Nice work!"
    return f"Dates confirmed: {ctx.get('dates')}! Next up — share trip ideas."


def _leader_ready_to_propose(ctx: dict[str, Any], user_id: str, trip: Trip) -> str:
    dates = ctx.get("dates")
    lead = f"{dates} has" if dates else "There's a date with"
    return f"Over half your group has weighed in. {lead} the most support."


# Each entry: (context, user_id, trip) -> body
BodyBuilder = Callable[[dict[str, Any], str, Trip], str]

PUSH_COPY: dict[str, BodyBuilder] = {
    # P0
    "trip_created_notify": lambda ctx, user_id, trip: (
        f"{ctx.get('actorName')} started planning this trip — take a look when you're ready."
    ),
    "trip_canceled": lambda ctx, user_id, trip: f"{ctx.get('actorName')} canceled this trip.",
    "first_dates_suggested": lambda ctx, user_id, trip: (
        "Date ideas are rolling in. Add yours when you're ready!"
    ),
    "dates_proposed_by_leader": lambda ctx, user_id, trip: (
        f"{ctx.get('actorName')} suggested {ctx.get('dates')}. Let them know if it works!"
    ),
    "dates_locked": _dates_locked,
    "itinerary_generated": _itinerary_generated,
    "join_request_received": lambda ctx, user_id, trip: (
        f"{ctx.get('actorName')} wants to join — take a look when you're ready."
    ),
    "join_request_approved": lambda ctx, user_id, trip: (
        "You're in! Your request to join was approved."
    ),
    # P1
    "leader_ready_to_propose": _leader_ready_to_propose,
    "window_supported_author": lambda ctx, user_id, trip: (
        f"{ctx.get('actorName')} likes your dates — gaining traction!"
    ),
    "expense_added": lambda ctx, user_id, trip: (
        f"{ctx.get('actorName')} added an expense — check it out."
    ),
    "accommodation_selected": lambda ctx, user_id, trip: "Your stay is set! Check out the details.",
    "first_idea_contributed": lambda ctx, user_id, trip: (
        f"{ctx.get('actorName')} shared a trip idea — see what's on the list."
    ),
    "prep_reminder_7d": lambda ctx, user_id, trip: "One week away! Check the prep list.",
    "trip_started": lambda ctx, user_id, trip: "Starts today — have an amazing time!",
    "leader_transferred": lambda ctx, user_id, trip: (
        "You're now leading this trip. Check in when you're ready."
    ),
}

# Nudge pushes have their own copy; anything missing falls back to PUSH_COPY
NUDGE_PUSH_COPY: dict[str, str] = {
    "leader_can_lock_dates": "Your group has weighed in — confirm the dates when you're ready.",
    "leader_ready_to_propose": "Over half your group has weighed in. There's a date with strong support.",
}

# Which overlay a push opens on the trip page (None = trip page itself)
OVERLAY_MAP: dict[str, str | None] = {
    "trip_created_notify": None,
    "trip_canceled": None,
    "first_dates_suggested": "scheduling",
    "dates_proposed_by_leader": "scheduling",
    "dates_locked": "itinerary",
    "itinerary_generated": "itinerary",
    "join_request_received": "travelers",
    "join_request_approved": None,
    "leader_ready_to_propose": "scheduling",
    "leader_can_lock_dates": "scheduling",
    "window_supported_author": "scheduling",
    "expense_added": "expenses",
    "accommodation_selected": "accommodation",
    "first_idea_contributed": "itinerary",
    "prep_reminder_7d": "prep",
    "trip_started": None,
    "leader_transferred": None,
}


def _type_value(push_type: str) -> str:
    return push_type.value if isinstance(push_type, Enum) else push_type


def has_push_copy(push_type: str) -> bool:
    """Check if a push type has registered copy."""
    return _type_value(push_type) in PUSH_COPY


def format_push_message(
    push_type: str,
    context: dict[str, Any],
    user_id: str,
    trip: Trip,
) -> PushMessage | None:
    """Format the notification for one recipient.

    Pure function. Copy can be role-aware (the leader reads different text).

    Args:
        push_type: Push notification type
        context: Type-specific context (tripName, actorName, dates, version, ...)
        user_id: Recipient
        trip: Trip the push is about

    Returns:
        PushMessage, or None if the type has no registered copy
    """
    builder = PUSH_COPY.get(_type_value(push_type))
    if builder is None:
        return None

    return PushMessage(
        title=_title(context, trip),
        body=builder(context, user_id, trip),
    )


def _nudge_context(payload: dict[str, Any]) -> dict[str, Any]:
    """Map a nudge payload onto the context keys the push copy reads.

    Nudges carry dates as `dateRange: {start, end, label}`.
    """
    date_range = payload.get("dateRange")
    if payload.get("dates") or not isinstance(date_range, dict):
        return payload

    dates = date_range.get("label")
    if not dates and date_range.get("start") and date_range.get("end"):
        dates = format_date_range(date_range["start"], date_range["end"])
    if not dates:
        return payload

    return {**payload, "dates": dates}


def format_nudge_push(
    nudge_type: str,
    trip: Trip,
    user_id: str,
    context: dict[str, Any] | None = None,
) -> PushMessage | None:
    """Format the notification for a nudge push.

    Pure function.

    Returns:
        PushMessage, or None if neither copy registry knows the type
    """
    nudge_type = _type_value(nudge_type)
    context = _nudge_context(context or {})

    body = NUDGE_PUSH_COPY.get(nudge_type)
    if body is not None:
        return PushMessage(title=_title(context, trip), body=body)

    return format_push_message(nudge_type, context, user_id, trip)


def build_deep_link(push_type: str, trip_id: str) -> dict[str, str]:
    """Build the deep-link data attached to a notification.

    Pure function. The app opens the trip and, when present, the overlay.

    Returns:
        {"tripId": ..., "overlay": ...} with overlay omitted when not mapped
    """
    data = {"tripId": trip_id}
    overlay = OVERLAY_MAP.get(_type_value(push_type))
    if overlay:
        data["overlay"] = overlay
    return data
