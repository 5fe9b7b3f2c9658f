"""Push deduplication keys - Pure functions.

A push is sent at most once per (user, dedupe key). The key encodes what makes
a push unique for its type: some are once per trip, some once per user, some
once per version or window.

Note: The actual atomic insert of push events is handled by the imperative
shell (Firestore client). This module only contains the pure logic.
"""

import hashlib
from enum import Enum
from typing import Any


def build_dedupe_key(
    push_type: str,
    trip_id: str,
    context: dict[str, Any],
    user_id: str,
) -> str:
    """Build the dedupe key for a push.

    Pure function.

    Args:
        push_type: Push notification type
        trip_id: Trip the push is about
        context: Type-specific context (windowId, version, requesterId, ...)
        user_id: Recipient

    Returns:
        Dedupe key string
    """
    if isinstance(push_type, Enum):
        push_type = push_type.value

    if push_type == "trip_created_notify":
        return f"trip_created:{trip_id}:{user_id}"
    if push_type == "trip_canceled":
        return f"trip_canceled:{trip_id}:{user_id}"
    if push_type == "first_dates_suggested":
        return f"first_dates:{trip_id}:{user_id}"
    if push_type == "dates_proposed_by_leader":
        return f"dates_proposed:{trip_id}:{context.get('windowId') or 'unknown'}"
    if push_type == "dates_locked":
        return f"dates_locked:{trip_id}"
    if push_type == "itinerary_generated":
        return f"itinerary_generated:{trip_id}:v{context.get('version') or 1}"
    if push_type == "join_request_received":
        return f"join_request:{trip_id}:{context.get('requesterId') or user_id}"
    if push_type == "join_request_approved":
        return f"join_approved:{trip_id}:{context.get('requesterId') or user_id}"
    if push_type == "leader_transferred":
        return f"leader_transferred:{trip_id}:{context.get('newLeaderId') or user_id}"
    if push_type == "window_supported_author":
        window_id = context.get("windowId") or "unknown"
        author = context.get("authorUserId") or user_id
        return f"window_supported:{window_id}:{author}"
    if push_type == "expense_added":
        return f"expense_added:{trip_id}:{context.get('expenseId') or user_id}"
    if push_type == "accommodation_selected":
        return f"accommodation_selected:{trip_id}"
    if push_type == "leader_ready_to_propose":
        return f"leader_ready:{trip_id}"
    if push_type == "first_idea_contributed":
        return f"first_idea:{trip_id}"
    if push_type == "prep_reminder_7d":
        return f"prep_7d:{trip_id}:{user_id}"
    if push_type == "trip_started":
        return f"trip_started:{trip_id}:{user_id}"

    return f"{push_type}:{trip_id}:{user_id}"


def push_event_id(user_id: str, dedupe_key: str) -> str:
    """Deterministic document ID for a (user, dedupe key) pair.

    Pure function. Hashing keeps IDs free of '/' and bounded in length.
    """
    raw = f"{user_id}|{dedupe_key}".encode("utf-8")
    return hashlib.sha256(raw).hexdigest()
