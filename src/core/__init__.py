"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Active-membership query predicates
- Nudge push eligibility
- Trip navigation targets and pending actions
- Push audience, dedupe keys, daily cap and copy

All functions here are deterministic and have no I/O.
"""

from src.core.membership import (
    active_membership_query,
    is_active_membership,
    matches_query,
    split_query,
)
from src.core.nudges import Nudge, is_push_eligible, parse_nudge
from src.core.navigation import (
    NavigationTarget,
    get_trip_back_destination,
    get_trip_primary_href,
)
from src.core.trip import PendingAction, Trip, parse_trip
from src.core.pending_actions import PlanningState, derive_pending_actions
from src.core.rules import get_active_traveler_ids, is_p0_type, resolve_target_users
from src.core.formatter import PushMessage, build_deep_link, format_push_message
from src.core.dedup import build_dedupe_key

__all__ = [
    # Membership
    "active_membership_query",
    "is_active_membership",
    "matches_query",
    "split_query",
    # Nudges
    "Nudge",
    "is_push_eligible",
    "parse_nudge",
    # Navigation
    "NavigationTarget",
    "get_trip_back_destination",
    "get_trip_primary_href",
    # Trips
    "PendingAction",
    "Trip",
    "parse_trip",
    "PlanningState",
    "derive_pending_actions",
    # Push rules
    "get_active_traveler_ids",
    "is_p0_type",
    "resolve_target_users",
    # Formatter
    "PushMessage",
    "build_deep_link",
    "format_push_message",
    # Dedup
    "build_dedupe_key",
]
