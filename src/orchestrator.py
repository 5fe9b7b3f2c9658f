"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates the push pipeline: it fetches travelers and tokens
through the shell, asks the pure core who should get what, and delivers.
Push failures never escape; they are logged and counted.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from src.core.config import Config
from src.core.dedup import build_dedupe_key
from src.core.formatter import (
    PushMessage,
    build_deep_link,
    format_nudge_push,
    format_push_message,
    has_push_copy,
)
from src.core.nudges import Nudge, is_push_eligible
from src.core.rate_limit import check_daily_cap, start_of_utc_day
from src.core.rules import (
    PushType,
    get_active_traveler_ids,
    needs_traveler_ids,
    resolve_nudge_audience,
    resolve_target_users,
)
from src.core.sweep import compute_sweep_window
from src.core.trip import Trip
from src.shell.fcm_client import FCMClient
from src.shell.firestore_client import FirestoreClient, FirestoreConfig


logger = logging.getLogger(__name__)


@dataclass
class PushStats:
    """Outcome counts of one push.

    Attributes:
        sent: Recipients who got the notification on at least one device
        suppressed: Recipients skipped by the daily cap or dedupe
        failed: Recipients whose delivery failed
    """
    sent: int = 0
    suppressed: int = 0
    failed: int = 0

    def add(self, other: "PushStats") -> None:
        self.sent += other.sent
        self.suppressed += other.suppressed
        self.failed += other.failed

    def to_dict(self) -> dict[str, int]:
        return {"sent": self.sent, "suppressed": self.suppressed, "failed": self.failed}


@dataclass
class SweepResult:
    """Result of a daily push sweep.

    Attributes:
        prep_reminder: Stats for prep reminders
        trip_started: Stats for trip-started pushes
        trips_scanned: Trips considered
        errors: Any errors that occurred
    """
    prep_reminder: PushStats = field(default_factory=PushStats)
    trip_started: PushStats = field(default_factory=PushStats)
    trips_scanned: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Returns True if no critical errors occurred."""
        return len(self.errors) == 0

    @property
    def summary(self) -> str:
        """Human-readable summary of the sweep."""
        return (
            f"Scanned {self.trips_scanned} trips, "
            f"{self.prep_reminder.sent} prep reminders sent, "
            f"{self.trip_started.sent} trip-started pushes sent, "
            f"{self.prep_reminder.suppressed + self.trip_started.suppressed} suppressed, "
            f"{self.prep_reminder.failed + self.trip_started.failed} failed"
        )


class PushOrchestrator:
    """Coordinates push notification delivery.

    This class wires together:
    - Firestore client (travelers, dedupe events, daily counts, tokens)
    - Core functions (audience, cap, dedupe keys, copy, deep links)
    - FCM client (delivery)
    """

    def __init__(
        self,
        config: Config,
        firestore_client: FirestoreClient | None = None,
        fcm_client: FCMClient | None = None,
    ) -> None:
        """Initialize orchestrator with configuration.

        Args:
            config: Application configuration
            firestore_client: Firestore client (created if not provided)
            fcm_client: FCM client (created if not provided)
        """
        self.config = config
        self.firestore_client = firestore_client or FirestoreClient(
            FirestoreConfig(
                project_id=config.firestore_project,
                database=config.firestore_database,
            )
        )
        self.fcm_client = fcm_client or FCMClient(
            project_id=config.fcm_project_id,
            timeout=config.fcm_timeout_seconds,
        )

    def _active_traveler_ids(self, trip: Trip) -> list[str]:
        """Fetch memberships and participants, then compute travelers."""
        participants = self.firestore_client.list_trip_participants(trip.id)
        memberships = []
        if not trip.is_hosted and trip.circle_id:
            memberships = self.firestore_client.list_circle_memberships(trip.circle_id)
        return get_active_traveler_ids(trip, memberships, participants)

    def _limit_recipients(self, user_ids: list[str]) -> list[str]:
        limit = self.config.push_limits.max_recipients_per_push
        if limit > 0 and len(user_ids) > limit:
            logger.warning("Truncating push audience from %d to %d", len(user_ids), limit)
            return user_ids[:limit]
        return user_ids

    def _deliver(self, user_id: str, message: PushMessage, data: dict[str, Any]) -> bool:
        """Send a notification to every device of a user.

        Returns:
            True if at least one device accepted it, or the user has no devices
        """
        tokens = self.firestore_client.get_push_tokens([user_id])
        if not tokens:
            logger.debug("No push tokens for user %s", user_id)
            return True

        delivered = False
        for token in tokens:
            response = self.fcm_client.send(token.token, message, data)
            if response.success:
                delivered = True
            elif response.unregistered:
                self.firestore_client.delete_push_token(token.id)
            else:
                logger.warning("Push to %s failed: %s", user_id, response.error)

        return delivered

    def _is_capped(self, push_type: str, user_id: str, now: datetime) -> bool:
        sent_today = 0
        if self.config.push_limits.max_pushes_per_day > 0:
            sent_today = self.firestore_client.count_pushes_since(user_id, start_of_utc_day(now))
        result = check_daily_cap(push_type, sent_today, self.config.push_limits)
        if not result.allowed:
            logger.info("Push %s to %s suppressed: %s", push_type, user_id, result.reason)
        return not result.allowed

    def route(
        self,
        push_type: str,
        trip: Trip,
        context: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> PushStats:
        """Route a push notification through the pipeline.

        Steps: copy lookup, audience, per-user daily cap, atomic dedupe,
        deep link, per-user copy and delivery. The cap is checked before the
        dedupe record so a capped push is not lost forever.

        Args:
            push_type: Push notification type
            trip: Trip the push is about
            context: Type-specific context (actorUserId, actorName, dates, ...)
            now: Current time (defaults to now, UTC)

        Returns:
            PushStats with sent/suppressed/failed counts
        """
        stats = PushStats()
        context = context or {}
        now = now or datetime.now(timezone.utc)

        if not self.config.push_enabled:
            logger.info("Push disabled, skipping %s for trip %s", push_type, trip.id)
            return stats

        try:
            if not has_push_copy(push_type):
                logger.warning("No copy registered for push type %s", push_type)
                return stats

            traveler_ids: list[str] = []
            if needs_traveler_ids(push_type):
                traveler_ids = self._active_traveler_ids(trip)
            targets = resolve_target_users(push_type, trip, context, traveler_ids)
            targets = self._limit_recipients(targets)
            if not targets:
                return stats

            eligible: list[str] = []
            for user_id in targets:
                if self._is_capped(push_type, user_id, now):
                    stats.suppressed += 1
                    continue

                dedupe_key = build_dedupe_key(push_type, trip.id, context, user_id)
                if not self.firestore_client.try_record_push(user_id, dedupe_key, push_type, trip.id):
                    stats.suppressed += 1
                    continue

                eligible.append(user_id)

            data = build_deep_link(push_type, trip.id)

            for user_id in eligible:
                try:
                    message = format_push_message(push_type, context, user_id, trip)
                    if self._deliver(user_id, message, data):
                        stats.sent += 1
                    else:
                        stats.failed += 1
                except Exception as e:
                    logger.error("[push:%s] send failed for user %s: %s", push_type, user_id, str(e))
                    stats.failed += 1

        except Exception as e:
            logger.error("[push:%s] router failed for trip %s: %s", push_type, trip.id, str(e))

        logger.info(
            "[push:%s] trip %s: %d sent, %d suppressed, %d failed",
            push_type, trip.id, stats.sent, stats.suppressed, stats.failed,
        )
        return stats

    def send_for_nudge(self, nudge: Nudge, trip: Trip) -> PushStats:
        """Send a push for a nudge if its type is push-eligible.

        No dedupe here: the nudge engine already dedupes nudges.

        Args:
            nudge: Nudge computed for the trip
            trip: The trip

        Returns:
            PushStats with sent/failed counts
        """
        stats = PushStats()

        if not is_push_eligible(nudge.type):
            logger.debug("Nudge %s is not push-eligible", nudge.type)
            return stats

        if not self.config.push_enabled:
            logger.info("Push disabled, skipping nudge %s for trip %s", nudge.type, trip.id)
            return stats

        try:
            traveler_ids = self._active_traveler_ids(trip)
            targets = self._limit_recipients(resolve_nudge_audience(nudge, trip, traveler_ids))
            data = build_deep_link(nudge.type, trip.id)

            for user_id in targets:
                message = format_nudge_push(nudge.type, trip, user_id, nudge.payload)
                if message is None:
                    logger.warning("No push copy for nudge %s", nudge.type)
                    return stats
                try:
                    if self._deliver(user_id, message, data):
                        stats.sent += 1
                    else:
                        stats.failed += 1
                except Exception as e:
                    logger.error("[nudge:%s] send failed for user %s: %s", nudge.type, user_id, str(e))
                    stats.failed += 1

        except Exception as e:
            logger.error("[nudge:%s] push failed for trip %s: %s", nudge.type, trip.id, str(e))

        return stats

    def run_sweep(self, now: datetime | None = None) -> SweepResult:
        """Run the daily sweep of time-based pushes.

        - prep_reminder_7d: locked trips starting in 5-7 days
        - trip_started: locked trips starting today

        Args:
            now: Current time (defaults to now, UTC)

        Returns:
            SweepResult with per-type stats
        """
        now = now or datetime.now(timezone.utc)
        window = compute_sweep_window(now)
        result = SweepResult()

        try:
            prep_trips = self.firestore_client.find_trips_starting_between(
                window.prep_start, window.prep_end,
            )
            starting_trips = self.firestore_client.find_trips_starting_between(
                window.today, window.today,
            )
        except Exception as e:
            error_msg = f"Failed to fetch trips: {e}"
            logger.error(error_msg)
            result.errors.append(error_msg)
            return result

        for trip in prep_trips:
            result.prep_reminder.add(self.route(
                PushType.PREP_REMINDER_7D.value,
                trip,
                {"tripName": trip.name},
                now=now,
            ))

        for trip in starting_trips:
            result.trip_started.add(self.route(
                PushType.TRIP_STARTED.value,
                trip,
                {"tripName": trip.name},
                now=now,
            ))

        result.trips_scanned = len(prep_trips) + len(starting_trips)
        logger.info("Push sweep completed: %s", result.summary)
        return result
