"""Firestore Client - Imperative Shell.

This module reads trips, memberships and planning input, and persists push
events and device tokens. Uses Google Cloud Firestore.

All I/O is contained here; query predicates and dedupe keys come from the
core module.

Firestore's native `!=` drops documents that lack the field, so predicate
clauses other than plain equality are never sent to Firestore. They are
evaluated in-process with `matches_query` after the equality-filtered read.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterator

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from src.core.dedup import push_event_id
from src.core.membership import (
    active_circle_members_query,
    active_membership_query,
    matches_query,
    split_query,
)
from src.core.pending_actions import PlanningState
from src.core.trip import Trip, parse_trip


logger = logging.getLogger(__name__)


MEMBERSHIPS = "memberships"
TRIPS = "trips"
TRIP_PARTICIPANTS = "trip_participants"
PUSH_EVENTS = "push_events"
PUSH_TOKENS = "push_tokens"
AVAILABILITIES = "availabilities"
VOTES = "votes"
DATE_PICKS = "trip_date_picks"
DATE_WINDOWS = "date_windows"
WINDOW_SUPPORTS = "window_supports"

# Firestore caps the number of values in an "in" filter
MAX_IN_VALUES = 30


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
    """
    project_id: str | None = None
    database: str | None = None


@dataclass(frozen=True)
class PushToken:
    """A registered device token.

    Attributes:
        id: Document ID
        user_id: Owner of the device
        token: Provider token
        provider: 'fcm' or 'apns'
    """
    id: str
    user_id: str
    token: str
    provider: str


def _chunks(values: list[str], size: int) -> Iterator[list[str]]:
    for i in range(0, len(values), size):
        yield values[i:i + size]


class FirestoreClient:
    """Client for trip, membership and push state in Firestore.

    This is part of the imperative shell - it handles database I/O.
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs = {}
            if self.config.project_id:
                kwargs['project'] = self.config.project_id
            if self.config.database:
                kwargs['database'] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def find(self, collection: str, query: dict[str, Any]) -> list[dict[str, Any]]:
        """Find documents matching a core query predicate.

        Equality clauses are applied by Firestore; the rest are evaluated
        here so absent fields keep their not-equal semantics.

        Args:
            collection: Collection name
            query: Query predicate from the core

        Returns:
            Matching documents, each with its document ID under "_id"
        """
        pushdown, residual = split_query(query)

        ref = self.client.collection(collection)
        for field_name, value in pushdown.items():
            ref = ref.where(filter=FieldFilter(field_name, "==", value))

        results = []
        for doc in ref.stream():
            data = doc.to_dict() or {}
            if residual and not matches_query(data, residual):
                continue
            data["_id"] = doc.id
            results.append(data)
        return results

    # Memberships and travelers

    def get_active_membership(self, user_id: str, circle_id: str) -> dict[str, Any] | None:
        """Fetch a user's active membership in a circle.

        This method performs database I/O.

        Returns:
            Membership document, or None if absent or left
        """
        matches = self.find(MEMBERSHIPS, active_membership_query(user_id, circle_id))
        return matches[0] if matches else None

    def list_circle_memberships(self, circle_id: str) -> list[dict[str, Any]]:
        """Fetch every active membership of a circle."""
        return self.find(MEMBERSHIPS, active_circle_members_query(circle_id))

    def list_trip_participants(self, trip_id: str) -> list[dict[str, Any]]:
        """Fetch every participant record of a trip, whatever its status."""
        return self.find(TRIP_PARTICIPANTS, {"tripId": trip_id})

    # Trips

    def get_trip(self, trip_id: str) -> Trip | None:
        """Fetch a trip by ID.

        This method performs database I/O.

        Returns:
            Trip, or None if not found
        """
        doc = self.client.collection(TRIPS).document(trip_id).get()
        if not doc.exists:
            logger.info("Trip %s not found", trip_id)
            return None
        return parse_trip(doc.to_dict() or {}, trip_id=doc.id)

    def find_trips_starting_between(
        self,
        start_date: str,
        end_date: str,
        status: str = "locked",
    ) -> list[Trip]:
        """Fetch trips with a start date in [start_date, end_date].

        Dates are ISO strings, which sort chronologically.
        """
        query = (
            self.client.collection(TRIPS)
            .where(filter=FieldFilter("status", "==", status))
            .where(filter=FieldFilter("startDate", ">=", start_date))
            .where(filter=FieldFilter("startDate", "<=", end_date))
        )
        trips = [parse_trip(doc.to_dict() or {}, trip_id=doc.id) for doc in query.stream()]
        logger.info(
            "Found %d %s trips starting %s..%s",
            len(trips), status, start_date, end_date,
        )
        return trips

    def get_planning_state(self, trip_id: str, user_id: str) -> PlanningState:
        """Fetch the scheduling input needed to derive pending actions."""
        votes = self.find(VOTES, {"tripId": trip_id})
        user_vote = next((v for v in votes if v.get("userId") == user_id), None)

        return PlanningState(
            user_date_picks=tuple(self.find(DATE_PICKS, {"tripId": trip_id, "userId": user_id})),
            user_vote=user_vote,
            availabilities=tuple(self.find(AVAILABILITIES, {"tripId": trip_id})),
            votes=tuple(votes),
            date_windows=tuple(self.find(DATE_WINDOWS, {"tripId": trip_id})),
            window_supports=tuple(self.find(WINDOW_SUPPORTS, {"tripId": trip_id})),
        )

    # Push events

    def try_record_push(
        self,
        user_id: str,
        dedupe_key: str,
        push_type: str,
        trip_id: str,
    ) -> bool:
        """Atomically record a push event unless it already exists.

        `create()` fails if the document exists, which makes this an
        insert-if-absent on (user, dedupe key).

        Returns:
            True if the event is new (safe to send), False if duplicate or on error
        """
        ref = self.client.collection(PUSH_EVENTS).document(push_event_id(user_id, dedupe_key))

        try:
            ref.create({
                "userId": user_id,
                "dedupeKey": dedupe_key,
                "pushType": push_type,
                "tripId": trip_id,
                "sentAt": datetime.now(timezone.utc),
            })
            return True

        except gcp_exceptions.AlreadyExists:
            logger.info("Duplicate push suppressed: %s", dedupe_key)
            return False

        except Exception as e:
            # Not sending beats sending twice
            logger.error("Failed to record push %s: %s", dedupe_key, str(e))
            return False

    def count_pushes_since(self, user_id: str, since: datetime) -> int:
        """Count push events recorded for a user since a point in time.

        Returns:
            Number of events (0 on error)
        """
        query = (
            self.client.collection(PUSH_EVENTS)
            .where(filter=FieldFilter("userId", "==", user_id))
            .where(filter=FieldFilter("sentAt", ">=", since))
        )

        try:
            return sum(1 for _ in query.stream())
        except Exception as e:
            logger.error("Failed to count pushes for %s: %s", user_id, str(e))
            return 0

    # Push tokens

    def get_push_tokens(self, user_ids: list[str], provider: str = "fcm") -> list[PushToken]:
        """Fetch device tokens for a set of users."""
        tokens: list[PushToken] = []

        for chunk in _chunks(list(user_ids), MAX_IN_VALUES):
            query = (
                self.client.collection(PUSH_TOKENS)
                .where(filter=FieldFilter("userId", "in", chunk))
                .where(filter=FieldFilter("provider", "==", provider))
            )
            for doc in query.stream():
                data = doc.to_dict() or {}
                if not data.get("token"):
                    continue
                tokens.append(PushToken(
                    id=doc.id,
                    user_id=data.get("userId", ""),
                    token=data["token"],
                    provider=data.get("provider", provider),
                ))

        return tokens

    def delete_push_token(self, token_id: str) -> bool:
        """Delete a device token the provider reported as invalid.

        Returns:
            True if the delete succeeded
        """
        try:
            self.client.collection(PUSH_TOKENS).document(token_id).delete()
            logger.info("Pruned push token %s", token_id)
            return True
        except Exception as e:
            logger.error("Failed to prune push token %s: %s", token_id, str(e))
            return False
