"""Trip data models and parsing - Pure functions.

This module turns raw trip documents (camelCase, as stored) into typed
objects. All functions are pure with no side effects.
"""

from dataclasses import dataclass
from typing import Any


TRIP_TYPE_COLLABORATIVE = "collaborative"
TRIP_TYPE_HOSTED = "hosted"


@dataclass(frozen=True)
class Trip:
    """Immutable trip data model.

    Attributes:
        id: Trip ID (may be None for malformed documents)
        name: Display name, used as push title
        circle_id: Circle the trip belongs to
        created_by: User ID of the trip leader
        trip_type: 'collaborative' or 'hosted'
        status: Lifecycle status ('proposed', 'scheduling', 'voting', 'locked', ...)
        scheduling_mode: 'date_windows', 'top3_heatmap' or None (legacy availability)
        itinerary_status: Itinerary stage ('collecting_ideas', 'drafting', ...)
        start_date: Locked start date as ISO date string
        created_at: Creation timestamp (ISO string)
        updated_at: Last update timestamp (ISO string)
    """
    id: str | None
    name: str = ""
    circle_id: str | None = None
    created_by: str | None = None
    trip_type: str = TRIP_TYPE_COLLABORATIVE
    status: str | None = None
    scheduling_mode: str | None = None
    itinerary_status: str | None = None
    start_date: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def is_hosted(self) -> bool:
        return self.trip_type == TRIP_TYPE_HOSTED

    @property
    def is_collaborative(self) -> bool:
        return self.trip_type == TRIP_TYPE_COLLABORATIVE

    @property
    def last_activity(self) -> str | None:
        """Most recent known timestamp."""
        return self.updated_at or self.created_at


@dataclass(frozen=True)
class PendingAction:
    """A suggested next step for a user on a trip.

    Attributes:
        action_type: 'scheduling_required', 'date_vote', 'itinerary_review', 'other_input', ...
        priority: 1 = highest
        label: Call-to-action text
        href: Navigation target
        timestamp: When the underlying state last changed
    """
    action_type: str
    priority: int
    label: str
    href: str
    timestamp: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.action_type,
            "priority": self.priority,
            "label": self.label,
            "href": self.href,
            "timestamp": self.timestamp,
        }


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def parse_trip(data: dict[str, Any], trip_id: str | None = None) -> Trip:
    """Parse a trip document into a Trip.

    Pure function.

    Args:
        data: Trip document
        trip_id: Document ID, used when the document has no `id` field

    Returns:
        Trip object
    """
    return Trip(
        id=data.get("id") or trip_id,
        name=data.get("name") or "",
        circle_id=data.get("circleId"),
        created_by=data.get("createdBy"),
        trip_type=data.get("type") or TRIP_TYPE_COLLABORATIVE,
        status=data.get("status"),
        scheduling_mode=data.get("schedulingMode"),
        itinerary_status=data.get("itineraryStatus"),
        start_date=_as_str(data.get("startDate")),
        created_at=_as_str(data.get("createdAt")),
        updated_at=_as_str(data.get("updatedAt")),
    )


def parse_pending_action(data: dict[str, Any]) -> PendingAction:
    """Parse a pending action from its JSON form.

    Pure function.

    Raises:
        KeyError: If href or label is missing
    """
    return PendingAction(
        action_type=data.get("type", "other_input"),
        priority=int(data.get("priority", 5)),
        label=data["label"],
        href=data["href"],
        timestamp=data.get("timestamp"),
    )
