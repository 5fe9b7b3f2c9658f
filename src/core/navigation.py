"""Navigation targets for trips and circles - Pure functions.

Canonical in-app URLs live here so page and API code never concatenate
paths by hand.
"""

from dataclasses import dataclass
from typing import Sequence
from urllib.parse import quote

from src.core.errors import InvalidInputError
from src.core.trip import PendingAction, Trip


DASHBOARD_HREF = "/dashboard"
VIEW_TRIP_LABEL = "View Trip"


@dataclass(frozen=True)
class NavigationTarget:
    """A call-to-action link.

    Attributes:
        href: Navigation target
        label: Display text
    """
    href: str
    label: str

    def to_dict(self) -> dict[str, str]:
        return {"href": self.href, "label": self.label}


def trip_href(trip_id: str | None) -> str:
    """Canonical trip detail URL, or the dashboard for an empty id."""
    if not trip_id:
        return DASHBOARD_HREF
    return f"/trips/{quote(str(trip_id), safe='')}"


def circle_page_href(circle_id: str | None) -> str:
    """Canonical circle page URL, or the dashboard for an empty id."""
    if not circle_id:
        return DASHBOARD_HREF
    return f"/circles/{quote(str(circle_id), safe='')}"


def get_trip_primary_href(
    trip: Trip,
    pending_actions: Sequence[PendingAction] = (),
) -> NavigationTarget:
    """Pick the single most relevant next action for a trip.

    Pure function. `pending_actions` must already be sorted by priority,
    highest first; the first one wins verbatim. With no pending actions the
    trip detail page is returned.

    Args:
        trip: Trip being displayed
        pending_actions: Pre-sorted pending actions (may be empty)

    Returns:
        NavigationTarget with href and label

    Raises:
        InvalidInputError: If there are no pending actions and the trip has no id
    """
    if pending_actions:
        first = pending_actions[0]
        return NavigationTarget(href=first.href, label=first.label)

    if not trip.id:
        raise InvalidInputError("Trip has no id; cannot build its detail link")

    return NavigationTarget(href=f"/trips/{trip.id}", label=VIEW_TRIP_LABEL)


def get_trip_back_destination(
    source: str | None,
    circle_id: str | None,
    trip: Trip | None = None,
) -> str:
    """Where the back button on a trip page should go.

    Pure function.

    Args:
        source: Navigation source ('circle', 'dashboard' or None)
        circle_id: Circle ID passed along with the navigation
        trip: Trip being viewed, used for its circle when circle_id is empty

    Returns:
        Destination URL
    """
    if source == "circle" and circle_id:
        return circle_page_href(circle_id)

    fallback_circle = circle_id or (trip.circle_id if trip else None)
    if not source and fallback_circle:
        return circle_page_href(fallback_circle)

    return DASHBOARD_HREF
