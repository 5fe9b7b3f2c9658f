"""Unit tests for trip navigation targets.

Pure function tests - fast, no mocks needed.
"""

import pytest

from src.core.errors import InvalidInputError
from src.core.navigation import (
    NavigationTarget,
    circle_page_href,
    get_trip_back_destination,
    get_trip_primary_href,
    trip_href,
)
from src.core.trip import PendingAction, Trip


@pytest.fixture
def trip():
    return Trip(id="t1", name="Lisbon", circle_id="c1")


def _action(href, label, priority=1):
    return PendingAction(action_type="other_input", priority=priority, label=label, href=href)


class TestGetTripPrimaryHref:
    """Tests for get_trip_primary_href()."""

    def test_defaults_to_trip_page(self, trip):
        assert get_trip_primary_href(trip, []) == NavigationTarget(href="/trips/t1", label="View Trip")

    def test_default_argument_is_empty(self, trip):
        assert get_trip_primary_href(trip).href == "/trips/t1"

    def test_first_action_wins(self, trip):
        actions = [_action("/a", "Do A"), _action("/b", "Do B")]
        assert get_trip_primary_href(trip, actions) == NavigationTarget(href="/a", label="Do A")

    def test_does_not_reorder(self, trip):
        """Caller ordering is trusted even if priorities disagree."""
        actions = [_action("/low", "Low", priority=5), _action("/high", "High", priority=1)]
        assert get_trip_primary_href(trip, actions).href == "/low"

    def test_single_action(self, trip):
        assert get_trip_primary_href(trip, [_action("/x", "X")]).label == "X"

    def test_missing_id_with_actions_is_fine(self):
        target = get_trip_primary_href(Trip(id=None), [_action("/a", "Do A")])
        assert target.href == "/a"

    def test_missing_id_without_actions_raises(self):
        with pytest.raises(InvalidInputError):
            get_trip_primary_href(Trip(id=None), [])

    def test_to_dict(self, trip):
        assert get_trip_primary_href(trip).to_dict() == {"href": "/trips/t1", "label": "View Trip"}


class TestCanonicalHrefs:
    """Tests for trip_href() and circle_page_href()."""

    def test_trip_href(self):
        assert trip_href("t1") == "/trips/t1"

    def test_trip_href_encodes(self):
        assert trip_href("a/b c") == "/trips/a%2Fb%20c"

    def test_trip_href_empty_falls_back(self):
        assert trip_href(None) == "/dashboard"
        assert trip_href("") == "/dashboard"

    def test_circle_page_href(self):
        assert circle_page_href("c1") == "/circles/c1"
        assert circle_page_href(None) == "/dashboard"


class TestGetTripBackDestination:
    """Tests for get_trip_back_destination()."""

    def test_from_circle(self):
        assert get_trip_back_destination("circle", "c9") == "/circles/c9"

    def test_from_circle_without_id_goes_to_dashboard(self):
        assert get_trip_back_destination("circle", None) == "/dashboard"

    def test_from_dashboard(self):
        assert get_trip_back_destination("dashboard", "c9") == "/dashboard"

    def test_no_source_uses_circle_id(self):
        assert get_trip_back_destination(None, "c9") == "/circles/c9"

    def test_no_source_falls_back_to_trip_circle(self, trip):
        assert get_trip_back_destination(None, None, trip) == "/circles/c1"

    def test_circle_id_is_encoded(self):
        assert get_trip_back_destination("circle", "a/b c") == "/circles/a%2Fb%20c"
        assert get_trip_back_destination(None, None, Trip(id="t1", circle_id="x/y")) == "/circles/x%2Fy"

    def test_no_source_no_circle(self):
        assert get_trip_back_destination(None, None, Trip(id="t1")) == "/dashboard"
        assert get_trip_back_destination(None, None) == "/dashboard"
