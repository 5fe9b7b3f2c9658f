"""Tests for trip parsing."""

from datetime import datetime, timezone

import pytest

from src.core.trip import PendingAction, Trip, parse_pending_action, parse_trip


class TestParseTrip:
    """Tests for parse_trip function."""

    def test_maps_document_fields(self):
        trip = parse_trip({
            "id": "t1",
            "name": "Lisbon",
            "circleId": "c1",
            "createdBy": "leader",
            "type": "hosted",
            "status": "locked",
            "schedulingMode": "date_windows",
            "itineraryStatus": "drafting",
            "startDate": "2026-04-01",
        })

        assert trip == Trip(
            id="t1",
            name="Lisbon",
            circle_id="c1",
            created_by="leader",
            trip_type="hosted",
            status="locked",
            scheduling_mode="date_windows",
            itinerary_status="drafting",
            start_date="2026-04-01",
        )
        assert trip.is_hosted is True
        assert trip.is_collaborative is False

    def test_uses_document_id_when_missing(self):
        assert parse_trip({"name": "x"}, trip_id="doc-1").id == "doc-1"

    def test_defaults_to_collaborative(self):
        trip = parse_trip({}, trip_id="t1")
        assert trip.is_collaborative is True
        assert trip.name == ""

    def test_timestamps_become_iso_strings(self):
        created = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        trip = parse_trip({"createdAt": created}, trip_id="t1")

        assert trip.created_at == "2026-01-02T03:04:05+00:00"
        assert trip.last_activity == trip.created_at

    def test_last_activity_prefers_updated(self):
        trip = Trip(id="t1", created_at="2026-01-01", updated_at="2026-02-01")
        assert trip.last_activity == "2026-02-01"


class TestParsePendingAction:
    """Tests for parse_pending_action function."""

    def test_parses_action(self):
        action = parse_pending_action({"type": "date_vote", "priority": "2", "label": "Vote", "href": "/x"})
        assert action == PendingAction(action_type="date_vote", priority=2, label="Vote", href="/x")

    def test_defaults(self):
        action = parse_pending_action({"label": "Go", "href": "/go"})
        assert action.action_type == "other_input"
        assert action.priority == 5

    def test_requires_href(self):
        with pytest.raises(KeyError):
            parse_pending_action({"label": "Go"})

    def test_to_dict_round_trips(self):
        data = {"type": "date_vote", "priority": 2, "label": "Vote", "href": "/x", "timestamp": None}
        assert parse_pending_action(data).to_dict() == data
