"""Tests for push audience and priority rules."""

import pytest

from src.core.nudges import Nudge
from src.core.rules import (
    PushType,
    get_active_traveler_ids,
    is_p0_type,
    needs_traveler_ids,
    resolve_nudge_audience,
    resolve_target_users,
)
from src.core.trip import Trip


@pytest.fixture
def trip():
    """Collaborative trip led by 'leader'."""
    return Trip(id="t1", name="Lisbon", circle_id="c1", created_by="leader")


@pytest.fixture
def travelers():
    return ["leader", "u1", "u2"]


class TestIsP0Type:
    """Tests for is_p0_type function."""

    @pytest.mark.parametrize("push_type", [
        "trip_created_notify",
        "trip_canceled",
        "first_dates_suggested",
        "dates_proposed_by_leader",
        "dates_locked",
        "itinerary_generated",
        "join_request_received",
        "join_request_approved",
    ])
    def test_p0_types(self, push_type):
        assert is_p0_type(push_type) is True

    @pytest.mark.parametrize("push_type", [
        "leader_ready_to_propose",
        "window_supported_author",
        "expense_added",
        "prep_reminder_7d",
        "trip_started",
        "unknown",
    ])
    def test_non_p0_types(self, push_type):
        assert is_p0_type(push_type) is False

    def test_accepts_enum(self):
        assert is_p0_type(PushType.DATES_LOCKED) is True


class TestNeedsTravelerIds:
    """Tests for needs_traveler_ids function."""

    @pytest.mark.parametrize("push_type", [
        "trip_created_notify",
        "dates_locked",
        "itinerary_generated",
        "expense_added",
        "prep_reminder_7d",
        "trip_started",
    ])
    def test_traveler_based_types(self, push_type):
        assert needs_traveler_ids(push_type) is True

    @pytest.mark.parametrize("push_type", [
        "join_request_received",
        "join_request_approved",
        "leader_transferred",
        "window_supported_author",
        "leader_ready_to_propose",
    ])
    def test_single_recipient_types(self, push_type):
        assert needs_traveler_ids(push_type) is False

    def test_accepts_enum(self):
        assert needs_traveler_ids(PushType.TRIP_STARTED) is True


class TestGetActiveTravelerIds:
    """Tests for get_active_traveler_ids function."""

    def test_collaborative_uses_active_memberships(self, trip):
        memberships = [
            {"userId": "leader", "status": "active"},
            {"userId": "u1"},                          # legacy, no status
            {"userId": "u2", "status": "left"},
        ]

        assert get_active_traveler_ids(trip, memberships, []) == ["leader", "u1"]

    def test_collaborative_excludes_left_participants(self, trip):
        memberships = [{"userId": "leader"}, {"userId": "u1"}, {"userId": "u2"}]
        participants = [
            {"userId": "u1", "status": "left"},
            {"userId": "u2", "status": "removed"},
        ]

        assert get_active_traveler_ids(trip, memberships, participants) == ["leader"]

    def test_collaborative_participant_without_status_is_active(self, trip):
        memberships = [{"userId": "u1"}]
        participants = [{"userId": "u1"}]

        assert get_active_traveler_ids(trip, memberships, participants) == ["u1"]

    def test_hosted_uses_active_participants_only(self):
        trip = Trip(id="t2", created_by="host", trip_type="hosted")
        memberships = [{"userId": "someone"}]
        participants = [
            {"userId": "host", "status": "active"},
            {"userId": "u1", "status": "active"},
            {"userId": "u2", "status": "left"},
            {"userId": "u3"},
        ]

        assert get_active_traveler_ids(trip, memberships, participants) == ["host", "u1"]


class TestResolveTargetUsers:
    """Tests for resolve_target_users function."""

    def test_excludes_actor(self, trip, travelers):
        result = resolve_target_users("trip_created_notify", trip, {"actorUserId": "leader"}, travelers)
        assert result == ["u1", "u2"]

    def test_dates_locked_includes_everyone(self, trip, travelers):
        result = resolve_target_users("dates_locked", trip, {"actorUserId": "leader"}, travelers)
        assert result == travelers

    def test_itinerary_generated_excludes_leader(self, trip, travelers):
        assert resolve_target_users("itinerary_generated", trip, {}, travelers) == ["u1", "u2"]

    def test_join_request_received_goes_to_leader(self, trip, travelers):
        assert resolve_target_users("join_request_received", trip, {}, travelers) == ["leader"]

    def test_join_request_approved_goes_to_requester(self, trip, travelers):
        result = resolve_target_users("join_request_approved", trip, {"requesterId": "new"}, travelers)
        assert result == ["new"]

    def test_join_request_approved_without_requester(self, trip, travelers):
        assert resolve_target_users("join_request_approved", trip, {}, travelers) == []

    def test_leader_transferred(self, trip, travelers):
        result = resolve_target_users("leader_transferred", trip, {"newLeaderId": "u2"}, travelers)
        assert result == ["u2"]

    def test_window_supported_author(self, trip, travelers):
        context = {"authorUserId": "u1", "actorUserId": "u2"}
        assert resolve_target_users("window_supported_author", trip, context, travelers) == ["u1"]

    def test_window_supported_self_support_is_silent(self, trip, travelers):
        context = {"authorUserId": "u1", "actorUserId": "u1"}
        assert resolve_target_users("window_supported_author", trip, context, travelers) == []

    def test_leader_ready_to_propose_goes_to_leader(self, trip, travelers):
        assert resolve_target_users(PushType.LEADER_READY_TO_PROPOSE, trip, {}, travelers) == ["leader"]

    def test_unknown_type_has_no_targets(self, trip, travelers):
        assert resolve_target_users("mystery", trip, {}, travelers) == []


class TestResolveNudgeAudience:
    """Tests for resolve_nudge_audience function."""

    def test_leader(self, trip, travelers):
        nudge = Nudge(type="leader_can_lock_dates", audience="leader")
        assert resolve_nudge_audience(nudge, trip, travelers) == ["leader"]

    def test_traveler_excludes_leader(self, trip, travelers):
        nudge = Nudge(type="dates_locked", audience="traveler")
        assert resolve_nudge_audience(nudge, trip, travelers) == ["u1", "u2"]

    def test_all(self, trip, travelers):
        nudge = Nudge(type="dates_locked", audience="all")
        assert resolve_nudge_audience(nudge, trip, travelers) == travelers

    def test_unknown_audience(self, trip, travelers):
        nudge = Nudge(type="dates_locked", audience="nobody")
        assert resolve_nudge_audience(nudge, trip, travelers) == []
