"""Tests for pending action derivation."""

import pytest

from src.core.navigation import get_trip_primary_href
from src.core.pending_actions import PlanningState, derive_pending_actions
from src.core.trip import Trip


def _trip(**kwargs):
    defaults = {
        "id": "t1",
        "name": "Lisbon",
        "circle_id": "c1",
        "created_by": "leader",
        "updated_at": "2026-03-01T10:00:00+00:00",
    }
    defaults.update(kwargs)
    return Trip(**defaults)


class TestSchedulingActions:
    """Scheduling prompts on collaborative trips."""

    @pytest.mark.parametrize("mode,label", [
        ("date_windows", "Add your dates"),
        ("top3_heatmap", "Share your dates"),
        (None, "Mark availability"),
    ])
    def test_prompt_per_mode(self, mode, label):
        trip = _trip(status="scheduling", scheduling_mode=mode)

        actions = derive_pending_actions(trip, "u1", PlanningState(), is_participant=True)

        assert len(actions) == 1
        assert actions[0].label == label
        assert actions[0].action_type == "scheduling_required"
        assert actions[0].priority == 1
        assert actions[0].href == "/trips/t1"
        assert actions[0].timestamp == "2026-03-01T10:00:00+00:00"

    def test_no_prompt_after_supporting_window(self):
        trip = _trip(status="scheduling", scheduling_mode="date_windows")
        planning = PlanningState(window_supports=({"userId": "u1", "windowId": "w1"},))

        assert derive_pending_actions(trip, "u1", planning, is_participant=True) == []

    def test_no_prompt_after_suggesting_window(self):
        trip = _trip(status="proposed", scheduling_mode="date_windows")
        planning = PlanningState(date_windows=({"id": "w1", "suggestedBy": "u1"},))

        assert derive_pending_actions(trip, "u1", planning, is_participant=True) == []

    def test_no_prompt_after_picking_dates(self):
        trip = _trip(status="scheduling", scheduling_mode="top3_heatmap")
        planning = PlanningState(user_date_picks=({"rank": 1},))

        assert derive_pending_actions(trip, "u1", planning, is_participant=True) == []

    def test_no_prompt_after_legacy_availability(self):
        trip = _trip(status="scheduling")
        planning = PlanningState(availabilities=({"userId": "u1", "day": "2026-04-01"},))

        assert derive_pending_actions(trip, "u1", planning, is_participant=True) == []

    def test_non_traveler_gets_nothing(self):
        trip = _trip(status="scheduling")

        actions = derive_pending_actions(
            trip, "u1", PlanningState(), is_participant=True, is_current_user_traveler=False,
        )

        assert actions == []


class TestVotingActions:
    """Voting prompts on collaborative trips."""

    def test_vote_prompt(self):
        trip = _trip(status="voting")

        actions = derive_pending_actions(trip, "u1", PlanningState(), is_participant=True)

        assert [a.label for a in actions] == ["Vote on dates"]

    def test_no_vote_prompt_after_voting(self):
        trip = _trip(status="voting")
        planning = PlanningState(user_vote={"userId": "u1"})

        assert derive_pending_actions(trip, "u1", planning, is_participant=True) == []

    def test_leader_finalize_after_votes(self):
        trip = _trip(status="voting")
        planning = PlanningState(user_vote={"userId": "leader"}, votes=({"userId": "u1"},))

        actions = derive_pending_actions(trip, "leader", planning, is_participant=True)

        assert [a.label for a in actions] == ["Finalize dates"]


class TestHostedActions:
    """Actions on hosted trips."""

    def test_join_prompt_for_non_participant(self):
        trip = _trip(trip_type="hosted", status="scheduling", created_at="2026-02-01")

        actions = derive_pending_actions(trip, "u1", PlanningState(), is_participant=False)

        assert [a.label for a in actions] == ["Join trip"]
        assert actions[0].timestamp == "2026-02-01"

    def test_no_join_prompt_once_locked(self):
        trip = _trip(trip_type="hosted", status="locked")

        assert derive_pending_actions(trip, "u1", PlanningState(), is_participant=False) == []

    def test_leader_generate_itinerary(self):
        trip = _trip(trip_type="hosted", status="locked", itinerary_status="collecting_ideas")

        actions = derive_pending_actions(trip, "leader", PlanningState(), is_participant=True)

        assert [a.label for a in actions] == ["Generate itinerary"]

    def test_leader_review_draft(self):
        trip = _trip(trip_type="hosted", status="locked", itinerary_status="drafting")

        actions = derive_pending_actions(trip, "leader", PlanningState(), is_participant=True)

        assert [a.label for a in actions] == ["Review itinerary draft"]


class TestOrdering:
    """Sorted output feeds the primary-action resolver."""

    def test_sorted_by_priority(self):
        trip = _trip(trip_type="hosted", status="scheduling", itinerary_status="drafting")

        actions = derive_pending_actions(trip, "leader", PlanningState(), is_participant=False)

        assert [a.priority for a in actions] == [2, 3]
        assert get_trip_primary_href(trip, actions).label == "Join trip"

    def test_nothing_pending_gives_view_trip(self):
        trip = _trip(status="locked")

        actions = derive_pending_actions(trip, "u1", PlanningState(), is_participant=True)

        assert get_trip_primary_href(trip, actions).to_dict() == {"href": "/trips/t1", "label": "View Trip"}
