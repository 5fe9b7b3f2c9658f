"""Tests for daily sweep scheduling."""

from datetime import datetime, timedelta, timezone

from src.core.sweep import SweepWindow, compute_sweep_window, is_authorized


class TestComputeSweepWindow:
    """Tests for compute_sweep_window function."""

    def test_window(self):
        now = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

        assert compute_sweep_window(now) == SweepWindow(
            prep_start="2026-03-06",
            prep_end="2026-03-08",
            today="2026-03-01",
        )

    def test_crosses_month_boundary(self):
        window = compute_sweep_window(datetime(2026, 2, 27, tzinfo=timezone.utc))
        assert window.prep_start == "2026-03-04"
        assert window.prep_end == "2026-03-06"

    def test_uses_utc_date(self):
        """23:30 at UTC-5 is already the next UTC day."""
        now = datetime(2026, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert compute_sweep_window(now).today == "2026-03-02"

    def test_naive_is_utc(self):
        assert compute_sweep_window(datetime(2026, 3, 1, 23, 59)).today == "2026-03-01"


class TestIsAuthorized:
    """Tests for is_authorized function."""

    def test_matching_bearer(self):
        assert is_authorized("Bearer s3cret", "s3cret") is True

    def test_wrong_secret(self):
        assert is_authorized("Bearer nope", "s3cret") is False

    def test_missing_scheme(self):
        assert is_authorized("s3cret", "s3cret") is False

    def test_missing_header(self):
        assert is_authorized(None, "s3cret") is False

    def test_unset_secret_never_authorizes(self):
        assert is_authorized("Bearer ", "") is False
        assert is_authorized("Bearer None", None) is False
