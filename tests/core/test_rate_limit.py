"""Tests for the daily push cap."""

from datetime import datetime, timedelta, timezone

from src.core.config import PushLimitConfig
from src.core.rate_limit import check_daily_cap, start_of_utc_day


class TestCheckDailyCap:
    """Tests for check_daily_cap function."""

    def test_allows_under_cap(self):
        """Push is allowed when under the cap."""
        result = check_daily_cap("expense_added", 2, PushLimitConfig(max_pushes_per_day=3))

        assert result.allowed is True
        assert result.reason is None
        assert result.exempt is False

    def test_blocks_at_cap(self):
        """Push is blocked once the cap is reached."""
        result = check_daily_cap("expense_added", 3, PushLimitConfig(max_pushes_per_day=3))

        assert result.allowed is False
        assert "Daily cap reached" in result.reason
        assert "3/3" in result.reason
        assert result.sent_today == 3

    def test_p0_is_exempt(self):
        """P0 pushes bypass the cap."""
        result = check_daily_cap("dates_locked", 10, PushLimitConfig(max_pushes_per_day=3))

        assert result.allowed is True
        assert result.exempt is True

    def test_zero_means_unlimited(self):
        result = check_daily_cap("expense_added", 100, PushLimitConfig(max_pushes_per_day=0))
        assert result.allowed is True


class TestStartOfUtcDay:
    """Tests for start_of_utc_day function."""

    def test_truncates_to_midnight(self):
        now = datetime(2026, 3, 1, 15, 30, 12, tzinfo=timezone.utc)
        assert start_of_utc_day(now) == datetime(2026, 3, 1, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert start_of_utc_day(datetime(2026, 3, 1, 23, 59)) == datetime(2026, 3, 1, tzinfo=timezone.utc)

    def test_converts_other_zones(self):
        """01:00 at UTC+2 is still the previous UTC day."""
        tz = timezone(timedelta(hours=2))
        now = datetime(2026, 3, 2, 1, 0, tzinfo=tz)
        assert start_of_utc_day(now) == datetime(2026, 3, 1, tzinfo=timezone.utc)
