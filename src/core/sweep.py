"""Daily push sweep scheduling - Pure functions.

The sweep runs once a day and sends time-based pushes: a prep reminder for
trips starting in five to seven days, and a greeting on the start day.
"""

import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


PREP_REMINDER_MIN_DAYS = 5
PREP_REMINDER_MAX_DAYS = 7


@dataclass(frozen=True)
class SweepWindow:
    """Start-date ranges for one sweep run, as ISO dates (UTC).

    Attributes:
        prep_start: First start date that gets a prep reminder
        prep_end: Last start date that gets a prep reminder
        today: Start date that gets a trip-started push
    """
    prep_start: str
    prep_end: str
    today: str


def compute_sweep_window(now: datetime) -> SweepWindow:
    """Compute the start-date ranges for a sweep run.

    Pure function. Naive datetimes are taken to be UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    today = now.astimezone(timezone.utc).date()

    return SweepWindow(
        prep_start=(today + timedelta(days=PREP_REMINDER_MIN_DAYS)).isoformat(),
        prep_end=(today + timedelta(days=PREP_REMINDER_MAX_DAYS)).isoformat(),
        today=today.isoformat(),
    )


def is_authorized(authorization_header: str | None, secret: str | None) -> bool:
    """Check a 'Bearer <secret>' header against the job secret.

    Pure function. An unset secret never authorizes.
    """
    if not secret or not authorization_header:
        return False
    expected = f"Bearer {secret}"
    return hmac.compare_digest(authorization_header.encode("utf-8"), expected.encode("utf-8"))
