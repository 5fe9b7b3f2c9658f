"""Daily push cap - Pure functions.

This module decides whether a user may receive another push today. P0 pushes
(trip-level milestones and join flow) are never capped. All functions are
pure with no side effects; the shell counts today's pushes.

Known limitation: the day boundary is UTC midnight, not the user's local
midnight, so a user can see up to twice the cap across the boundary.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from src.core.rules import is_p0_type

if TYPE_CHECKING:
    from src.core.config import PushLimitConfig


@dataclass(frozen=True)
class RateLimitResult:
    """Result of checking the daily cap.

    Attributes:
        allowed: Whether the push is allowed
        reason: Reason if not allowed (None if allowed)
        sent_today: Pushes already sent to the user today
        exempt: True if the push type bypasses the cap
    """
    allowed: bool
    reason: str | None
    sent_today: int
    exempt: bool = False


def start_of_utc_day(now: datetime) -> datetime:
    """Midnight UTC of the day containing `now`.

    Pure function. Naive datetimes are taken to be UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def check_daily_cap(
    push_type: str,
    sent_today: int,
    config: "PushLimitConfig",
) -> RateLimitResult:
    """Check whether a push is allowed under the daily cap.

    Pure function.

    Args:
        push_type: Push notification type
        sent_today: Pushes already sent to the user since UTC midnight
        config: Push limit configuration

    Returns:
        RateLimitResult indicating if the push is allowed
    """
    if is_p0_type(push_type):
        return RateLimitResult(
            allowed=True,
            reason=None,
            sent_today=sent_today,
            exempt=True,
        )

    if config.max_pushes_per_day > 0 and sent_today >= config.max_pushes_per_day:
        return RateLimitResult(
            allowed=False,
            reason=f"Daily cap reached: {sent_today}/{config.max_pushes_per_day} pushes",
            sent_today=sent_today,
        )

    return RateLimitResult(
        allowed=True,
        reason=None,
        sent_today=sent_today,
    )
