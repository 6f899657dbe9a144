"""
Time helpers for queue age filtering.

Queue item ages are computed against wall-clock time; callers that need
determinism pass their own clock.
"""

from datetime import datetime, timezone
from typing import Optional, Union


def now_utc() -> datetime:
    """Current wall-clock time as a UTC datetime."""
    return datetime.now(timezone.utc)


def from_epoch_seconds(value: Optional[Union[int, float]]) -> Optional[datetime]:
    """
    Convert an epoch-seconds timestamp into a UTC datetime.

    Args:
        value: Seconds since the epoch, or None when the source omitted it

    Returns:
        UTC datetime, or None when no timestamp was given
    """
    if value is None:
        return None

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Epoch timestamp must be numeric, got {value!r}")

    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"Epoch timestamp out of range: {value!r}") from e


def age_seconds(created_at: datetime, now: Optional[datetime] = None) -> float:
    """
    Seconds elapsed between a creation timestamp and now.

    Args:
        created_at: Creation time (UTC)
        now: Reference time, defaults to wall-clock time

    Returns:
        Age in seconds (negative if created_at lies in the future)
    """
    if now is None:
        now = now_utc()

    return (now - created_at).total_seconds()
