"""
Utility functions module.

Time Semantics:
- All timestamps are timezone-aware UTC datetimes
- Drone reports creation times as epoch seconds
- Wall-clock time is injected where ages are computed so it can be frozen in tests
"""

from .time import age_seconds, from_epoch_seconds, now_utc

__all__ = ["age_seconds", "from_epoch_seconds", "now_utc"]
