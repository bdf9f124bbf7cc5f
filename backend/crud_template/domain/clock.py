"""Process-wide civil time source.

Audit timestamps are stored in ``timestamp without time zone`` columns, so
every writer converts the real UTC instant to one fixed civil time zone and
drops the tzinfo before storing it.
"""

from datetime import datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Sao_Paulo"


class Clock(Protocol):
    """Anything able to tell the current (naive, civil) time."""

    def now(self) -> datetime: ...


class CivilClock:
    """Wall-clock time of a fixed zone, returned without tzinfo."""

    def __init__(self, timezone_name: str = DEFAULT_TIMEZONE):
        self._zone = ZoneInfo(timezone_name)

    @property
    def timezone_name(self) -> str:
        return self._zone.key

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone(self._zone).replace(tzinfo=None)


_clock: Clock = CivilClock()


def get_clock() -> Clock:
    return _clock


def set_clock(clock: Clock) -> None:
    """Replace the process-wide clock (startup configuration and tests)."""
    global _clock
    _clock = clock


def civil_now() -> datetime:
    return _clock.now()
