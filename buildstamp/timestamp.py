"""Resolve the canonical build-day timestamp (epoch seconds of UTC midnight)."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable

from buildstamp.utils.logging import get_logger

log = get_logger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24

_EPOCH = date(1970, 1, 1)

Clock = Callable[[], date]


class ClockUnavailable(Exception):
    """Raised when the system clock cannot be read."""


def epoch_seconds_of(day: date) -> int:
    """Return the epoch seconds of UTC midnight on *day*.

    A ``datetime`` is truncated to its calendar date first; the time of day
    and any tzinfo are ignored.

    Raises:
        ValueError: If *day* lies before 1970-01-01.
    """
    if isinstance(day, datetime):
        day = day.date()
    days = (day - _EPOCH).days
    if days < 0:
        raise ValueError(f"Build day {day.isoformat()} is before the Unix epoch")
    return days * SECONDS_PER_DAY


def utc_today() -> date:
    """Today's calendar date in UTC, the default clock."""
    return datetime.now(timezone.utc).date()


def read_clock(clock: Clock | None = None) -> date:
    """Read *clock* once (default: ``utc_today``), raising ClockUnavailable on failure."""
    read = clock or utc_today
    try:
        today = read()
    except (OSError, OverflowError, ValueError) as exc:
        log.error("clock_unavailable", error=str(exc))
        raise ClockUnavailable(f"Could not read the system clock: {exc}") from exc
    if not isinstance(today, date):
        raise ClockUnavailable(f"Clock returned {today!r}, expected a date")
    return today


def today_epoch_seconds(clock: Clock | None = None) -> int:
    """Epoch seconds of today's midnight, used as the freshness anchor."""
    return epoch_seconds_of(read_clock(clock))


def resolve(explicit: date | None = None, clock: Clock | None = None) -> int:
    """Return the BuildTimestamp for this invocation.

    Args:
        explicit: Build day supplied by the caller.  Wins over the clock.
        clock:    Callable returning today's date.  Defaults to
                  ``utc_today``.

    Raises:
        ClockUnavailable: If no explicit date was given and the clock fails.
    """
    day = explicit if explicit is not None else read_clock(clock)
    timestamp = epoch_seconds_of(day)
    log.debug(
        "timestamp_resolved",
        explicit=explicit is not None,
        build_day=(day.date() if isinstance(day, datetime) else day).isoformat(),
        epoch_seconds=timestamp,
    )
    return timestamp
