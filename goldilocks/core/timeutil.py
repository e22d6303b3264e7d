"""Local-time helpers.

Tariff periods, comfort night bands and forecast tips are all expressed in
the household's wall-clock time, so every timestamp is converted once here.
"""

from __future__ import annotations

from datetime import UTC, datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

from goldilocks.config import get_settings


@lru_cache(maxsize=8)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def local_zone(name: str | None = None) -> ZoneInfo:
    return _zone(name or get_settings().timezone)


def now_utc() -> datetime:
    return datetime.now(UTC)


def now_local(tz: str | None = None) -> datetime:
    return now_utc().astimezone(local_zone(tz))


def to_local(value: datetime | None, tz: str | None = None) -> datetime:
    """Return ``value`` as local wall-clock time.

    Naive datetimes are assumed to already be local; ``None`` means now.
    """

    if value is None:
        return now_local(tz)
    if value.tzinfo is None:
        return value
    return value.astimezone(local_zone(tz))


def hours_between(start: datetime, end: datetime, tz: str | None = None) -> float:
    """Hours from ``start`` to ``end``, tolerating mixed naive/aware inputs."""

    if (start.tzinfo is None) != (end.tzinfo is None):
        start = to_local(start, tz).replace(tzinfo=None)
        end = to_local(end, tz).replace(tzinfo=None)
    return (end - start).total_seconds() / 3600


__all__ = ["hours_between", "local_zone", "now_local", "now_utc", "to_local"]
