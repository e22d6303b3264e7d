from __future__ import annotations

from datetime import UTC, datetime

from goldilocks.core.timeutil import hours_between, local_zone, to_local


def test_naive_values_are_already_local() -> None:
    value = datetime(2026, 1, 14, 12, 0)
    assert to_local(value) is value


def test_aware_values_are_converted() -> None:
    local = to_local(datetime(2026, 7, 11, 16, 0, tzinfo=UTC), "America/Toronto")

    assert local.hour == 12  # EDT, UTC-4
    assert local.tzinfo == local_zone("America/Toronto")


def test_missing_value_is_now() -> None:
    assert to_local(None).tzinfo is not None


def test_hours_between_naive() -> None:
    assert hours_between(datetime(2026, 1, 14, 12), datetime(2026, 1, 14, 15, 30)) == 3.5


def test_hours_between_aware() -> None:
    start = datetime(2026, 1, 14, 12, tzinfo=UTC)
    end = datetime(2026, 1, 14, 10, tzinfo=UTC)
    assert hours_between(start, end) == -2.0


def test_hours_between_mixed_uses_given_zone() -> None:
    # 06:00 UTC is 15:00 in Tokyo.
    start = datetime(2026, 1, 14, 12, 0)
    end = datetime(2026, 1, 14, 6, 0, tzinfo=UTC)
    assert hours_between(start, end, "Asia/Tokyo") == 3.0
