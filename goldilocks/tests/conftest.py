import sys
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[2]
if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))

from goldilocks.models.schemas import Reading  # noqa: E402

# Naive datetimes are local wall-clock time throughout the engine.
WINTER_WEEKDAY_NOON = datetime(2026, 1, 14, 12, 0)  # Wednesday
SUMMER_WEEKEND_NOON = datetime(2026, 7, 11, 12, 0)  # Saturday


@pytest.fixture
def winter_weekday_noon() -> datetime:
    return WINTER_WEEKDAY_NOON


@pytest.fixture
def summer_weekend_noon() -> datetime:
    return SUMMER_WEEKEND_NOON


@pytest.fixture
def make_readings() -> Callable[..., list[Reading]]:
    """Build one-minute readings from a list of humidity values."""

    def _build(
        humidities: list[float | None],
        *,
        start: datetime = WINTER_WEEKDAY_NOON,
        temp_c: float | None = 21.0,
        step_minutes: float = 1.0,
    ) -> list[Reading]:
        return [
            Reading(
                timestamp=start + timedelta(minutes=i * step_minutes),
                device_id="sensor-1",
                temp_c=temp_c,
                humidity_rh=rh,
            )
            for i, rh in enumerate(humidities)
        ]

    return _build
