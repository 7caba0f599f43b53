import os
import sys
import tempfile
from datetime import date, datetime
from pathlib import Path

import pytest

_RUNTIME_DIR = Path(tempfile.mkdtemp(prefix="mealcycle-tests-"))
os.environ.setdefault("MEALCYCLE_LOG_TO_CONSOLE", "false")
os.environ.setdefault("MEALCYCLE_LOG_DIR", str(_RUNTIME_DIR))
os.environ.setdefault("SETTINGS_STORE_PATH", str(_RUNTIME_DIR / "user_settings.json"))

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


from mealcycle.domain.configuration import CycleConfig  # noqa: E402
from mealcycle.domain.entities import MealRecord, MealType  # noqa: E402


def meal(timestamp, category: str = MealType.ALMUERZO.value, **kwargs) -> MealRecord:
    return MealRecord(timestamp=timestamp, category=category, **kwargs)


@pytest.fixture
def weekly_config() -> CycleConfig:
    """Seven-day cycles starting on Monday with three sweet desserts."""
    return CycleConfig(cycle_length_days=7, start_weekday=1, quota_limit=3)


@pytest.fixture
def make_meal():
    return meal


@pytest.fixture
def wednesday() -> datetime:
    return datetime(2024, 1, 10, 12, 30)


@pytest.fixture
def sample_meals() -> list[MealRecord]:
    return [
        meal(datetime(2024, 1, 20, 13, 0), MealType.POSTRE1.value, id="m3"),
        meal(date(2024, 1, 1), MealType.DESAYUNO.value, id="m1"),
        meal("2024-01-09T08:15:00", MealType.DESAYUNO.value, id="m2"),
    ]
