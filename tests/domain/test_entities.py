from __future__ import annotations

from datetime import date

from mealcycle.domain.entities import (
    CurrentCycleInfo,
    CycleDay,
    CycleWindow,
    MealRecord,
    MealType,
    QuotaStatus,
    is_sweet_dessert,
)


def test_meal_record_from_backend_row_prefers_date_over_created_at():
    record = MealRecord.from_mapping(
        {
            "id": 17,
            "user_id": "u1",
            "description": "Flan",
            "meal_type": "postre1",
            "created_at": "2024-01-10T14:00:00Z",
            "date": "2024-01-09",
            "photo_url": "https://example.com/flan.jpg",
        }
    )

    assert record.id == "17"
    assert record.timestamp == "2024-01-09"
    assert record.category == "postre1"
    assert record.photo_url == "https://example.com/flan.jpg"
    assert is_sweet_dessert(record)


def test_meal_record_from_sparse_row():
    record = MealRecord.from_mapping({"category": "cena"})

    assert record.timestamp is None
    assert record.category == "cena"
    assert record.id is None
    assert record.description == ""


def test_only_lunch_dessert_is_sweet():
    assert is_sweet_dessert(MealRecord("2024-01-01", MealType.POSTRE1))
    assert not is_sweet_dessert(MealRecord("2024-01-01", MealType.POSTRE2.value))
    assert not is_sweet_dessert(MealRecord("2024-01-01", "almuerzo"))


def test_cycle_window_helpers():
    meal = MealRecord("2024-01-10", "cena")
    window = CycleWindow(
        cycle_number=2,
        start_date=date(2024, 1, 8),
        end_date=date(2024, 1, 14),
        days=(CycleDay(date(2024, 1, 10), (meal, meal)), CycleDay(date(2024, 1, 9))),
    )

    assert window.record_count == 2
    assert window.length_days == 7
    assert window.contains(date(2024, 1, 14))
    assert not window.contains(date(2024, 1, 15))
    assert list(window.iter_records()) == [meal, meal]
    assert window.label == "Ciclo 2: 8 ene - 14 ene"
    assert window.days[0].label == "Miércoles 10 enero"


def test_quota_status_derived_fields():
    assert QuotaStatus(used=1, limit=3).remaining == 2
    assert QuotaStatus(used=5, limit=3).remaining == 0
    assert QuotaStatus(used=3, limit=3).is_limit_reached
    assert not QuotaStatus(used=2, limit=3).is_limit_reached


def test_current_cycle_progress():
    info = CurrentCycleInfo(date(2024, 1, 8), date(2024, 1, 14), day_in_cycle=3, days_left=5, cycle_length_days=7)
    assert info.progress == 3 / 7
