"""
Tests for nutrition aggregation: daily totals and recent-entry filtering.
"""

from datetime import datetime, timezone

from domain.schemas import MealEntry
from services import MealService, NutritionService
from services.nutrition_service import filter_recent, summarize
from test_fixtures import engine, make_meal_payload


def _entry(meal_date, **overrides):
    values = {"id": f"meal-{meal_date}", "user_id": "user-1", "name": "Meal", "meal_date": meal_date}
    values.update(overrides)
    return MealEntry(**values)


# =============================================================================
# PURE HELPERS
# =============================================================================


def test_summarize_no_entries_is_all_zero():
    totals = summarize([])
    assert (totals.calories, totals.protein, totals.carbs, totals.fat, totals.sugar) == (0, 0, 0, 0, 0)


def test_summarize_sums_every_macro():
    totals = summarize(
        [
            _entry("2026-01-21", calories=350, protein=10, carbs=40, fat=5, sugar=8),
            _entry("2026-01-21", calories=120, fat=2.5),
        ]
    )
    assert totals.calories == 470
    assert totals.protein == 10
    assert totals.fat == 7.5
    assert totals.model_dump(by_alias=True)["totalCalories"] == 470


def test_filter_recent_uses_midnight_utc_of_entry_date():
    """
    Verifies:
    - Entries dated on or after now minus n days are kept
    - Older entries are dropped
    """
    now = datetime(2026, 1, 21, 0, 0, tzinfo=timezone.utc)
    entries = [_entry("2026-01-21"), _entry("2026-01-14"), _entry("2026-01-13"), _entry("2026-02-01")]

    kept = [e.meal_date for e in filter_recent(entries, days=7, now=now)]
    assert kept == ["2026-01-21", "2026-01-14", "2026-02-01"]


def test_filter_recent_excludes_unparseable_dates():
    now = datetime(2026, 1, 21, 12, 0, tzinfo=timezone.utc)
    entries = [_entry("2026-01-20"), _entry("someday"), _entry("")]

    assert [e.meal_date for e in filter_recent(entries, days=7, now=now)] == ["2026-01-20"]


def test_filter_recent_accepts_naive_now():
    entries = [_entry("2026-01-20")]
    assert filter_recent(entries, days=1, now=datetime(2026, 1, 21, 0, 0)) == entries


# =============================================================================
# DATABASE-BACKED AGGREGATION
# =============================================================================


def test_daily_totals_without_meals(engine):
    totals = NutritionService.daily_totals(engine, "user-1", "2026-01-21")
    assert totals.calories == 0
    assert totals.sugar == 0


def test_daily_totals_only_counts_that_day(engine):
    MealService.create_meal(
        engine, "user-1", {"name": "Soup", "time": "12:00", "date": "2026-01-21", "calories": 350}
    )
    MealService.create_meal(
        engine, "user-1", {"name": "Yogurt", "time": "16:00", "date": "2026-01-21", "calories": 120}
    )
    MealService.create_meal(engine, "user-1", make_meal_payload(date="2026-01-20"))

    totals = NutritionService.daily_totals(engine, "user-1", "2026-01-21")
    assert totals.calories == 470
    assert totals.protein == 0


def test_entries_within_last_n_days(engine):
    MealService.create_meal(engine, "user-1", make_meal_payload(name="Recent", date="2026-01-20"))
    MealService.create_meal(engine, "user-1", make_meal_payload(name="Old", date="2025-12-01"))

    now = datetime(2026, 1, 21, 9, 0, tzinfo=timezone.utc)
    recent = NutritionService.entries_within_last_n_days(engine, "user-1", now=now)
    assert [m.name for m in recent] == ["Recent"]
