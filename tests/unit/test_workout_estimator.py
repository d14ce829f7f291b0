"""
Модульные тесты для WorkoutEstimator.

Сценарии:
- упражнение на повторения: 3x10, отдых 60 с, 6 ккал/мин -> 4 минуты и 10 ккал (нижняя граница)
- упражнение на время использует duration_seconds вместо повторений
- пустой список дает минимум 1 минуту и 10 ккал
- одинаковый вход -> одинаковый результат
- 1ПМ по формуле Эпли
"""

import pytest

from app.schemas.workout import EstimateEntry
from app.services.workout_estimator import WorkoutEstimator

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# estimate
# ---------------------------------------------------------------------------

def test_estimate_reps_based_exercise():
    """1.5 мин работы + 2 мин отдыха -> ceil(3.5) = 4; 1.5 * 6 = 9 ккал -> поднимается до 10."""
    entry = EstimateEntry(sets=3, reps=10, rest_seconds=60, calorie_rate=6.0)

    result = WorkoutEstimator.estimate([entry])

    assert result.estimated_duration == 4
    assert result.estimated_calories == 10
    assert result.active_minutes == pytest.approx(1.5)
    assert result.rest_minutes == pytest.approx(2.0)


def test_estimate_duration_based_exercise():
    """Планка 4x60 с, отдых 30 с: 4 мин работы + 1.5 мин отдыха, 4 * 5 = 20 ккал."""
    entry = EstimateEntry(sets=4, duration_seconds=60, rest_seconds=30, calorie_rate=5.0)

    result = WorkoutEstimator.estimate([entry])

    assert result.estimated_duration == 6
    assert result.estimated_calories == 20


def test_estimate_sums_multiple_exercises():
    entries = [
        EstimateEntry(sets=5, reps=20, rest_seconds=90, calorie_rate=8.0),   # 5 мин + 6 мин
        EstimateEntry(sets=2, duration_seconds=300, rest_seconds=0, calorie_rate=10.0),  # 10 мин
    ]

    result = WorkoutEstimator.estimate(entries)

    assert result.estimated_duration == 21
    assert result.estimated_calories == 140


def test_estimate_empty_list_uses_minimums():
    result = WorkoutEstimator.estimate([])

    assert result.estimated_duration == WorkoutEstimator.MIN_DURATION
    assert result.estimated_calories == WorkoutEstimator.MIN_CALORIES


def test_estimate_single_set_has_no_rest():
    entry = EstimateEntry(sets=1, reps=10, rest_seconds=120, calorie_rate=6.0)

    assert WorkoutEstimator.rest_minutes(entry) == 0
    assert WorkoutEstimator.estimate([entry]).estimated_duration == 1


def test_estimate_is_deterministic():
    entries = [EstimateEntry(sets=3, reps=12, rest_seconds=45, calorie_rate=7.5)]

    assert WorkoutEstimator.estimate(entries) == WorkoutEstimator.estimate(entries)


def test_estimate_rounds_calories_half_up():
    """2.5 мин * 5 ккал = 12.5 -> 13."""
    entry = EstimateEntry(sets=1, duration_seconds=150, rest_seconds=0, calorie_rate=5.0)

    assert WorkoutEstimator.estimate([entry]).estimated_calories == 13


# ---------------------------------------------------------------------------
# one_rep_max
# ---------------------------------------------------------------------------

def test_one_rep_max_epley():
    assert WorkoutEstimator.one_rep_max(100, 10) == pytest.approx(133.33, abs=0.01)


def test_one_rep_max_single_rep_equals_weight():
    assert WorkoutEstimator.one_rep_max(120, 1) == 120


@pytest.mark.parametrize("weight,reps", [(None, 5), (80, None), (0, 5), (80, 0)])
def test_one_rep_max_missing_values_returns_none(weight, reps):
    assert WorkoutEstimator.one_rep_max(weight, reps) is None


def test_from_elapsed_rounds_minutes_up():
    result = WorkoutEstimator.from_elapsed(41.2, calorie_rate=5.0)
    assert result.estimated_duration == 42
    assert result.estimated_calories == 210


def test_from_elapsed_negative_time_gives_minimums():
    result = WorkoutEstimator.from_elapsed(-3, calorie_rate=5.0)
    assert result.estimated_duration == 1
    assert result.estimated_calories == 10
