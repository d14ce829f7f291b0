"""
Оценка длительности и калорийности тренировки.

Чистые функции без обращения к БД: используются при создании шаблона,
в POST /workouts/estimate и как запасной вариант при завершении сессии.
"""
import math
from typing import Iterable, Optional

from app.schemas.workout import EstimateEntry, WorkoutEstimate


class WorkoutEstimator:
    SECONDS_PER_REP = 3
    MIN_DURATION = 1   # минуты
    MIN_CALORIES = 10

    @classmethod
    def active_minutes(cls, entry: EstimateEntry) -> float:
        if entry.duration_seconds:
            return entry.duration_seconds * entry.sets / 60
        return (entry.reps or 0) * cls.SECONDS_PER_REP * entry.sets / 60

    @classmethod
    def rest_minutes(cls, entry: EstimateEntry) -> float:
        # После последнего подхода отдыха нет
        return entry.rest_seconds * (entry.sets - 1) / 60

    @classmethod
    def estimate(cls, entries: Iterable[EstimateEntry]) -> WorkoutEstimate:
        active_total = 0.0
        rest_total = 0.0
        calories = 0.0

        for entry in entries:
            active = cls.active_minutes(entry)
            active_total += active
            rest_total += cls.rest_minutes(entry)
            calories += active * entry.calorie_rate

        # round(..., 6) гасит ошибки float вроде 3.5000000000000004
        duration = math.ceil(round(active_total + rest_total, 6))
        rounded_calories = math.floor(round(calories, 6) + 0.5)

        return WorkoutEstimate(
            estimated_duration=max(cls.MIN_DURATION, duration),
            estimated_calories=max(cls.MIN_CALORIES, rounded_calories),
            active_minutes=round(active_total, 2),
            rest_minutes=round(rest_total, 2),
        )

    @classmethod
    def from_elapsed(cls, elapsed_minutes: float, calorie_rate: float) -> WorkoutEstimate:
        """Оценка по фактически прошедшему времени, когда ни одно упражнение не отмечено."""
        elapsed_minutes = max(0.0, elapsed_minutes)
        duration = max(cls.MIN_DURATION, math.ceil(round(elapsed_minutes, 6)))
        calories = math.floor(round(duration * calorie_rate, 6) + 0.5)
        return WorkoutEstimate(
            estimated_duration=duration,
            estimated_calories=max(cls.MIN_CALORIES, calories),
            active_minutes=round(elapsed_minutes, 2),
            rest_minutes=0.0,
        )

    @staticmethod
    def one_rep_max(weight: Optional[float], reps: Optional[int]) -> Optional[float]:
        """Расчетный 1ПМ по формуле Эпли: weight * (1 + reps / 30)."""
        if not weight or not reps:
            return None
        if reps == 1:
            return round(float(weight), 2)
        return round(weight * (1 + reps / 30), 2)
