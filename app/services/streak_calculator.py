from datetime import date, timedelta
from typing import Iterable, List, Set


class StreakCalculator:
    """Серии по множеству дней с активностью (завершенная тренировка или прогресс цели)."""

    STREAK_LEVELS = [
        (365, "legendary"),
        (100, "epic"),
        (30, "gold"),
        (14, "silver"),
        (7, "bronze"),
        (3, "copper"),
    ]

    @staticmethod
    def _unique_days(days: Iterable[date]) -> List[date]:
        return sorted(set(days))

    @classmethod
    def current_streak(cls, days: Iterable[date], today: date) -> int:
        """Подряд идущие дни, заканчивающиеся сегодня или вчера."""
        active: Set[date] = set(days)
        if today in active:
            check = today
        elif today - timedelta(days=1) in active:
            check = today - timedelta(days=1)
        else:
            return 0

        streak = 0
        while check in active:
            streak += 1
            check -= timedelta(days=1)
        return streak

    @classmethod
    def longest_streak(cls, days: Iterable[date]) -> int:
        ordered = cls._unique_days(days)
        if not ordered:
            return 0

        longest = 1
        run = 1
        for previous, current in zip(ordered, ordered[1:]):
            if (current - previous).days == 1:
                run += 1
                longest = max(longest, run)
            else:
                run = 1
        return longest

    @classmethod
    def streak_level(cls, streak: int) -> str:
        for threshold, level in cls.STREAK_LEVELS:
            if streak >= threshold:
                return level
        return "beginner"

    @classmethod
    def consistency_percentage(cls, days: Iterable[date], today: date, period: int = 30) -> float:
        """Доля дней с активностью за последние period дней, %."""
        start = today - timedelta(days=period - 1)
        active_days = {day for day in days if start <= day <= today}
        return round(len(active_days) / period * 100, 1)
