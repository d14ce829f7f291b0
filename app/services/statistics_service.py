"""
Агрегатор статистики пользователя.

recompute_user_score пересчитывает единственную строку UserScore по истории
завершенных тренировок, целей и уже открытых достижений. Метод не коммитит:
транзакцией владеет вызывающий сервис (WorkoutService, GoalsService).
"""
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Set, Tuple

from app.core.clock import Clock
from app.models.gamification import UserScore
from app.models.goal import Goal, GoalStatusEnum
from app.models.workout import Workout
from app.repositories.gamification_repository import GamificationRepository
from app.repositories.goal_repository import GoalRepository
from app.repositories.workout_repository import WorkoutRepository
from app.schemas.stats import DailyActivity, Milestone, UserScoreRead, UserStatsResponse
from app.services.stats_cache import StatsCache, stats_cache
from app.services.streak_calculator import StreakCalculator

logger = logging.getLogger(__name__)

POINTS_PER_LEVEL = 100
GOAL_COMPLETION_POINTS = 20
# (порог количества завершенных целей, бонус за каждую следующую цель)
GOAL_TIER_BONUSES = [(50, 30), (25, 20), (10, 10), (5, 5)]

SESSION_MILESTONES = [1, 5, 10, 25, 50, 100, 250, 500, 1000]
STREAK_MILESTONES = [3, 7, 14, 30, 60, 100, 365]
CALORIE_MILESTONES = [1000, 5000, 10000, 25000, 50000, 100000]


def level_for_points(points: int) -> Tuple[int, int]:
    """Уровень и прогресс внутри уровня. Переход L -> L+1 стоит L * 100 очков."""
    level = 1
    remaining = max(0, points)
    while remaining >= level * POINTS_PER_LEVEL:
        remaining -= level * POINTS_PER_LEVEL
        level += 1
    return level, remaining


def goal_completion_points(goals_completed: int) -> int:
    total = 0
    for count in range(1, goals_completed + 1):
        total += GOAL_COMPLETION_POINTS
        for threshold, bonus in GOAL_TIER_BONUSES:
            if count >= threshold:
                total += bonus
                break
    return total


def apply_points(score: UserScore, total_points: int) -> None:
    score.total_points = total_points
    score.level, score.level_progress = level_for_points(total_points)


def new_user_score(user_id: int) -> UserScore:
    # Значения по умолчанию колонок появляются только после flush
    return UserScore(
        user_id=user_id,
        total_points=0,
        level=1,
        level_progress=0,
        current_streak=0,
        best_streak=0,
        goals_completed=0,
        goals_created=0,
        weekly_goals_completed=0,
        monthly_goals_completed=0,
        achievements_unlocked=0,
        workouts_completed=0,
        total_workout_minutes=0,
        total_calories_burned=0,
    )


def score_to_read(score: UserScore) -> UserScoreRead:
    return UserScoreRead(
        total_points=score.total_points,
        level=score.level,
        level_progress=score.level_progress,
        points_to_next_level=score.level * POINTS_PER_LEVEL - score.level_progress,
        current_streak=score.current_streak,
        best_streak=score.best_streak,
        goals_completed=score.goals_completed,
        goals_created=score.goals_created,
        weekly_goals_completed=score.weekly_goals_completed,
        monthly_goals_completed=score.monthly_goals_completed,
        achievements_unlocked=score.achievements_unlocked,
        workouts_completed=score.workouts_completed,
        total_workout_minutes=score.total_workout_minutes,
        total_calories_burned=score.total_calories_burned,
    )


def _same_week(moment: datetime, today: date) -> bool:
    return moment.date().isocalendar()[:2] == today.isocalendar()[:2]


def _same_month(moment: datetime, today: date) -> bool:
    return (moment.year, moment.month) == (today.year, today.month)


def _next_milestone(kind: str, current: int, milestones: List[int]) -> Optional[Milestone]:
    for target in milestones:
        if current < target:
            return Milestone(
                type=kind,
                target=target,
                current=current,
                remaining=target - current,
                progress=round(current / target * 100, 1),
            )
    return None


class StatisticsService:
    def __init__(
        self,
        workouts: WorkoutRepository,
        goals: GoalRepository,
        gamification: GamificationRepository,
        clock: Clock,
        cache: StatsCache = stats_cache,
    ):
        self.workouts = workouts
        self.goals = goals
        self.gamification = gamification
        self.clock = clock
        self.cache = cache

    @staticmethod
    def activity_days(
        sessions: Iterable[Workout],
        goals: Iterable[Goal],
        progress_timestamps: Iterable[datetime],
    ) -> Set[date]:
        days = {s.completed_at.date() for s in sessions if s.completed_at}
        days.update(ts.date() for ts in progress_timestamps)
        days.update(g.completed_at.date() for g in goals if g.completed_at)
        return days

    async def get_or_create_score(self, user_id: int) -> UserScore:
        score = await self.gamification.get_score(user_id)
        if score is None:
            score = new_user_score(user_id)
            self.gamification.add_score(score)
        return score

    async def recompute_user_score(self, user_id: int) -> UserScore:
        score = await self.get_or_create_score(user_id)
        today = self.clock.today()

        sessions = await self.workouts.list_completed_sessions(user_id)
        goals = await self.goals.list_for_user(user_id)
        progress = await self.goals.progress_timestamps(user_id)

        days = self.activity_days(sessions, goals, progress)
        current = StreakCalculator.current_streak(days, today)
        longest = StreakCalculator.longest_streak(days)
        score.current_streak = current
        score.best_streak = max(score.best_streak or 0, longest, current)
        score.streak_last_updated = today

        completed_goals = [g for g in goals if g.status == GoalStatusEnum.completed]
        score.goals_completed = len(completed_goals)
        score.goals_created = len(goals)
        score.weekly_goals_completed = sum(
            1 for g in completed_goals if g.completed_at and _same_week(g.completed_at, today)
        )
        score.monthly_goals_completed = sum(
            1 for g in completed_goals if g.completed_at and _same_month(g.completed_at, today)
        )

        score.workouts_completed = len(sessions)
        score.total_workout_minutes = sum(s.actual_duration or 0 for s in sessions)
        score.total_calories_burned = sum(s.actual_calories or 0 for s in sessions)

        achievement_points = await self.gamification.sum_achievement_points(user_id)
        score.achievements_unlocked = await self.gamification.count_user_achievements(user_id)
        apply_points(score, achievement_points + goal_completion_points(len(completed_goals)))
        score.updated_at = self.clock.now()

        logger.info(
            f"UserScore пользователя {user_id} пересчитан: points={score.total_points}, "
            f"level={score.level}, streak={score.current_streak}/{score.best_streak}"
        )
        return score

    async def get_user_stats(self, user_id: int) -> UserStatsResponse:
        cached = await self.cache.get(user_id)
        if cached is not None:
            return UserStatsResponse(**cached)

        stats = await self._build_user_stats(user_id)
        await self.cache.set(user_id, stats.model_dump(mode="json"))
        return stats

    async def _build_user_stats(self, user_id: int) -> UserStatsResponse:
        today = self.clock.today()
        sessions = await self.workouts.list_completed_sessions(user_id)
        goals = await self.goals.list_for_user(user_id)
        progress = await self.goals.progress_timestamps(user_id)
        days = self.activity_days(sessions, goals, progress)

        total = len(sessions)
        durations = [s.actual_duration or 0 for s in sessions]
        calories = [s.actual_calories or 0 for s in sessions]
        current = StreakCalculator.current_streak(days, today)
        longest = max(StreakCalculator.longest_streak(days), current)

        weekly_data = []
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            day_sessions = [s for s in sessions if s.completed_at and s.completed_at.date() == day]
            weekly_data.append(DailyActivity(
                date=day,
                day=day.strftime("%a"),
                sessions=len(day_sessions),
                minutes=sum(s.actual_duration or 0 for s in day_sessions),
                calories=sum(s.actual_calories or 0 for s in day_sessions),
            ))

        candidates = [
            _next_milestone("sessions", total, SESSION_MILESTONES),
            _next_milestone("streak", current, STREAK_MILESTONES),
            _next_milestone("calories", sum(calories), CALORIE_MILESTONES),
        ]
        candidates = [m for m in candidates if m is not None]
        next_milestone = max(candidates, key=lambda m: m.progress) if candidates else None

        return UserStatsResponse(
            total_sessions=total,
            total_minutes=sum(durations),
            total_calories=sum(calories),
            average_duration=round(sum(durations) / total, 1) if total else 0.0,
            average_calories=round(sum(calories) / total, 1) if total else 0.0,
            this_week=sum(1 for s in sessions if s.completed_at and _same_week(s.completed_at, today)),
            this_month=sum(1 for s in sessions if s.completed_at and _same_month(s.completed_at, today)),
            longest_session=max(durations, default=0),
            most_calories=max(calories, default=0),
            current_streak=current,
            longest_streak=longest,
            streak_level=StreakCalculator.streak_level(current),
            consistency_percentage=StreakCalculator.consistency_percentage(days, today),
            weekly_data=weekly_data,
            next_milestone=next_milestone,
        )

    async def get_score(self, user_id: int) -> UserScoreRead:
        score = await self.gamification.get_score(user_id)
        if score is None:
            score = new_user_score(user_id)
        return score_to_read(score)
