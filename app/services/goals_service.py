"""
Цели пользователя.

Любая смена статуса или запись прогресса пересчитывает UserScore и
проверяет достижения в той же транзакции.
"""
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock
from app.core.db import transaction
from app.core.exceptions import ForbiddenError, NotFoundError
from app.models.goal import Goal, GoalProgressEntry, GoalStatusEnum
from app.models.user import User
from app.repositories.goal_repository import GoalRepository
from app.schemas.goal import GoalCreate, GoalUpdate
from app.services.achievement_service import AchievementService
from app.services.statistics_service import StatisticsService
from app.services.stats_cache import StatsCache, stats_cache

logger = logging.getLogger(__name__)


def completion_percentage(current: float, target: float) -> float:
    if not target:
        return 0.0
    return round(min(100.0, current / target * 100), 2)


class GoalsService:
    def __init__(
        self,
        db: AsyncSession,
        goals: GoalRepository,
        statistics: StatisticsService,
        achievements: AchievementService,
        clock: Clock,
        cache: StatsCache = stats_cache,
    ):
        self.db = db
        self.goals = goals
        self.statistics = statistics
        self.achievements = achievements
        self.clock = clock
        self.cache = cache

    async def _get_owned(self, user: User, goal_id: int) -> Goal:
        goal = await self.goals.get_by_id(goal_id)
        if goal is None:
            raise NotFoundError("Цель не найдена")
        if goal.user_id != user.id:
            raise ForbiddenError("Нет доступа к этой цели")
        return goal

    async def _refresh_progress(self, user: User) -> None:
        await self.db.flush()
        score = await self.statistics.recompute_user_score(user.id)
        await self.achievements.evaluate(user.id, score)

    def _mark_completed(self, goal: Goal) -> None:
        goal.status = GoalStatusEnum.completed
        goal.current_value = goal.target_value
        goal.completion_percentage = 100.0
        goal.completed_at = self.clock.now()

    async def list_goals(
        self,
        user: User,
        status: Optional[GoalStatusEnum] = None,
        category: Optional[str] = None,
    ) -> List[Goal]:
        return await self.goals.list_for_user(user.id, status=status, category=category)

    async def get_goal(self, user: User, goal_id: int) -> Goal:
        return await self._get_owned(user, goal_id)

    async def create_goal(self, user: User, payload: GoalCreate) -> Goal:
        async with transaction(self.db):
            goal = Goal(
                user_id=user.id,
                **payload.model_dump(),
                current_value=0,
                status=GoalStatusEnum.active,
                completion_percentage=0,
                created_at=self.clock.now(),
            )
            self.goals.add(goal)
            await self._refresh_progress(user)

        await self.cache.invalidate(user.id)
        logger.info(f"Пользователь {user.id} создал цель {goal.id}")
        return goal

    async def update_goal(self, user: User, goal_id: int, payload: GoalUpdate) -> Goal:
        async with transaction(self.db):
            goal = await self._get_owned(user, goal_id)
            for field, value in payload.model_dump(exclude_unset=True).items():
                if value is not None or field in ("description", "category", "target_date"):
                    setattr(goal, field, value)
            goal.completion_percentage = completion_percentage(goal.current_value, goal.target_value)
        return goal

    async def delete_goal(self, user: User, goal_id: int) -> None:
        async with transaction(self.db):
            goal = await self._get_owned(user, goal_id)
            await self.goals.delete(goal)
            await self._refresh_progress(user)

        await self.cache.invalidate(user.id)
        logger.info(f"Пользователь {user.id} удалил цель {goal_id}")

    async def update_progress(self, user: User, goal_id: int, value: float) -> Goal:
        async with transaction(self.db):
            goal = await self._get_owned(user, goal_id)
            now = self.clock.now()
            goal.current_value = value
            goal.last_progress_update = now
            goal.completion_percentage = completion_percentage(value, goal.target_value)
            self.goals.add_progress_entry(
                GoalProgressEntry(goal_id=goal.id, user_id=user.id, value=value, logged_at=now)
            )

            if goal.status == GoalStatusEnum.not_started:
                goal.status = GoalStatusEnum.active
            if goal.target_value and value >= goal.target_value and goal.status != GoalStatusEnum.completed:
                self._mark_completed(goal)
                goal.current_value = value
                logger.info(f"Цель {goal.id} достигнута")

            await self._refresh_progress(user)

        await self.cache.invalidate(user.id)
        return goal

    async def complete_goal(self, user: User, goal_id: int) -> Goal:
        async with transaction(self.db):
            goal = await self._get_owned(user, goal_id)
            if goal.status != GoalStatusEnum.completed:
                self._mark_completed(goal)
                await self._refresh_progress(user)

        await self.cache.invalidate(user.id)
        logger.info(f"Цель {goal.id} отмечена выполненной")
        return goal

    async def _set_status(self, user: User, goal_id: int, status: GoalStatusEnum) -> Goal:
        async with transaction(self.db):
            goal = await self._get_owned(user, goal_id)
            goal.status = status
            if status != GoalStatusEnum.completed:
                goal.completed_at = None
            await self._refresh_progress(user)

        await self.cache.invalidate(user.id)
        return goal

    async def activate_goal(self, user: User, goal_id: int) -> Goal:
        return await self._set_status(user, goal_id, GoalStatusEnum.active)

    async def pause_goal(self, user: User, goal_id: int) -> Goal:
        return await self._set_status(user, goal_id, GoalStatusEnum.paused)

    async def reset_goal(self, user: User, goal_id: int) -> Goal:
        async with transaction(self.db):
            goal = await self._get_owned(user, goal_id)
            goal.current_value = 0
            goal.completion_percentage = 0
            goal.status = GoalStatusEnum.not_started
            goal.completed_at = None
            goal.last_progress_update = None
            await self._refresh_progress(user)

        await self.cache.invalidate(user.id)
        return goal
