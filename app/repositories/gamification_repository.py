import logging
from typing import List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from app.models.gamification import UserScore, Achievement, UserAchievement

logger = logging.getLogger(__name__)


class GamificationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_score(self, user_id: int) -> Optional[UserScore]:
        result = await self.db.execute(select(UserScore).where(UserScore.user_id == user_id))
        return result.scalar_one_or_none()

    def add_score(self, score: UserScore) -> None:
        self.db.add(score)

    async def list_active_achievements(self) -> List[Achievement]:
        result = await self.db.execute(
            select(Achievement)
            .where(Achievement.is_active == True)
            .order_by(Achievement.sort_order, Achievement.name)
        )
        return list(result.scalars().all())

    async def list_user_achievements(self, user_id: int) -> List[UserAchievement]:
        result = await self.db.execute(
            select(UserAchievement)
            .where(UserAchievement.user_id == user_id)
            .order_by(UserAchievement.unlocked_at.desc())
        )
        return list(result.scalars().unique().all())

    async def unlocked_achievement_ids(self, user_id: int) -> Set[int]:
        result = await self.db.execute(
            select(UserAchievement.achievement_id).where(UserAchievement.user_id == user_id)
        )
        return set(result.scalars().all())

    async def sum_achievement_points(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.sum(UserAchievement.points_earned), 0))
            .where(UserAchievement.user_id == user_id)
        )
        return int(result.scalar_one())

    async def count_user_achievements(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.count(UserAchievement.id)).where(UserAchievement.user_id == user_id)
        )
        return result.scalar_one()

    async def insert_user_achievement(self, user_achievement: UserAchievement) -> bool:
        """Вставить разблокировку в savepoint.

        Возвращает False, если пара (user, achievement) уже есть:
        повторная разблокировка ничего не меняет.
        """
        try:
            async with self.db.begin_nested():
                self.db.add(user_achievement)
                await self.db.flush()
        except IntegrityError:
            logger.info(
                f"Достижение {user_achievement.achievement_id} уже открыто "
                f"пользователем {user_achievement.user_id}"
            )
            return False
        return True
