from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.models.goal import Goal, GoalProgressEntry, GoalStatusEnum


class GoalRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, goal_id: int) -> Optional[Goal]:
        result = await self.db.execute(select(Goal).where(Goal.id == goal_id))
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: int,
        status: Optional[GoalStatusEnum] = None,
        category: Optional[str] = None,
    ) -> List[Goal]:
        query = select(Goal).where(Goal.user_id == user_id)
        if status:
            query = query.where(Goal.status == status)
        if category:
            query = query.where(Goal.category == category)
        result = await self.db.execute(query.order_by(Goal.priority.asc(), Goal.created_at.desc()))
        return list(result.scalars().all())

    async def count_completed_in_category(self, user_id: int, category: str) -> int:
        result = await self.db.execute(
            select(func.count(Goal.id)).where(
                Goal.user_id == user_id,
                Goal.status == GoalStatusEnum.completed,
                Goal.category == category,
            )
        )
        return result.scalar_one()

    async def progress_timestamps(self, user_id: int) -> List[datetime]:
        result = await self.db.execute(
            select(GoalProgressEntry.logged_at).where(GoalProgressEntry.user_id == user_id)
        )
        return list(result.scalars().all())

    def add(self, goal: Goal) -> None:
        self.db.add(goal)

    def add_progress_entry(self, entry: GoalProgressEntry) -> None:
        self.db.add(entry)

    async def delete(self, goal: Goal) -> None:
        await self.db.delete(goal)
