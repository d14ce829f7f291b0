from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.models.nutrition import MealEntry, WaterIntake


class NutritionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_meal(self, meal_id: int) -> Optional[MealEntry]:
        result = await self.db.execute(select(MealEntry).where(MealEntry.id == meal_id))
        return result.scalar_one_or_none()

    async def list_meals(self, user_id: int, start: datetime, end: datetime) -> List[MealEntry]:
        result = await self.db.execute(
            select(MealEntry)
            .where(
                MealEntry.user_id == user_id,
                MealEntry.eaten_at >= start,
                MealEntry.eaten_at < end,
            )
            .order_by(MealEntry.eaten_at.asc())
        )
        return list(result.scalars().all())

    async def total_water(self, user_id: int, start: datetime, end: datetime) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.sum(WaterIntake.amount_ml), 0)).where(
                WaterIntake.user_id == user_id,
                WaterIntake.logged_at >= start,
                WaterIntake.logged_at < end,
            )
        )
        return int(result.scalar_one())

    def add(self, entry) -> None:
        self.db.add(entry)

    async def delete(self, entry) -> None:
        await self.db.delete(entry)
