from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.models.exercise import Exercise


class ExerciseRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, exercise_id: int) -> Optional[Exercise]:
        result = await self.db.execute(select(Exercise).where(Exercise.id == exercise_id))
        return result.scalar_one_or_none()

    async def get_many(self, exercise_ids: Iterable[int]) -> Dict[int, Exercise]:
        ids = set(exercise_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(Exercise).where(Exercise.id.in_(ids)))
        return {exercise.id: exercise for exercise in result.scalars().all()}

    async def list(
        self,
        body_part: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Exercise]:
        query = select(Exercise).where(Exercise.is_active == True)
        if body_part:
            query = query.where(Exercise.body_part == body_part)
        if category:
            query = query.where(Exercise.category == category)
        if search:
            query = query.where(Exercise.name.ilike(f"%{search}%"))
        result = await self.db.execute(query.order_by(Exercise.name))
        return list(result.scalars().all())
