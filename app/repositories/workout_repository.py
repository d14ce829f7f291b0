from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from sqlalchemy.orm import selectinload

from app.models.workout import Workout, WorkoutExercise, WorkoutStatusEnum


class WorkoutRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_with_exercises(self, workout_id: int) -> Optional[Workout]:
        result = await self.db.execute(
            select(Workout)
            .options(selectinload(Workout.exercises))
            .where(Workout.id == workout_id)
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, workout_id: int) -> Optional[Workout]:
        """Загрузить тренировку с блокировкой строки до конца транзакции."""
        result = await self.db.execute(
            select(Workout)
            .options(selectinload(Workout.exercises))
            .where(Workout.id == workout_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def has_in_progress(self, user_id: int) -> bool:
        result = await self.db.execute(
            select(func.count(Workout.id)).where(
                Workout.user_id == user_id,
                Workout.is_template == False,
                Workout.status == WorkoutStatusEnum.in_progress,
            )
        )
        return result.scalar_one() > 0

    async def list_templates(self, user_id: int, include_public: bool = True) -> List[Workout]:
        visibility = Workout.user_id == user_id
        if include_public:
            visibility = or_(visibility, Workout.is_public == True)
        result = await self.db.execute(
            select(Workout)
            .options(selectinload(Workout.exercises))
            .where(Workout.is_template == True, visibility)
            .order_by(Workout.name)
        )
        return list(result.scalars().all())

    async def list_sessions(
        self,
        user_id: int,
        status: Optional[WorkoutStatusEnum] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Workout], int]:
        query = select(Workout).where(Workout.user_id == user_id, Workout.is_template == False)
        if status:
            query = query.where(Workout.status == status)

        count_result = await self.db.execute(select(func.count()).select_from(query.subquery()))
        total = count_result.scalar_one()

        result = await self.db.execute(
            query.options(selectinload(Workout.exercises))
            .order_by(Workout.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def list_completed_sessions(self, user_id: int) -> List[Workout]:
        result = await self.db.execute(
            select(Workout)
            .where(
                Workout.user_id == user_id,
                Workout.is_template == False,
                Workout.status == WorkoutStatusEnum.completed,
            )
            .order_by(Workout.completed_at.asc())
        )
        return list(result.scalars().all())

    async def best_one_rep_max(
        self,
        user_id: int,
        exercise_id: int,
        exclude_workout_id: Optional[int] = None,
    ) -> Optional[float]:
        """Лучший 1ПМ пользователя в упражнении по завершенным сессиям."""
        query = (
            select(func.max(WorkoutExercise.one_rep_max))
            .join(Workout, Workout.id == WorkoutExercise.workout_id)
            .where(
                Workout.user_id == user_id,
                Workout.status == WorkoutStatusEnum.completed,
                WorkoutExercise.exercise_id == exercise_id,
            )
        )
        if exclude_workout_id is not None:
            query = query.where(Workout.id != exclude_workout_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    def add(self, workout: Workout) -> None:
        self.db.add(workout)

    async def delete(self, workout: Workout) -> None:
        await self.db.delete(workout)
