"""
Загрузка справочников: упражнения, достижения, публичные шаблоны.

Повторный запуск безопасен: существующие записи (по name/key) пропускаются.
"""
import asyncio
import logging
import secrets
from datetime import datetime
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import AsyncSessionLocal
from app.core.initial_catalog import INITIAL_ACHIEVEMENTS, INITIAL_EXERCISES, INITIAL_TEMPLATES
from app.models.exercise import Exercise, DifficultyEnum
from app.models.gamification import Achievement, AchievementCategoryEnum, RarityEnum
from app.models.user import User, RoleEnum
from app.models.workout import Workout, WorkoutExercise, WorkoutStatusEnum, IntensityEnum
from app.schemas.workout import EstimateEntry
from app.services.auth_service import auth_service
from app.services.workout_estimator import WorkoutEstimator

logger = logging.getLogger(__name__)


async def get_or_create_system_user(db: AsyncSession) -> User:
    """Владелец публичных шаблонов каталога (SYSTEM_USER_EMAIL)."""
    result = await db.execute(select(User).where(User.email == settings.SYSTEM_USER_EMAIL))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(
        email=settings.SYSTEM_USER_EMAIL,
        nickname=settings.SYSTEM_USER_NICKNAME,
        # Под системным пользователем не логинятся: пароль никому не известен
        password=auth_service.hash_password(secrets.token_urlsafe(32)),
        role=RoleEnum.admin,
        created_at=datetime.utcnow(),
    )
    db.add(user)
    await db.flush()
    logger.info(f"Создан системный пользователь {user.email} (ID: {user.id})")
    return user


async def _seed_exercises(db: AsyncSession) -> Dict[str, Exercise]:
    result = await db.execute(select(Exercise))
    existing = {exercise.name: exercise for exercise in result.scalars().all()}

    for data in INITIAL_EXERCISES:
        if data["name"] in existing:
            continue
        exercise = Exercise(
            name=data["name"],
            description=data.get("description"),
            body_part=data["body_part"],
            difficulty=DifficultyEnum(data["difficulty"]),
            category=data.get("category"),
            calorie_rate=data.get("calorie_rate"),
            equipment=data.get("equipment"),
            muscle_groups=data.get("muscle_groups", []),
            instructions=data.get("instructions", []),
            tips=data.get("tips", []),
            is_active=True,
        )
        db.add(exercise)
        existing[exercise.name] = exercise

    await db.flush()
    return existing


async def _seed_achievements(db: AsyncSession) -> int:
    result = await db.execute(select(Achievement.key))
    existing_keys = set(result.scalars().all())

    created = 0
    for data in INITIAL_ACHIEVEMENTS:
        if data["key"] in existing_keys:
            continue
        db.add(Achievement(
            key=data["key"],
            name=data["name"],
            description=data["description"],
            icon=data.get("icon"),
            points=data["points"],
            category=AchievementCategoryEnum(data["category"]),
            rarity=RarityEnum(data["rarity"]),
            requirements=data["requirements"],
            is_active=True,
            sort_order=data.get("sort_order", 0),
        ))
        created += 1
    return created


async def _seed_templates(db: AsyncSession, system_user_id: int, exercises: Dict[str, Exercise]) -> int:
    result = await db.execute(
        select(Workout.name).where(Workout.user_id == system_user_id, Workout.is_template == True)
    )
    existing_names = set(result.scalars().all())

    created = 0
    for data in INITIAL_TEMPLATES:
        if data["name"] in existing_names:
            continue

        rows = []
        entries = []
        for order_index, item in enumerate(data["exercises"]):
            exercise = exercises[item["exercise"]]
            rows.append(WorkoutExercise(
                exercise_id=exercise.id,
                order_index=order_index,
                planned_sets=item["sets"],
                planned_reps=item.get("reps"),
                planned_weight=item.get("weight"),
                planned_duration=item.get("duration_seconds"),
                planned_rest=item.get("rest_seconds", 0),
                is_completed=False,
                is_personal_record=False,
            ))
            entries.append(EstimateEntry(
                sets=item["sets"],
                reps=item.get("reps"),
                duration_seconds=item.get("duration_seconds"),
                rest_seconds=item.get("rest_seconds", 0),
                calorie_rate=exercise.calorie_rate or settings.DEFAULT_CALORIE_RATE,
            ))

        estimate = WorkoutEstimator.estimate(entries)
        db.add(Workout(
            user_id=system_user_id,
            is_template=True,
            is_public=True,
            name=data["name"],
            description=data.get("description"),
            difficulty=DifficultyEnum(data["difficulty"]),
            type=data.get("type"),
            focus=data.get("focus"),
            intensity=IntensityEnum(data["intensity"]),
            status=WorkoutStatusEnum.planned,
            estimated_duration=estimate.estimated_duration,
            estimated_calories=estimate.estimated_calories,
            completion_percentage=0,
            exercises=rows,
        ))
        created += 1
    return created


async def seed_catalog(db: AsyncSession, system_user_id: int) -> Dict[str, int]:
    """Загрузить справочники. Шаблоны принадлежат system_user_id."""
    before = await db.execute(select(Exercise.id))
    exercises_before = len(before.scalars().all())

    exercises = await _seed_exercises(db)
    achievements_created = await _seed_achievements(db)
    templates_created = await _seed_templates(db, system_user_id, exercises)
    await db.commit()

    stats = {
        "exercises_created": len(exercises) - exercises_before,
        "achievements_created": achievements_created,
        "templates_created": templates_created,
    }
    logger.info(f"Каталог загружен: {stats}")
    return stats


async def main():
    async with AsyncSessionLocal() as db:
        system_user = await get_or_create_system_user(db)
        await seed_catalog(db, system_user.id)


if __name__ == "__main__":
    asyncio.run(main())
