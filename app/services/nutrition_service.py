"""
Дневник питания: приемы пищи, вода и дневная сводка против нормы.
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock
from app.core.db import transaction
from app.core.exceptions import ForbiddenError, NotFoundError
from app.models.nutrition import MealEntry, WaterIntake
from app.models.user import User
from app.repositories.nutrition_repository import NutritionRepository
from app.schemas.nutrition import (
    DailyNutritionSummary,
    MacroTotals,
    MealEntryCreate,
    MealEntryRead,
    WaterIntakeCreate,
)
from app.services.nutrition_calculator import NutritionCalculator

logger = logging.getLogger(__name__)


def day_bounds(day: date):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class NutritionService:
    def __init__(self, db: AsyncSession, nutrition: NutritionRepository, clock: Clock):
        self.db = db
        self.nutrition = nutrition
        self.clock = clock

    async def add_meal(self, user: User, payload: MealEntryCreate) -> MealEntry:
        async with transaction(self.db):
            data = payload.model_dump(exclude={"eaten_at"})
            meal = MealEntry(user_id=user.id, eaten_at=payload.eaten_at or self.clock.now(), **data)
            self.nutrition.add(meal)
        logger.info(f"Пользователь {user.id} добавил прием пищи {meal.id} ({meal.calories} ккал)")
        return meal

    async def delete_meal(self, user: User, meal_id: int) -> None:
        async with transaction(self.db):
            meal = await self.nutrition.get_meal(meal_id)
            if meal is None:
                raise NotFoundError("Прием пищи не найден")
            if meal.user_id != user.id:
                raise ForbiddenError("Нет доступа к этому приему пищи")
            await self.nutrition.delete(meal)

    async def list_meals(self, user: User, day: date) -> List[MealEntry]:
        start, end = day_bounds(day)
        return await self.nutrition.list_meals(user.id, start, end)

    async def add_water(self, user: User, payload: WaterIntakeCreate) -> WaterIntake:
        async with transaction(self.db):
            intake = WaterIntake(
                user_id=user.id,
                amount_ml=payload.amount_ml,
                logged_at=payload.logged_at or self.clock.now(),
            )
            self.nutrition.add(intake)
        return intake

    async def daily_summary(self, user: User, day: date) -> DailyNutritionSummary:
        start, end = day_bounds(day)
        meals = await self.nutrition.list_meals(user.id, start, end)
        water_ml = await self.nutrition.total_water(user.id, start, end)

        consumed = MacroTotals(
            calories=round(sum(m.calories for m in meals), 1),
            protein=round(sum(m.protein for m in meals), 1),
            carbs=round(sum(m.carbs for m in meals), 1),
            fat=round(sum(m.fat for m in meals), 1),
        )
        target_calories = NutritionCalculator.get_user_calorie_needs(user)
        macros = NutritionCalculator.calculate_macros(target_calories)

        return DailyNutritionSummary(
            date=day,
            consumed=consumed,
            target_calories=target_calories,
            target_macros=MacroTotals(calories=target_calories, **macros),
            remaining_calories=round(target_calories - consumed.calories),
            water_ml=water_ml,
            water_goal_ml=NutritionCalculator.get_water_goal(user),
            meals=[MealEntryRead.model_validate(m) for m in meals],
        )
