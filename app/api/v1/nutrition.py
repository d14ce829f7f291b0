from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.clock import Clock, get_clock
from app.core.dependencies import get_current_user, get_nutrition_service
from app.models.user import User
from app.schemas.nutrition import (
    DailyNutritionSummary,
    MealEntryCreate,
    MealEntryRead,
    WaterIntakeCreate,
    WaterIntakeRead,
)
from app.services.nutrition_service import NutritionService

router = APIRouter(tags=["nutrition"])


@router.post("/meals", response_model=MealEntryRead, status_code=status.HTTP_201_CREATED)
async def add_meal(
    payload: MealEntryCreate,
    current_user: User = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
):
    return await service.add_meal(current_user, payload)


@router.get("/meals", response_model=List[MealEntryRead])
async def list_meals(
    day: Optional[date] = Query(None, description="По умолчанию сегодня"),
    current_user: User = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
    clock: Clock = Depends(get_clock),
):
    return await service.list_meals(current_user, day or clock.today())


@router.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    meal_id: int,
    current_user: User = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
):
    await service.delete_meal(current_user, meal_id)


@router.post("/water", response_model=WaterIntakeRead, status_code=status.HTTP_201_CREATED)
async def add_water(
    payload: WaterIntakeCreate,
    current_user: User = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
):
    return await service.add_water(current_user, payload)


@router.get("/summary", response_model=DailyNutritionSummary)
async def daily_summary(
    day: Optional[date] = Query(None, description="По умолчанию сегодня"),
    current_user: User = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
    clock: Clock = Depends(get_clock),
):
    """Калории и БЖУ за день против суточной нормы, вода"""
    return await service.daily_summary(current_user, day or clock.today())
