from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from app.models.nutrition import MealTypeEnum


class MealEntryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    meal_type: MealTypeEnum
    quantity_grams: float = Field(gt=0)
    calories: float = Field(ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    eaten_at: Optional[datetime] = None


class MealEntryRead(BaseModel):
    id: int
    name: str
    meal_type: MealTypeEnum
    quantity_grams: float
    calories: float
    protein: float
    carbs: float
    fat: float
    eaten_at: datetime

    class Config:
        from_attributes = True


class WaterIntakeCreate(BaseModel):
    amount_ml: int = Field(gt=0, le=5000)
    logged_at: Optional[datetime] = None


class WaterIntakeRead(BaseModel):
    id: int
    amount_ml: int
    logged_at: datetime

    class Config:
        from_attributes = True


class MacroTotals(BaseModel):
    calories: float
    protein: float
    carbs: float
    fat: float


class DailyNutritionSummary(BaseModel):
    date: date
    consumed: MacroTotals
    target_calories: int
    target_macros: MacroTotals
    remaining_calories: int
    water_ml: int
    water_goal_ml: int
    meals: List[MealEntryRead]
