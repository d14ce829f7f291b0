"""
Требования достижений: размеченное объединение (поле kind).

В БД хранится JSON-список таких объектов. Старый формат-словарь
{"goals_completed": 5} тоже принимается и приводится к списку
требований вида "statistic >= threshold".
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from app.models.gamification import AchievementCategoryEnum, RarityEnum


class StatisticName(str, Enum):
    total_points = "total_points"
    level = "level"
    current_streak = "current_streak"
    best_streak = "best_streak"
    goals_completed = "goals_completed"
    goals_created = "goals_created"
    weekly_goals_completed = "weekly_goals_completed"
    monthly_goals_completed = "monthly_goals_completed"
    achievements_unlocked = "achievements_unlocked"
    workouts_completed = "workouts_completed"
    total_workout_minutes = "total_workout_minutes"
    total_calories_burned = "total_calories_burned"


class ComparisonOperator(str, Enum):
    gte = ">="
    gt = ">"
    eq = "=="
    lte = "<="
    lt = "<"

    def compare(self, current: float, threshold: float) -> bool:
        if self is ComparisonOperator.gte:
            return current >= threshold
        if self is ComparisonOperator.gt:
            return current > threshold
        if self is ComparisonOperator.eq:
            return current == threshold
        if self is ComparisonOperator.lte:
            return current <= threshold
        return current < threshold


class StatisticRequirement(BaseModel):
    kind: Literal["statistic"] = "statistic"
    statistic: StatisticName
    operator: ComparisonOperator = ComparisonOperator.gte
    threshold: float


class GoalsInCategoryRequirement(BaseModel):
    kind: Literal["goals_in_category"] = "goals_in_category"
    category: str
    count: int = Field(ge=1)


AchievementRequirement = Annotated[
    Union[StatisticRequirement, GoalsInCategoryRequirement],
    Field(discriminator="kind"),
]

_requirements_adapter = TypeAdapter(List[AchievementRequirement])


def parse_requirements(raw: Any) -> List[Union[StatisticRequirement, GoalsInCategoryRequirement]]:
    """Разобрать JSON требований. Бросает ValueError на неизвестном формате."""
    if not raw:
        return []
    if isinstance(raw, dict):
        items: List[Dict[str, Any]] = []
        for name, value in raw.items():
            if name == "goals_in_category":
                items.append({"kind": "goals_in_category", **value})
            else:
                items.append({"kind": "statistic", "statistic": name, "threshold": value})
        raw = items
    return _requirements_adapter.validate_python(raw)


class RequirementProgress(BaseModel):
    label: str
    current: float
    target: float
    met: bool
    percentage: float


class AchievementRead(BaseModel):
    id: int
    key: str
    name: str
    description: str
    icon: Optional[str] = None
    points: int
    category: AchievementCategoryEnum
    rarity: RarityEnum

    class Config:
        from_attributes = True


class AchievementProgressRead(AchievementRead):
    unlocked: bool
    unlocked_at: Optional[datetime] = None
    percentage: float
    requirements: List[RequirementProgress] = []


class UserAchievementRead(BaseModel):
    id: int
    achievement: AchievementRead
    points_earned: int
    unlocked_at: datetime

    class Config:
        from_attributes = True


class CheckAchievementsResponse(BaseModel):
    newly_unlocked: List[UserAchievementRead]
    total_points: int
    level: int
