from pydantic import BaseModel
from typing import Optional, List

from app.models.exercise import DifficultyEnum


class ExerciseRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    body_part: str
    difficulty: DifficultyEnum
    category: Optional[str] = None
    calorie_rate: Optional[float] = None
    equipment: Optional[str] = None
    muscle_groups: Optional[List[str]] = None
    instructions: Optional[List[str]] = None
    tips: Optional[List[str]] = None

    class Config:
        from_attributes = True
