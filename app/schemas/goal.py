from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from app.models.goal import GoalStatusEnum


class GoalCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    target_value: float = Field(ge=0)
    unit: str = Field(min_length=1, max_length=50)
    target_date: Optional[date] = None
    priority: int = Field(3, ge=1, le=5)

class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    target_value: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = Field(None, min_length=1, max_length=50)
    target_date: Optional[date] = None
    priority: Optional[int] = Field(None, ge=1, le=5)

class GoalProgressUpdate(BaseModel):
    value: float = Field(ge=0, description="Новое текущее значение")

class GoalRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    target_value: float
    current_value: float
    unit: str
    target_date: Optional[date] = None
    status: GoalStatusEnum
    priority: int
    completion_percentage: float
    completed_at: Optional[datetime] = None
    last_progress_update: Optional[datetime] = None

    class Config:
        from_attributes = True

class GoalListResponse(BaseModel):
    items: List[GoalRead]
    total: int
