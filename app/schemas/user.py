from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from app.models.user import RoleEnum, GenderEnum, ActivityLevelEnum


class UserRead(BaseModel):
    id: int
    email: EmailStr
    nickname: str
    role: RoleEnum
    gender: Optional[GenderEnum] = None
    age: Optional[int] = None
    height: Optional[int] = None
    weight: Optional[float] = None
    activity_level: Optional[ActivityLevelEnum] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserProfileUpdate(BaseModel):
    nickname: Optional[str] = Field(None, min_length=2, max_length=50)
    gender: Optional[GenderEnum] = None
    age: Optional[int] = Field(None, ge=10, le=120)
    height: Optional[int] = Field(None, ge=100, le=250)
    weight: Optional[float] = Field(None, ge=30, le=300)
    activity_level: Optional[ActivityLevelEnum] = None
