import enum
from sqlalchemy import Column, Integer, String, Float, Enum, DateTime
from sqlalchemy.orm import relationship
from app.core.base import Base
from datetime import datetime

class RoleEnum(str, enum.Enum):
    user = "user"
    admin = "admin"

class GenderEnum(str, enum.Enum):
    male = "male"
    female = "female"
    not_specified = "not_specified"

class ActivityLevelEnum(str, enum.Enum):
    sedentary = "sedentary"
    lightly_active = "lightly_active"
    moderately_active = "moderately_active"
    very_active = "very_active"
    extremely_active = "extremely_active"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False)
    nickname = Column(String, nullable=False)
    password = Column(String, nullable=False)
    role = Column(Enum(RoleEnum), default=RoleEnum.user, nullable=False)
    gender = Column(Enum(GenderEnum), nullable=True)
    age = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    weight = Column(Float, nullable=True)
    activity_level = Column(Enum(ActivityLevelEnum), nullable=True)
    refresh_token = Column(String, nullable=True)
    refresh_token_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    workouts = relationship("Workout", back_populates="user", cascade="all, delete")
    goals = relationship("Goal", back_populates="user", cascade="all, delete")
    score = relationship("UserScore", back_populates="user", uselist=False, cascade="all, delete")
    achievements = relationship("UserAchievement", back_populates="user", cascade="all, delete")
    meals = relationship("MealEntry", back_populates="user", cascade="all, delete")
    water_intakes = relationship("WaterIntake", back_populates="user", cascade="all, delete")
