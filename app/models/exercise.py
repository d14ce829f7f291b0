import enum
from sqlalchemy import Column, Integer, String, Float, Boolean, Enum, JSON, Text
from app.core.base import Base

class DifficultyEnum(str, enum.Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"

class Exercise(Base):
    """Справочник упражнений. Меняется только сидированием."""
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    body_part = Column(String, nullable=False, index=True)  # chest, back, legs, arms, shoulders, abs, cardio
    difficulty = Column(Enum(DifficultyEnum), default=DifficultyEnum.beginner, nullable=False)
    category = Column(String, nullable=True)  # strength, cardio, flexibility, mobility, hiit
    calorie_rate = Column(Float, nullable=True)  # ккал за минуту активной работы
    equipment = Column(String, nullable=True)
    muscle_groups = Column(JSON, nullable=True)
    instructions = Column(JSON, nullable=True)
    tips = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
