import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Boolean, Float, Enum, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.core.base import Base
from app.models.exercise import DifficultyEnum

class WorkoutStatusEnum(str, enum.Enum):
    planned = "planned"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"

class IntensityEnum(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"

class DifficultyFeltEnum(str, enum.Enum):
    too_easy = "too_easy"
    just_right = "just_right"
    too_hard = "too_hard"

class Workout(Base):
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    is_template = Column(Boolean, default=False, nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)
    template_id = Column(Integer, ForeignKey("workouts.id", ondelete="SET NULL"), nullable=True, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    difficulty = Column(Enum(DifficultyEnum), default=DifficultyEnum.beginner, nullable=False)
    type = Column(String, nullable=True)   # strength, cardio, hiit, flexibility, mobility
    focus = Column(String, nullable=True)  # full_body, upper_body, lower_body
    intensity = Column(Enum(IntensityEnum), default=IntensityEnum.medium, nullable=False)

    status = Column(Enum(WorkoutStatusEnum), default=WorkoutStatusEnum.planned, nullable=False, index=True)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True, index=True)

    estimated_duration = Column(Integer, nullable=True)  # минуты
    estimated_calories = Column(Integer, nullable=True)
    actual_duration = Column(Integer, nullable=True)
    actual_calories = Column(Integer, nullable=True)
    completion_percentage = Column(Float, default=0, nullable=False)
    difficulty_felt = Column(Enum(DifficultyFeltEnum), nullable=True)
    effort_level = Column(Integer, nullable=True)  # 1-10
    notes = Column(Text, nullable=True)

    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Конкурентное завершение одной сессии: проигравший получает StaleDataError
    __mapper_args__ = {"version_id_col": version}

    user = relationship("User", back_populates="workouts")
    template = relationship("Workout", remote_side=[id], foreign_keys=[template_id])
    exercises = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order_index",
    )

class WorkoutExercise(Base):
    __tablename__ = "workout_exercises"
    __table_args__ = (
        UniqueConstraint("workout_id", "exercise_id", "order_index", name="uq_workout_exercise_order"),
        UniqueConstraint("workout_id", "order_index", name="uq_workout_order"),
    )

    id = Column(Integer, primary_key=True)
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True)
    order_index = Column(Integer, nullable=False)

    # План
    planned_sets = Column(Integer, nullable=True)
    planned_reps = Column(Integer, nullable=True)
    planned_weight = Column(Float, nullable=True)    # кг
    planned_duration = Column(Integer, nullable=True)  # секунды
    planned_rest = Column(Integer, nullable=True)      # секунды между подходами

    # Факт
    actual_sets = Column(Integer, nullable=True)
    actual_reps = Column(Integer, nullable=True)
    actual_weight = Column(Float, nullable=True)
    actual_duration = Column(Integer, nullable=True)
    actual_rest = Column(Integer, nullable=True)

    is_completed = Column(Boolean, default=False, nullable=False)
    is_personal_record = Column(Boolean, default=False, nullable=False)
    one_rep_max = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)

    workout = relationship("Workout", back_populates="exercises")
    exercise = relationship("Exercise", lazy="joined")
