import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, ForeignKey, Enum, Date, DateTime, Text
from sqlalchemy.orm import relationship
from app.core.base import Base

class GoalStatusEnum(str, enum.Enum):
    not_started = "not-started"
    active = "active"
    completed = "completed"
    paused = "paused"

class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)  # weight, cardio, strength, flexibility, nutrition
    target_value = Column(Float, nullable=False)
    current_value = Column(Float, default=0, nullable=False)
    unit = Column(String, nullable=False)  # kg, km, reps, days
    target_date = Column(Date, nullable=True)
    status = Column(Enum(GoalStatusEnum), default=GoalStatusEnum.not_started, nullable=False)
    priority = Column(Integer, default=3, nullable=False)  # 1 - наивысший
    completion_percentage = Column(Float, default=0, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    last_progress_update = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="goals")
    progress_entries = relationship("GoalProgressEntry", back_populates="goal", cascade="all, delete-orphan")

class GoalProgressEntry(Base):
    __tablename__ = "goal_progress_entries"

    id = Column(Integer, primary_key=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    value = Column(Float, nullable=False)
    logged_at = Column(DateTime, nullable=False)

    goal = relationship("Goal", back_populates="progress_entries")
