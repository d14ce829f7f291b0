import enum
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Boolean, ForeignKey, Enum, JSON, Date, DateTime, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.core.base import Base

class AchievementCategoryEnum(str, enum.Enum):
    goals = "goals"
    streak = "streak"
    progress = "progress"
    milestone = "milestone"
    special = "special"

class RarityEnum(str, enum.Enum):
    common = "common"
    rare = "rare"
    epic = "epic"
    legendary = "legendary"

class UserScore(Base):
    """Сводка геймификации. Пишется только StatisticsService и AchievementService."""
    __tablename__ = "user_scores"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    total_points = Column(Integer, default=0, nullable=False)
    level = Column(Integer, default=1, nullable=False)
    level_progress = Column(Integer, default=0, nullable=False)

    current_streak = Column(Integer, default=0, nullable=False)
    best_streak = Column(Integer, default=0, nullable=False)
    streak_last_updated = Column(Date, nullable=True)

    goals_completed = Column(Integer, default=0, nullable=False)
    goals_created = Column(Integer, default=0, nullable=False)
    weekly_goals_completed = Column(Integer, default=0, nullable=False)
    monthly_goals_completed = Column(Integer, default=0, nullable=False)
    achievements_unlocked = Column(Integer, default=0, nullable=False)

    workouts_completed = Column(Integer, default=0, nullable=False)
    total_workout_minutes = Column(Integer, default=0, nullable=False)
    total_calories_burned = Column(Integer, default=0, nullable=False)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="score")

class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String, nullable=True)
    points = Column(Integer, default=10, nullable=False)
    category = Column(Enum(AchievementCategoryEnum), default=AchievementCategoryEnum.goals, nullable=False)
    rarity = Column(Enum(RarityEnum), default=RarityEnum.common, nullable=False)
    requirements = Column(JSON, nullable=True)  # список требований, см. app.schemas.achievement
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    user_achievements = relationship("UserAchievement", back_populates="achievement", cascade="all, delete")

class UserAchievement(Base):
    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    achievement_id = Column(Integer, ForeignKey("achievements.id", ondelete="CASCADE"), nullable=False)
    points_earned = Column(Integer, default=0, nullable=False)
    progress_data = Column(JSON, nullable=True)
    unlocked_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="achievements")
    achievement = relationship("Achievement", back_populates="user_achievements", lazy="joined")
