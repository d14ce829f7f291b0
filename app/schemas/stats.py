from pydantic import BaseModel
from typing import Optional, List
from datetime import date


class UserScoreRead(BaseModel):
    total_points: int
    level: int
    level_progress: int
    points_to_next_level: int
    current_streak: int
    best_streak: int
    goals_completed: int
    goals_created: int
    weekly_goals_completed: int
    monthly_goals_completed: int
    achievements_unlocked: int
    workouts_completed: int
    total_workout_minutes: int
    total_calories_burned: int


class DailyActivity(BaseModel):
    date: date
    day: str
    sessions: int
    minutes: int
    calories: int


class Milestone(BaseModel):
    type: str  # sessions | streak | calories
    target: int
    current: int
    remaining: int
    progress: float


class UserStatsResponse(BaseModel):
    total_sessions: int
    total_minutes: int
    total_calories: int
    average_duration: float
    average_calories: float
    this_week: int
    this_month: int
    longest_session: int
    most_calories: int
    current_streak: int
    longest_streak: int
    streak_level: str
    consistency_percentage: float
    weekly_data: List[DailyActivity]
    next_milestone: Optional[Milestone] = None
