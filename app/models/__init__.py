from app.models.user import User
from app.models.exercise import Exercise
from app.models.workout import Workout, WorkoutExercise
from app.models.goal import Goal, GoalProgressEntry
from app.models.gamification import UserScore, Achievement, UserAchievement
from app.models.nutrition import MealEntry, WaterIntake

__all__ = [
    "User",
    "Exercise",
    "Workout", "WorkoutExercise",
    "Goal", "GoalProgressEntry",
    "UserScore", "Achievement", "UserAchievement",
    "MealEntry", "WaterIntake",
]
