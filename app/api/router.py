from fastapi import APIRouter
from app.api.v1.auth import router as auth_router
from app.api.v1.workouts import router as workouts_router
from app.api.v1.exercises import router as exercises_router
from app.api.v1.goals import router as goals_router
from app.api.v1.achievements import router as achievements_router
from app.api.v1.stats import router as stats_router
from app.api.v1.nutrition import router as nutrition_router
from app.api.v1.admin import router as admin_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(workouts_router, prefix="/workouts", tags=["workouts"])
api_router.include_router(exercises_router, prefix="/exercises", tags=["exercises"])
api_router.include_router(goals_router, prefix="/goals", tags=["goals"])
api_router.include_router(achievements_router, prefix="/achievements", tags=["achievements"])
api_router.include_router(stats_router, prefix="/stats", tags=["stats"])
api_router.include_router(nutrition_router, prefix="/nutrition", tags=["nutrition"])
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
