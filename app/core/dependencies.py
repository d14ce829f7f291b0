from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, get_clock
from app.core.db import get_db
from app.core.config import settings
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.repositories.exercise_repository import ExerciseRepository
from app.repositories.workout_repository import WorkoutRepository
from app.repositories.goal_repository import GoalRepository
from app.repositories.gamification_repository import GamificationRepository
from app.repositories.nutrition_repository import NutritionRepository
from app.services.statistics_service import StatisticsService
from app.services.achievement_service import AchievementService
from app.services.workout_service import WorkoutService
from app.services.goals_service import GoalsService
from app.services.nutrition_service import NutritionService


security = HTTPBearer()


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    """Фабрика репозитория — инжектируется в эндпоинты через Depends."""
    return UserRepository(db)


def get_exercise_repository(db: AsyncSession = Depends(get_db)) -> ExerciseRepository:
    return ExerciseRepository(db)


def get_workout_repository(db: AsyncSession = Depends(get_db)) -> WorkoutRepository:
    return WorkoutRepository(db)


def get_goal_repository(db: AsyncSession = Depends(get_db)) -> GoalRepository:
    return GoalRepository(db)


def get_gamification_repository(db: AsyncSession = Depends(get_db)) -> GamificationRepository:
    return GamificationRepository(db)


def get_nutrition_repository(db: AsyncSession = Depends(get_db)) -> NutritionRepository:
    return NutritionRepository(db)


def get_statistics_service(
        workouts: WorkoutRepository = Depends(get_workout_repository),
        goals: GoalRepository = Depends(get_goal_repository),
        gamification: GamificationRepository = Depends(get_gamification_repository),
        clock: Clock = Depends(get_clock),
) -> StatisticsService:
    return StatisticsService(workouts, goals, gamification, clock)


def get_achievement_service(
        gamification: GamificationRepository = Depends(get_gamification_repository),
        goals: GoalRepository = Depends(get_goal_repository),
        clock: Clock = Depends(get_clock),
) -> AchievementService:
    return AchievementService(gamification, goals, clock)


def get_workout_service(
        db: AsyncSession = Depends(get_db),
        workouts: WorkoutRepository = Depends(get_workout_repository),
        exercises: ExerciseRepository = Depends(get_exercise_repository),
        statistics: StatisticsService = Depends(get_statistics_service),
        achievements: AchievementService = Depends(get_achievement_service),
        clock: Clock = Depends(get_clock),
) -> WorkoutService:
    # Все репозитории запроса работают в одной сессии get_db
    return WorkoutService(db, workouts, exercises, statistics, achievements, clock)


def get_goals_service(
        db: AsyncSession = Depends(get_db),
        goals: GoalRepository = Depends(get_goal_repository),
        statistics: StatisticsService = Depends(get_statistics_service),
        achievements: AchievementService = Depends(get_achievement_service),
        clock: Clock = Depends(get_clock),
) -> GoalsService:
    return GoalsService(db, goals, statistics, achievements, clock)


def get_nutrition_service(
        db: AsyncSession = Depends(get_db),
        nutrition: NutritionRepository = Depends(get_nutrition_repository),
        clock: Clock = Depends(get_clock),
) -> NutritionService:
    return NutritionService(db, nutrition, clock)


async def get_current_user(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        repo: UserRepository = Depends(get_user_repository),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Невалидный токен доступа",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
        user_id: str = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = await repo.get_by_id(int(user_id))
    if user is None:
        raise credentials_exception

    return user
