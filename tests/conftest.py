"""
Общие фикстуры для всех тестов FitnessPro backend.

Стратегия:
- Тестовое FastAPI-приложение создаётся без startup-событий (нет подключения к БД/Redis).
- UserRepository заменяется на AsyncMock (mock_repo) во всех тестах auth.
- Сервисы тренировок/целей/статистики заменяются на AsyncMock(spec=...) через dependency_overrides.
- Для admin-эндпоинтов с прямым доступом к БД get_db заменяется на mock_db,
  а get_current_user — на лямбду с нужным пользователем.
- Время фиксировано через FixedClock, чтобы серии и даты были детерминированы.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from datetime import datetime, timedelta
from typing import AsyncGenerator

from app.api.router import api_router
from app.core.clock import Clock, get_clock
from app.core.exceptions import register_exception_handlers
from app.models.user import User, RoleEnum
from app.services.auth_service import auth_service
from app.services.workout_service import WorkoutService
from app.services.goals_service import GoalsService
from app.services.statistics_service import StatisticsService
from app.services.achievement_service import AchievementService
from app.services.nutrition_service import NutritionService
from app.repositories.user_repository import UserRepository
from app.repositories.exercise_repository import ExerciseRepository
from app.core.dependencies import (
    get_current_user,
    get_user_repository,
    get_exercise_repository,
    get_workout_service,
    get_goals_service,
    get_statistics_service,
    get_achievement_service,
    get_nutrition_service,
)
from app.core.db import get_db


FIXED_NOW = datetime(2025, 3, 12, 10, 30)


class FixedClock(Clock):
    """Часы с ручным управлением для детерминированных тестов."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


# ---------------------------------------------------------------------------
# Вспомогательные функции
# ---------------------------------------------------------------------------

def create_test_app() -> FastAPI:
    """Тестовое FastAPI-приложение без startup-событий."""
    test_app = FastAPI(title="FitnessPro Test App")
    register_exception_handlers(test_app)
    test_app.include_router(api_router, prefix="/api/v1")
    return test_app


def make_auth_headers(user: User) -> dict:
    """Создать заголовки авторизации с валидным JWT для указанного пользователя."""
    access_token = auth_service.create_access_token(
        data={"sub": str(user.id), "role": user.role.value}
    )
    return {"Authorization": f"Bearer {access_token}"}


# ---------------------------------------------------------------------------
# Фикстуры пользователей
# ---------------------------------------------------------------------------

@pytest.fixture
def user_fixture() -> User:
    """Обычный пользователь с ролью 'user'."""
    return User(
        id=1,
        email="test@example.com",
        nickname="tester",
        password=auth_service.hash_password("password123"),
        role=RoleEnum.user,
        created_at=datetime.utcnow(),
    )


@pytest.fixture
def admin_fixture() -> User:
    """Администратор с ролью 'admin'."""
    return User(
        id=2,
        email="admin@example.com",
        nickname="admin",
        password=auth_service.hash_password("admin123"),
        role=RoleEnum.admin,
        created_at=datetime.utcnow(),
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


# ---------------------------------------------------------------------------
# Фикстуры для зависимостей
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_repo() -> AsyncMock:
    """Мокированный UserRepository для auth-эндпоинтов."""
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def mock_exercise_repo() -> AsyncMock:
    return AsyncMock(spec=ExerciseRepository)


@pytest.fixture
def mock_db() -> MagicMock:
    """
    Мокированная сессия БД для эндпоинтов, использующих get_db напрямую.
    execute() возвращает MagicMock с предустановленными методами.
    """
    session = AsyncMock()
    default_result = MagicMock()
    default_result.scalar_one_or_none.return_value = None
    default_result.scalar_one.return_value = 0
    default_result.scalars.return_value.all.return_value = []
    session.execute.return_value = default_result
    return session


@pytest.fixture
def mock_workout_service() -> AsyncMock:
    return AsyncMock(spec=WorkoutService)


@pytest.fixture
def mock_goals_service() -> AsyncMock:
    return AsyncMock(spec=GoalsService)


@pytest.fixture
def mock_statistics_service() -> AsyncMock:
    return AsyncMock(spec=StatisticsService)


@pytest.fixture
def mock_achievement_service() -> AsyncMock:
    return AsyncMock(spec=AchievementService)


@pytest.fixture
def mock_nutrition_service() -> AsyncMock:
    return AsyncMock(spec=NutritionService)


@pytest.fixture
def overrides(
    mock_repo,
    mock_db,
    clock,
    mock_exercise_repo,
    mock_workout_service,
    mock_goals_service,
    mock_statistics_service,
    mock_achievement_service,
    mock_nutrition_service,
) -> dict:
    """Общие dependency_overrides: ни одна зависимость не ходит в БД."""
    return {
        get_user_repository: lambda: mock_repo,
        get_db: lambda: mock_db,
        get_clock: lambda: clock,
        get_exercise_repository: lambda: mock_exercise_repo,
        get_workout_service: lambda: mock_workout_service,
        get_goals_service: lambda: mock_goals_service,
        get_statistics_service: lambda: mock_statistics_service,
        get_achievement_service: lambda: mock_achievement_service,
        get_nutrition_service: lambda: mock_nutrition_service,
    }


# ---------------------------------------------------------------------------
# HTTP-клиенты
# ---------------------------------------------------------------------------

@pytest.fixture
async def client(overrides) -> AsyncGenerator[AsyncClient, None]:
    """
    Базовый клиент без подмены get_current_user.
    Используется для auth-эндпоинтов (register, login, refresh, logout, me).
    """
    app = create_test_app()
    app.dependency_overrides.update(overrides)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def user_client(overrides, user_fixture) -> AsyncGenerator[AsyncClient, None]:
    """Клиент, аутентифицированный как обычный пользователь."""
    app = create_test_app()
    app.dependency_overrides.update(overrides)
    app.dependency_overrides[get_current_user] = lambda: user_fixture
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def admin_client(overrides, admin_fixture) -> AsyncGenerator[AsyncClient, None]:
    """Клиент, аутентифицированный как администратор."""
    app = create_test_app()
    app.dependency_overrides.update(overrides)
    app.dependency_overrides[get_current_user] = lambda: admin_fixture
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
