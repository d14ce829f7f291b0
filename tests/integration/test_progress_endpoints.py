"""
Интеграционные тесты статистики, достижений, каталога упражнений и питания.

Покрываемые сценарии:
- GET /stats/, GET /stats/score
- GET /achievements/: каталог с прогрессом
- POST /achievements/check: пересчет в транзакции и новые достижения
- GET /exercises/{id}: 404 для несуществующего упражнения
- GET /nutrition/summary: день по умолчанию берется из часов
"""

import pytest

from app.models.exercise import DifficultyEnum, Exercise
from app.models.gamification import Achievement, AchievementCategoryEnum, RarityEnum, UserAchievement
from app.schemas.achievement import AchievementProgressRead
from app.schemas.nutrition import DailyNutritionSummary, MacroTotals
from app.schemas.stats import UserScoreRead, UserStatsResponse
from app.services.statistics_service import apply_points, new_user_score
from tests.conftest import FIXED_NOW

pytestmark = pytest.mark.integration


def sample_stats() -> UserStatsResponse:
    return UserStatsResponse(
        total_sessions=3,
        total_minutes=90,
        total_calories=700,
        average_duration=30.0,
        average_calories=233.3,
        this_week=3,
        this_month=3,
        longest_session=40,
        most_calories=300,
        current_streak=3,
        longest_streak=3,
        streak_level="copper",
        consistency_percentage=10.0,
        weekly_data=[],
    )


# ---------------------------------------------------------------------------
# /stats
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_stats(user_client, mock_statistics_service, user_fixture):
    mock_statistics_service.get_user_stats.return_value = sample_stats()

    response = await user_client.get("/api/v1/stats/")

    assert response.status_code == 200
    assert response.json()["streak_level"] == "copper"
    mock_statistics_service.get_user_stats.assert_awaited_once_with(user_fixture.id)


@pytest.mark.asyncio
async def test_get_score(user_client, mock_statistics_service):
    mock_statistics_service.get_score.return_value = UserScoreRead(
        total_points=150, level=2, level_progress=50, points_to_next_level=150,
        current_streak=1, best_streak=4, goals_completed=5, goals_created=6,
        weekly_goals_completed=1, monthly_goals_completed=2, achievements_unlocked=1,
        workouts_completed=10, total_workout_minutes=300, total_calories_burned=2500,
    )

    response = await user_client.get("/api/v1/stats/score")

    assert response.status_code == 200
    assert response.json()["level"] == 2


# ---------------------------------------------------------------------------
# /achievements
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_achievements(user_client, mock_achievement_service):
    mock_achievement_service.list_with_progress.return_value = [
        AchievementProgressRead(
            id=1, key="goals_5", name="Пять целей", description="Выполните 5 целей", points=50,
            category=AchievementCategoryEnum.goals, rarity=RarityEnum.common,
            unlocked=False, percentage=80.0,
        ),
    ]

    response = await user_client.get("/api/v1/achievements/")

    assert response.status_code == 200
    assert response.json()[0]["percentage"] == 80.0


@pytest.mark.asyncio
async def test_check_achievements(
    user_client, mock_statistics_service, mock_achievement_service, mock_db, user_fixture
):
    score = new_user_score(user_fixture.id)
    apply_points(score, 150)
    mock_statistics_service.recompute_user_score.return_value = score
    achievement = Achievement(
        id=1, key="goals_5", name="Пять целей", description="Выполните 5 целей", points=50,
        category=AchievementCategoryEnum.goals, rarity=RarityEnum.common,
    )
    mock_achievement_service.evaluate.return_value = [
        UserAchievement(
            id=3, user_id=user_fixture.id, achievement_id=1, achievement=achievement,
            points_earned=50, unlocked_at=FIXED_NOW,
        ),
    ]

    response = await user_client.post("/api/v1/achievements/check")

    assert response.status_code == 200
    data = response.json()
    assert data["total_points"] == 150
    assert data["level"] == 2
    assert data["newly_unlocked"][0]["achievement"]["key"] == "goals_5"
    mock_achievement_service.evaluate.assert_awaited_once_with(user_fixture.id, score)
    mock_db.commit.assert_awaited_once()


# ---------------------------------------------------------------------------
# /exercises
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_exercise(user_client, mock_exercise_repo):
    mock_exercise_repo.get_by_id.return_value = Exercise(
        id=1, name="Приседания", body_part="legs", category="strength",
        difficulty=DifficultyEnum.beginner, calorie_rate=6.0, is_active=True,
    )

    response = await user_client.get("/api/v1/exercises/1")

    assert response.status_code == 200
    assert response.json()["name"] == "Приседания"


@pytest.mark.asyncio
async def test_get_missing_exercise_returns_404(user_client, mock_exercise_repo):
    mock_exercise_repo.get_by_id.return_value = None

    response = await user_client.get("/api/v1/exercises/999")

    assert response.status_code == 404


# ---------------------------------------------------------------------------
# /nutrition
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_nutrition_summary_defaults_to_today(user_client, mock_nutrition_service, user_fixture):
    today = FIXED_NOW.date()
    mock_nutrition_service.daily_summary.return_value = DailyNutritionSummary(
        date=today,
        consumed=MacroTotals(calories=1000, protein=57, carbs=130, fat=22),
        target_calories=2000,
        target_macros=MacroTotals(calories=2000, protein=150, carbs=200, fat=66),
        remaining_calories=1000,
        water_ml=1500,
        water_goal_ml=2450,
        meals=[],
    )

    response = await user_client.get("/api/v1/nutrition/summary")

    assert response.status_code == 200
    assert response.json()["remaining_calories"] == 1000
    mock_nutrition_service.daily_summary.assert_awaited_once_with(user_fixture, today)


@pytest.mark.asyncio
async def test_add_water_too_much_returns_422(user_client, mock_nutrition_service):
    response = await user_client.post("/api/v1/nutrition/water", json={"amount_ml": 10000})

    assert response.status_code == 422
