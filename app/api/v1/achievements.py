from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db, transaction
from app.core.dependencies import get_current_user, get_achievement_service, get_statistics_service
from app.models.user import User
from app.schemas.achievement import AchievementProgressRead, UserAchievementRead, CheckAchievementsResponse
from app.services.achievement_service import AchievementService
from app.services.statistics_service import StatisticsService
from app.services.stats_cache import stats_cache

router = APIRouter(tags=["achievements"])


@router.get("/", response_model=List[AchievementProgressRead])
async def list_achievements(
    current_user: User = Depends(get_current_user),
    service: AchievementService = Depends(get_achievement_service),
):
    """Каталог достижений с прогрессом текущего пользователя"""
    return await service.list_with_progress(current_user.id)


@router.get("/unlocked", response_model=List[UserAchievementRead])
async def list_unlocked(
    current_user: User = Depends(get_current_user),
    service: AchievementService = Depends(get_achievement_service),
):
    return await service.list_unlocked(current_user.id)


@router.post("/check", response_model=CheckAchievementsResponse)
async def check_achievements(
    current_user: User = Depends(get_current_user),
    statistics: StatisticsService = Depends(get_statistics_service),
    service: AchievementService = Depends(get_achievement_service),
    db: AsyncSession = Depends(get_db),
):
    """Пересчитать очки и проверить достижения вручную"""
    async with transaction(db):
        score = await statistics.recompute_user_score(current_user.id)
        newly_unlocked = await service.evaluate(current_user.id, score)

    await stats_cache.invalidate(current_user.id)
    return CheckAchievementsResponse(
        newly_unlocked=newly_unlocked,
        total_points=score.total_points,
        level=score.level,
    )
