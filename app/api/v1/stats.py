from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_user, get_statistics_service
from app.models.user import User
from app.schemas.stats import UserScoreRead, UserStatsResponse
from app.services.statistics_service import StatisticsService

router = APIRouter(tags=["stats"])


@router.get("/", response_model=UserStatsResponse)
async def get_stats(
    current_user: User = Depends(get_current_user),
    service: StatisticsService = Depends(get_statistics_service),
):
    """Сводка по тренировкам: итоги, серии, неделя, ближайший рубеж"""
    return await service.get_user_stats(current_user.id)


@router.get("/score", response_model=UserScoreRead)
async def get_score(
    current_user: User = Depends(get_current_user),
    service: StatisticsService = Depends(get_statistics_service),
):
    return await service.get_score(current_user.id)
