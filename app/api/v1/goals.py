from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import get_current_user, get_goals_service
from app.models.goal import GoalStatusEnum
from app.models.user import User
from app.schemas.goal import GoalCreate, GoalUpdate, GoalProgressUpdate, GoalRead, GoalListResponse
from app.services.goals_service import GoalsService

router = APIRouter(tags=["goals"])


@router.get("/", response_model=GoalListResponse)
async def list_goals(
    status_filter: Optional[GoalStatusEnum] = Query(None, alias="status"),
    category: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
):
    goals = await service.list_goals(current_user, status=status_filter, category=category)
    return GoalListResponse(items=goals, total=len(goals))


@router.post("/", response_model=GoalRead, status_code=status.HTTP_201_CREATED)
async def create_goal(
    payload: GoalCreate,
    current_user: User = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
):
    return await service.create_goal(current_user, payload)


@router.get("/{goal_id}", response_model=GoalRead)
async def get_goal(
    goal_id: int,
    current_user: User = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
):
    return await service.get_goal(current_user, goal_id)


@router.put("/{goal_id}", response_model=GoalRead)
async def update_goal(
    goal_id: int,
    payload: GoalUpdate,
    current_user: User = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
):
    return await service.update_goal(current_user, goal_id, payload)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    goal_id: int,
    current_user: User = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
):
    await service.delete_goal(current_user, goal_id)


@router.post("/{goal_id}/progress", response_model=GoalRead)
async def update_progress(
    goal_id: int,
    payload: GoalProgressUpdate,
    current_user: User = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
):
    """Записать новое значение; цель завершается автоматически при достижении target"""
    return await service.update_progress(current_user, goal_id, payload.value)


@router.post("/{goal_id}/complete", response_model=GoalRead)
async def complete_goal(
    goal_id: int,
    current_user: User = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
):
    return await service.complete_goal(current_user, goal_id)


@router.post("/{goal_id}/activate", response_model=GoalRead)
async def activate_goal(
    goal_id: int,
    current_user: User = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
):
    return await service.activate_goal(current_user, goal_id)


@router.post("/{goal_id}/pause", response_model=GoalRead)
async def pause_goal(
    goal_id: int,
    current_user: User = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
):
    return await service.pause_goal(current_user, goal_id)


@router.post("/{goal_id}/reset", response_model=GoalRead)
async def reset_goal(
    goal_id: int,
    current_user: User = Depends(get_current_user),
    service: GoalsService = Depends(get_goals_service),
):
    return await service.reset_goal(current_user, goal_id)
