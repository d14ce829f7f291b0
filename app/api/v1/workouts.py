from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import get_current_user, get_workout_service
from app.models.user import User
from app.models.workout import WorkoutStatusEnum
from app.schemas.workout import (
    CloneTemplateRequest,
    CompleteWorkoutRequest,
    EstimateRequest,
    LogWorkoutRequest,
    StartWorkoutRequest,
    WorkoutEstimate,
    WorkoutListResponse,
    WorkoutRead,
    WorkoutTemplateCreate,
    WorkoutTemplateUpdate,
)
from app.services.workout_service import WorkoutService

router = APIRouter(tags=["workouts"])


# ==========================
# ШАБЛОНЫ
# ==========================

@router.get("/templates", response_model=List[WorkoutRead])
async def list_templates(
    include_public: bool = Query(True, description="Включать публичные шаблоны каталога"),
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    return await service.list_templates(current_user, include_public=include_public)


@router.post("/templates", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
async def create_template(
    payload: WorkoutTemplateCreate,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    """Создать шаблон; длительность и калории оцениваются автоматически"""
    return await service.create_template(current_user, payload)


@router.put("/templates/{template_id}", response_model=WorkoutRead)
async def update_template(
    template_id: int,
    payload: WorkoutTemplateUpdate,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    return await service.update_template(current_user, template_id, payload)


@router.post("/templates/{template_id}/clone", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
async def clone_template(
    template_id: int,
    payload: CloneTemplateRequest,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    return await service.clone_template(current_user, template_id, payload.name)


@router.post("/templates/{template_id}/plan", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
async def plan_workout(
    template_id: int,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    """Запланировать сессию по шаблону (статус planned)"""
    return await service.plan_workout(current_user, template_id)


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: int,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    await service.delete_template(current_user, template_id)


@router.post("/estimate", response_model=WorkoutEstimate)
async def estimate_workout(
    payload: EstimateRequest,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    return await service.estimate(payload.exercises)


# ==========================
# СЕССИИ
# ==========================

@router.post("/start", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
async def start_workout(
    payload: StartWorkoutRequest,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    """Начать тренировку по шаблону или пустую"""
    return await service.start_workout(current_user, payload.template_id)


@router.post("/log", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
async def log_workout(
    payload: LogWorkoutRequest,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    """Записать уже проведенную тренировку"""
    return await service.log_workout(current_user, payload)


@router.get("/sessions", response_model=WorkoutListResponse)
async def list_sessions(
    status_filter: Optional[WorkoutStatusEnum] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    items, total = await service.list_sessions(
        current_user,
        status=status_filter,
        offset=(page - 1) * page_size,
        limit=page_size,
    )
    return WorkoutListResponse(items=items, total=total)


@router.get("/{workout_id}", response_model=WorkoutRead)
async def get_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    return await service.get_workout(current_user, workout_id)


@router.post("/{workout_id}/begin", response_model=WorkoutRead)
async def begin_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    return await service.begin_workout(current_user, workout_id)


@router.post("/{workout_id}/complete", response_model=WorkoutRead)
async def complete_workout(
    workout_id: int,
    payload: CompleteWorkoutRequest,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    """Завершить тренировку: факт по упражнениям, рекорды, пересчет очков и достижений"""
    return await service.complete_workout(current_user, workout_id, payload)


@router.post("/{workout_id}/cancel", response_model=WorkoutRead)
async def cancel_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service),
):
    return await service.cancel_workout(current_user, workout_id)
