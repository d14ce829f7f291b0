from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.dependencies import get_current_user, get_exercise_repository
from app.models.user import User
from app.repositories.exercise_repository import ExerciseRepository
from app.schemas.exercise import ExerciseRead

router = APIRouter(tags=["exercises"])


@router.get("/", response_model=List[ExerciseRead])
async def list_exercises(
    body_part: Optional[str] = Query(None, description="chest, back, legs, arms, shoulders, abs, cardio"),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Поиск по названию"),
    current_user: User = Depends(get_current_user),
    repo: ExerciseRepository = Depends(get_exercise_repository),
):
    return await repo.list(body_part=body_part, category=category, search=search)


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: int,
    current_user: User = Depends(get_current_user),
    repo: ExerciseRepository = Depends(get_exercise_repository),
):
    exercise = await repo.get_by_id(exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Упражнение не найдено")
    return exercise
