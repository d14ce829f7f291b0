from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.exercise import DifficultyEnum
from app.models.workout import WorkoutStatusEnum, IntensityEnum, DifficultyFeltEnum


# ==========================
# ШАБЛОНЫ
# ==========================

class TemplateExerciseInput(BaseModel):
    exercise_id: int
    order_index: Optional[int] = Field(None, ge=0)
    sets: int = Field(3, ge=1)
    reps: Optional[int] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    duration_seconds: Optional[int] = Field(None, ge=0)
    rest_seconds: int = Field(60, ge=0)
    notes: Optional[str] = None

class WorkoutTemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    difficulty: DifficultyEnum = DifficultyEnum.beginner
    type: Optional[str] = None
    focus: Optional[str] = None
    intensity: IntensityEnum = IntensityEnum.medium
    is_public: bool = False
    exercises: List[TemplateExerciseInput] = []

class WorkoutTemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    difficulty: Optional[DifficultyEnum] = None
    type: Optional[str] = None
    focus: Optional[str] = None
    intensity: Optional[IntensityEnum] = None
    is_public: Optional[bool] = None
    exercises: Optional[List[TemplateExerciseInput]] = None

class CloneTemplateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)


# ==========================
# СЕССИИ
# ==========================

class StartWorkoutRequest(BaseModel):
    template_id: Optional[int] = None

class ExerciseCompletion(BaseModel):
    workout_exercise_id: int
    actual_sets: Optional[int] = Field(None, ge=0)
    actual_reps: Optional[int] = Field(None, ge=0)
    actual_weight: Optional[float] = Field(None, ge=0)
    actual_duration: Optional[int] = Field(None, ge=0)
    actual_rest: Optional[int] = Field(None, ge=0)
    is_completed: Optional[bool] = None
    notes: Optional[str] = None

class CompleteWorkoutRequest(BaseModel):
    notes: Optional[str] = None
    actual_duration: Optional[int] = Field(None, ge=0, description="Минуты")
    actual_calories: Optional[int] = Field(None, ge=0)
    difficulty_felt: Optional[DifficultyFeltEnum] = None
    effort_level: Optional[int] = Field(None, ge=1, le=10)
    exercises: List[ExerciseCompletion] = []

class LoggedExercise(BaseModel):
    exercise_id: int
    sets: int = Field(1, ge=1)
    reps: Optional[int] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    duration_seconds: Optional[int] = Field(None, ge=0)
    rest_seconds: int = Field(0, ge=0)

class LogWorkoutRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: Optional[str] = None
    completed_at: Optional[datetime] = None
    actual_duration: Optional[int] = Field(None, ge=0)
    actual_calories: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None
    exercises: List[LoggedExercise] = []


# ==========================
# ОЦЕНКА ДЛИТЕЛЬНОСТИ/КАЛОРИЙ
# ==========================

class EstimateEntry(BaseModel):
    sets: int = Field(ge=1)
    reps: Optional[int] = Field(None, ge=0)
    duration_seconds: Optional[int] = Field(None, ge=0)
    rest_seconds: int = Field(0, ge=0)
    calorie_rate: float = Field(ge=0)

class WorkoutEstimate(BaseModel):
    estimated_duration: int
    estimated_calories: int
    active_minutes: float
    rest_minutes: float

class EstimateRequest(BaseModel):
    exercises: List[TemplateExerciseInput]


# ==========================
# ОТВЕТЫ
# ==========================

class WorkoutExerciseRead(BaseModel):
    id: int
    exercise_id: int
    order_index: int
    planned_sets: Optional[int] = None
    planned_reps: Optional[int] = None
    planned_weight: Optional[float] = None
    planned_duration: Optional[int] = None
    planned_rest: Optional[int] = None
    actual_sets: Optional[int] = None
    actual_reps: Optional[int] = None
    actual_weight: Optional[float] = None
    actual_duration: Optional[int] = None
    actual_rest: Optional[int] = None
    is_completed: bool = False
    is_personal_record: bool = False
    one_rep_max: Optional[float] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True

class WorkoutRead(BaseModel):
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    is_template: bool
    is_public: bool = False
    template_id: Optional[int] = None
    difficulty: DifficultyEnum
    type: Optional[str] = None
    focus: Optional[str] = None
    intensity: IntensityEnum
    status: WorkoutStatusEnum
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    estimated_duration: Optional[int] = None
    estimated_calories: Optional[int] = None
    actual_duration: Optional[int] = None
    actual_calories: Optional[int] = None
    completion_percentage: float = 0
    difficulty_felt: Optional[DifficultyFeltEnum] = None
    effort_level: Optional[int] = None
    notes: Optional[str] = None
    exercises: List[WorkoutExerciseRead] = []

    class Config:
        from_attributes = True

class WorkoutListResponse(BaseModel):
    items: List[WorkoutRead]
    total: int
