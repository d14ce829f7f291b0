"""
Модульные тесты для WorkoutService.

Сценарии жизненного цикла:
- start по шаблону копирует плановые поля в том же порядке, фактические пустые
- start без шаблона создает пустую сессию in_progress
- повторное завершение -> InvalidStateError, completed_at не меняется
- завершение: оценка длительности/калорий как запасной вариант, процент выполнения, рекорды
- завершение пересчитывает статистику и проверяет достижения
- отмена planned/in_progress, запрет отмены завершенной
- политика одновременных сессий
- доступ к шаблонам: NotFound / Forbidden / публичные
- повторяющийся порядковый номер упражнения -> ValidationError

Сессия БД - AsyncMock, репозитории и сервисы - AsyncMock(spec=...).
"""

import pytest
from unittest.mock import AsyncMock
from sqlalchemy.orm.exc import StaleDataError

from app.core.db import transaction
from app.core.exceptions import ForbiddenError, InvalidStateError, NotFoundError, ValidationError
from app.models.exercise import Exercise
from app.models.workout import Workout, WorkoutExercise, WorkoutStatusEnum
from app.repositories.exercise_repository import ExerciseRepository
from app.repositories.workout_repository import WorkoutRepository
from app.schemas.workout import (
    CompleteWorkoutRequest,
    ExerciseCompletion,
    LogWorkoutRequest,
    LoggedExercise,
    TemplateExerciseInput,
    WorkoutTemplateCreate,
    WorkoutTemplateUpdate,
)
from app.services.achievement_service import AchievementService
from app.services.statistics_service import StatisticsService, new_user_score
from app.services.stats_cache import StatsCache
from app.services.workout_service import WorkoutService
from tests.conftest import FIXED_NOW

pytestmark = pytest.mark.unit


SQUAT = Exercise(id=1, name="Приседания", body_part="legs", calorie_rate=6.0)
PLANK = Exercise(id=2, name="Планка", body_part="core", calorie_rate=4.0)


def make_template(owner_id: int = 1, is_public: bool = False, template_id: int = 100) -> Workout:
    template = Workout(
        id=template_id,
        user_id=owner_id,
        is_template=True,
        is_public=is_public,
        name="Ноги",
        status=WorkoutStatusEnum.planned,
        estimated_duration=10,
        estimated_calories=50,
    )
    template.exercises = [
        WorkoutExercise(
            id=501, exercise_id=SQUAT.id, exercise=SQUAT, order_index=0,
            planned_sets=3, planned_reps=10, planned_weight=60.0, planned_rest=60,
            actual_sets=3, actual_reps=10, is_completed=True,
        ),
        WorkoutExercise(
            id=502, exercise_id=PLANK.id, exercise=PLANK, order_index=1,
            planned_sets=2, planned_duration=45, planned_rest=30,
        ),
    ]
    return template


def make_session(status=WorkoutStatusEnum.in_progress, owner_id: int = 1) -> Workout:
    session = Workout(
        id=200,
        user_id=owner_id,
        is_template=False,
        is_public=False,
        name="Ноги",
        status=status,
        started_at=FIXED_NOW,
        completion_percentage=0,
    )
    session.exercises = [
        WorkoutExercise(
            id=11, exercise_id=SQUAT.id, exercise=SQUAT, order_index=0,
            planned_sets=3, planned_reps=10, planned_weight=60.0, planned_rest=60,
            is_completed=False, is_personal_record=False,
        ),
        WorkoutExercise(
            id=12, exercise_id=PLANK.id, exercise=PLANK, order_index=1,
            planned_sets=2, planned_duration=45, planned_rest=30,
            is_completed=False, is_personal_record=False,
        ),
    ]
    return session


@pytest.fixture
def workouts():
    repo = AsyncMock(spec=WorkoutRepository)
    repo.has_in_progress.return_value = False
    repo.best_one_rep_max.return_value = None
    return repo


@pytest.fixture
def exercises():
    repo = AsyncMock(spec=ExerciseRepository)
    repo.get_many.return_value = {SQUAT.id: SQUAT, PLANK.id: PLANK}
    return repo


@pytest.fixture
def statistics():
    service = AsyncMock(spec=StatisticsService)
    service.recompute_user_score.return_value = new_user_score(1)
    return service


@pytest.fixture
def achievements():
    service = AsyncMock(spec=AchievementService)
    service.evaluate.return_value = []
    return service


@pytest.fixture
def cache():
    return AsyncMock(spec=StatsCache)


@pytest.fixture
def service(mock_db, workouts, exercises, statistics, achievements, clock, cache):
    return WorkoutService(mock_db, workouts, exercises, statistics, achievements, clock, cache=cache)


# ---------------------------------------------------------------------------
# start / plan / begin
# ---------------------------------------------------------------------------

async def test_start_from_template_copies_planned_rows(service, workouts, mock_db, user_fixture):
    template = make_template()
    workouts.get_with_exercises.return_value = template

    session = await service.start_workout(user_fixture, template_id=template.id)

    assert session.status == WorkoutStatusEnum.in_progress
    assert session.started_at == FIXED_NOW
    assert session.is_template is False
    assert session.template_id == template.id
    assert len(session.exercises) == len(template.exercises)
    for copied, original in zip(session.exercises, template.exercises):
        assert copied.exercise_id == original.exercise_id
        assert copied.order_index == original.order_index
        assert copied.planned_sets == original.planned_sets
        assert copied.planned_reps == original.planned_reps
        assert copied.planned_weight == original.planned_weight
        assert copied.planned_duration == original.planned_duration
        assert copied.planned_rest == original.planned_rest
        assert copied.actual_sets is None
        assert copied.actual_reps is None
        assert copied.actual_weight is None
        assert copied.actual_duration is None
        assert copied.is_completed is False
    workouts.add.assert_called_once_with(session)
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_start_without_template_creates_empty_session(service, workouts, user_fixture):
    session = await service.start_workout(user_fixture)

    assert session.status == WorkoutStatusEnum.in_progress
    assert session.exercises == []
    assert session.template_id is None
    workouts.get_with_exercises.assert_not_called()


@pytest.mark.asyncio
async def test_start_from_missing_template_raises_not_found(service, workouts, mock_db, user_fixture):
    workouts.get_with_exercises.return_value = None

    with pytest.raises(NotFoundError):
        await service.start_workout(user_fixture, template_id=999)
    mock_db.rollback.assert_awaited_once()
    mock_db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_start_from_session_id_raises_not_found(service, workouts, user_fixture):
    workouts.get_with_exercises.return_value = make_session()

    with pytest.raises(NotFoundError):
        await service.start_workout(user_fixture, template_id=200)


@pytest.mark.asyncio
async def test_start_from_foreign_private_template_is_forbidden(service, workouts, user_fixture):
    workouts.get_with_exercises.return_value = make_template(owner_id=42)

    with pytest.raises(ForbiddenError):
        await service.start_workout(user_fixture, template_id=100)


@pytest.mark.asyncio
async def test_start_from_foreign_public_template_is_allowed(service, workouts, user_fixture):
    workouts.get_with_exercises.return_value = make_template(owner_id=42, is_public=True)

    session = await service.start_workout(user_fixture, template_id=100)

    assert session.user_id == user_fixture.id


@pytest.mark.asyncio
async def test_second_session_rejected_when_concurrency_disabled(
    mock_db, workouts, exercises, statistics, achievements, clock, cache, user_fixture
):
    service = WorkoutService(
        mock_db, workouts, exercises, statistics, achievements, clock,
        cache=cache, allow_concurrent_sessions=False,
    )
    workouts.has_in_progress.return_value = True

    with pytest.raises(ValidationError):
        await service.start_workout(user_fixture)
    workouts.add.assert_not_called()


@pytest.mark.asyncio
async def test_second_session_allowed_by_default(service, workouts, user_fixture):
    workouts.has_in_progress.return_value = True

    session = await service.start_workout(user_fixture)

    assert session.status == WorkoutStatusEnum.in_progress


@pytest.mark.asyncio
async def test_plan_then_begin(service, workouts, user_fixture, clock):
    workouts.get_with_exercises.return_value = make_template()
    planned = await service.plan_workout(user_fixture, 100)

    assert planned.status == WorkoutStatusEnum.planned
    assert planned.started_at is None

    clock.advance(minutes=30)
    workouts.get_for_update.return_value = planned
    started = await service.begin_workout(user_fixture, 200)

    assert started.status == WorkoutStatusEnum.in_progress
    assert started.started_at == clock.now()


@pytest.mark.asyncio
async def test_begin_in_progress_raises_invalid_state(service, workouts, user_fixture):
    workouts.get_for_update.return_value = make_session()

    with pytest.raises(InvalidStateError):
        await service.begin_workout(user_fixture, 200)


# ---------------------------------------------------------------------------
# complete
# ---------------------------------------------------------------------------

async def test_complete_applies_estimate_and_percentage(
    service, workouts, statistics, achievements, cache, user_fixture
):
    session = make_session()
    workouts.get_for_update.return_value = session
    payload = CompleteWorkoutRequest(exercises=[
        ExerciseCompletion(workout_exercise_id=11, actual_sets=3, actual_reps=10),
    ])

    completed = await service.complete_workout(user_fixture, 200, payload)

    assert completed.status == WorkoutStatusEnum.completed
    assert completed.completed_at == FIXED_NOW
    # 3x10 с отдыхом 60 с и 6 ккал/мин: 4 минуты, 10 ккал
    assert completed.actual_duration == 4
    assert completed.actual_calories == 10
    assert completed.completion_percentage == 50.0
    assert session.exercises[0].is_completed is True
    assert session.exercises[1].is_completed is False
    statistics.recompute_user_score.assert_awaited_once_with(user_fixture.id)
    achievements.evaluate.assert_awaited_once()
    cache.invalidate.assert_awaited_once_with(user_fixture.id)


@pytest.mark.asyncio
async def test_complete_prefers_reported_totals(service, workouts, user_fixture):
    workouts.get_for_update.return_value = make_session()
    payload = CompleteWorkoutRequest(actual_duration=55, actual_calories=480, effort_level=7)

    completed = await service.complete_workout(user_fixture, 200, payload)

    assert completed.actual_duration == 55
    assert completed.actual_calories == 480
    assert completed.effort_level == 7
    assert completed.completion_percentage == 0.0


@pytest.mark.asyncio
async def test_complete_twice_raises_and_keeps_completed_at(service, workouts, mock_db, user_fixture, clock):
    session = make_session()
    workouts.get_for_update.return_value = session
    await service.complete_workout(user_fixture, 200, CompleteWorkoutRequest())
    first_completed_at = session.completed_at

    clock.advance(hours=1)
    with pytest.raises(InvalidStateError):
        await service.complete_workout(user_fixture, 200, CompleteWorkoutRequest())

    assert session.completed_at == first_completed_at
    assert session.status == WorkoutStatusEnum.completed
    mock_db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_complete_cancelled_raises_invalid_state(service, workouts, statistics, user_fixture):
    workouts.get_for_update.return_value = make_session(status=WorkoutStatusEnum.cancelled)

    with pytest.raises(InvalidStateError):
        await service.complete_workout(user_fixture, 200, CompleteWorkoutRequest())
    statistics.recompute_user_score.assert_not_called()


@pytest.mark.asyncio
async def test_complete_foreign_session_is_forbidden(service, workouts, user_fixture):
    workouts.get_for_update.return_value = make_session(owner_id=42)

    with pytest.raises(ForbiddenError):
        await service.complete_workout(user_fixture, 200, CompleteWorkoutRequest())


@pytest.mark.asyncio
async def test_complete_unknown_row_raises_validation(service, workouts, user_fixture):
    workouts.get_for_update.return_value = make_session()
    payload = CompleteWorkoutRequest(exercises=[ExerciseCompletion(workout_exercise_id=999)])

    with pytest.raises(ValidationError):
        await service.complete_workout(user_fixture, 200, payload)


@pytest.mark.asyncio
async def test_complete_marks_personal_record(service, workouts, user_fixture):
    workouts.get_for_update.return_value = make_session()
    workouts.best_one_rep_max.return_value = 75.0
    payload = CompleteWorkoutRequest(exercises=[
        ExerciseCompletion(workout_exercise_id=11, actual_reps=10, actual_weight=70.0),
    ])

    completed = await service.complete_workout(user_fixture, 200, payload)

    row = completed.exercises[0]
    assert row.one_rep_max == pytest.approx(93.33, abs=0.01)
    assert row.is_personal_record is True
    workouts.best_one_rep_max.assert_awaited_once_with(user_fixture.id, SQUAT.id, exclude_workout_id=200)


@pytest.mark.asyncio
async def test_complete_equal_to_previous_best_is_not_record(service, workouts, user_fixture):
    workouts.get_for_update.return_value = make_session()
    workouts.best_one_rep_max.return_value = 80.0
    payload = CompleteWorkoutRequest(exercises=[
        ExerciseCompletion(workout_exercise_id=11, actual_reps=10, actual_weight=60.0),
    ])

    completed = await service.complete_workout(user_fixture, 200, payload)

    assert completed.exercises[0].is_personal_record is False


@pytest.mark.asyncio
async def test_complete_without_reported_rows_uses_elapsed_time(service, workouts, user_fixture, clock):
    session = make_session()
    workouts.get_for_update.return_value = session
    clock.advance(minutes=42)

    completed = await service.complete_workout(user_fixture, 200, CompleteWorkoutRequest())

    # 42 минуты по средней интенсивности упражнений (6 и 4 ккал/мин)
    assert completed.actual_duration == 42
    assert completed.actual_calories == 210
    assert completed.completion_percentage == 0.0


@pytest.mark.asyncio
async def test_complete_without_start_time_falls_back_to_minimums(service, workouts, user_fixture, clock):
    session = make_session()
    session.started_at = None
    workouts.get_for_update.return_value = session
    clock.advance(minutes=42)

    completed = await service.complete_workout(user_fixture, 200, CompleteWorkoutRequest())

    assert completed.actual_duration == 1
    assert completed.actual_calories == 10


@pytest.mark.asyncio
async def test_complete_rolls_back_when_recompute_fails(
    service, workouts, statistics, achievements, cache, mock_db, user_fixture
):
    workouts.get_for_update.return_value = make_session()
    statistics.recompute_user_score.side_effect = RuntimeError("db is gone")

    with pytest.raises(RuntimeError):
        await service.complete_workout(user_fixture, 200, CompleteWorkoutRequest())

    mock_db.rollback.assert_awaited_once()
    mock_db.commit.assert_not_called()
    achievements.evaluate.assert_not_called()
    cache.invalidate.assert_not_called()


@pytest.mark.asyncio
async def test_complete_rolls_back_when_evaluate_fails(
    service, workouts, achievements, cache, mock_db, user_fixture
):
    workouts.get_for_update.return_value = make_session()
    achievements.evaluate.side_effect = RuntimeError("broken catalog")

    with pytest.raises(RuntimeError):
        await service.complete_workout(user_fixture, 200, CompleteWorkoutRequest())

    mock_db.rollback.assert_awaited_once()
    mock_db.commit.assert_not_called()
    cache.invalidate.assert_not_called()


@pytest.mark.asyncio
async def test_concurrent_completion_reports_invalid_state(service, workouts, cache, mock_db, user_fixture):
    # Версия строки изменилась: параллельный запрос успел завершить тренировку
    workouts.get_for_update.return_value = make_session()
    mock_db.commit.side_effect = StaleDataError("version mismatch")

    with pytest.raises(InvalidStateError):
        await service.complete_workout(user_fixture, 200, CompleteWorkoutRequest())

    mock_db.rollback.assert_awaited_once()
    cache.invalidate.assert_not_called()


@pytest.mark.asyncio
async def test_transaction_maps_stale_data_to_invalid_state(mock_db):
    mock_db.commit.side_effect = StaleDataError("version mismatch")

    with pytest.raises(InvalidStateError):
        async with transaction(mock_db):
            pass

    mock_db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_transaction_commits_once_on_success(mock_db):
    async with transaction(mock_db):
        pass

    mock_db.commit.assert_awaited_once()
    mock_db.rollback.assert_not_called()


# ---------------------------------------------------------------------------
# cancel
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("status", [WorkoutStatusEnum.planned, WorkoutStatusEnum.in_progress])
async def test_cancel_active_session(service, workouts, statistics, user_fixture, status):
    workouts.get_for_update.return_value = make_session(status=status)

    cancelled = await service.cancel_workout(user_fixture, 200)

    assert cancelled.status == WorkoutStatusEnum.cancelled
    assert cancelled.completed_at is None
    statistics.recompute_user_score.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.asyncio
@pytest.mark.parametrize("status", [WorkoutStatusEnum.completed, WorkoutStatusEnum.cancelled])
async def test_cancel_terminal_session_raises(service, workouts, user_fixture, status):
    workouts.get_for_update.return_value = make_session(status=status)

    with pytest.raises(InvalidStateError):
        await service.cancel_workout(user_fixture, 200)


@pytest.mark.asyncio
async def test_cancel_missing_session_raises_not_found(service, workouts, user_fixture):
    workouts.get_for_update.return_value = None

    with pytest.raises(NotFoundError):
        await service.cancel_workout(user_fixture, 200)


# ---------------------------------------------------------------------------
# log
# ---------------------------------------------------------------------------

async def test_log_workout_creates_completed_session(service, workouts, statistics, user_fixture):
    payload = LogWorkoutRequest(
        name="Утренняя пробежка",
        exercises=[LoggedExercise(exercise_id=SQUAT.id, sets=3, reps=10, rest_seconds=60)],
    )

    logged = await service.log_workout(user_fixture, payload)

    assert logged.status == WorkoutStatusEnum.completed
    assert logged.completed_at == FIXED_NOW
    assert logged.actual_duration == 4
    assert logged.completion_percentage == 100.0
    workouts.add.assert_called_once_with(logged)
    statistics.recompute_user_score.assert_awaited_once_with(user_fixture.id)


@pytest.mark.asyncio
async def test_log_workout_unknown_exercise(service, exercises, user_fixture):
    exercises.get_many.return_value = {}
    payload = LogWorkoutRequest(name="x", exercises=[LoggedExercise(exercise_id=77)])

    with pytest.raises(ValidationError):
        await service.log_workout(user_fixture, payload)


# ---------------------------------------------------------------------------
# Шаблоны
# ---------------------------------------------------------------------------

async def test_create_template_estimates(service, workouts, user_fixture):
    payload = WorkoutTemplateCreate(
        name="Ноги",
        exercises=[TemplateExerciseInput(exercise_id=SQUAT.id, sets=3, reps=10, rest_seconds=60)],
    )

    template = await service.create_template(user_fixture, payload)

    assert template.is_template is True
    assert template.user_id == user_fixture.id
    assert template.estimated_duration == 4
    assert template.estimated_calories == 10
    assert [row.order_index for row in template.exercises] == [0]
    workouts.add.assert_called_once_with(template)


@pytest.mark.asyncio
async def test_create_template_duplicate_order_index(service, workouts, user_fixture):
    payload = WorkoutTemplateCreate(name="Дубли", exercises=[
        TemplateExerciseInput(exercise_id=SQUAT.id, order_index=0),
        TemplateExerciseInput(exercise_id=PLANK.id, order_index=0),
    ])

    with pytest.raises(ValidationError):
        await service.create_template(user_fixture, payload)
    workouts.add.assert_not_called()


@pytest.mark.asyncio
async def test_create_template_unknown_exercise(service, exercises, user_fixture):
    exercises.get_many.return_value = {SQUAT.id: SQUAT}
    payload = WorkoutTemplateCreate(name="x", exercises=[TemplateExerciseInput(exercise_id=PLANK.id)])

    with pytest.raises(ValidationError):
        await service.create_template(user_fixture, payload)


@pytest.mark.asyncio
async def test_update_foreign_public_template_is_forbidden(service, workouts, user_fixture):
    workouts.get_with_exercises.return_value = make_template(owner_id=42, is_public=True)

    with pytest.raises(ForbiddenError):
        await service.update_template(user_fixture, 100, WorkoutTemplateUpdate(name="Мой"))


@pytest.mark.asyncio
async def test_update_template_replaces_rows(service, workouts, mock_db, user_fixture):
    template = make_template()
    workouts.get_with_exercises.return_value = template
    payload = WorkoutTemplateUpdate(
        name="Планка",
        exercises=[TemplateExerciseInput(exercise_id=PLANK.id, sets=4, duration_seconds=60, rest_seconds=30)],
    )

    updated = await service.update_template(user_fixture, 100, payload)

    assert updated.name == "Планка"
    assert [row.exercise_id for row in updated.exercises] == [PLANK.id]
    # 4 мин работы + 1.5 мин отдыха
    assert updated.estimated_duration == 6
    mock_db.flush.assert_awaited()


@pytest.mark.asyncio
async def test_clone_public_template(service, workouts, user_fixture):
    workouts.get_with_exercises.return_value = make_template(owner_id=42, is_public=True)

    clone = await service.clone_template(user_fixture, 100)

    assert clone.user_id == user_fixture.id
    assert clone.is_template is True
    assert clone.is_public is False
    assert clone.name == "Ноги (копия)"
    assert all(row.actual_sets is None for row in clone.exercises)


@pytest.mark.asyncio
async def test_delete_foreign_template_is_forbidden(service, workouts, user_fixture):
    workouts.get_with_exercises.return_value = make_template(owner_id=42, is_public=True)

    with pytest.raises(ForbiddenError):
        await service.delete_template(user_fixture, 100)
    workouts.delete.assert_not_called()


@pytest.mark.asyncio
async def test_get_foreign_session_is_forbidden(service, workouts, user_fixture):
    workouts.get_with_exercises.return_value = make_session(owner_id=42)

    with pytest.raises(ForbiddenError):
        await service.get_workout(user_fixture, 200)
