"""
Жизненный цикл тренировки и шаблоны.

Состояния сессии: planned -> in_progress -> {completed, cancelled},
planned -> cancelled. completed и cancelled конечные.

Завершение сессии, пересчет UserScore и проверка достижений выполняются
в одной транзакции: любая ошибка откатывает все вместе.
"""
import logging
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock
from app.core.config import settings
from app.core.db import transaction
from app.core.exceptions import ForbiddenError, InvalidStateError, NotFoundError, ValidationError
from app.models.exercise import DifficultyEnum, Exercise
from app.models.user import User
from app.models.workout import IntensityEnum, Workout, WorkoutExercise, WorkoutStatusEnum
from app.repositories.exercise_repository import ExerciseRepository
from app.repositories.workout_repository import WorkoutRepository
from app.schemas.workout import (
    CompleteWorkoutRequest,
    EstimateEntry,
    LogWorkoutRequest,
    TemplateExerciseInput,
    WorkoutEstimate,
    WorkoutTemplateCreate,
    WorkoutTemplateUpdate,
)
from app.services.achievement_service import AchievementService
from app.services.statistics_service import StatisticsService
from app.services.stats_cache import StatsCache, stats_cache
from app.services.workout_estimator import WorkoutEstimator

logger = logging.getLogger(__name__)

ACTUAL_FIELDS = ("actual_sets", "actual_reps", "actual_weight", "actual_duration", "actual_rest")
CANCELLABLE = (WorkoutStatusEnum.planned, WorkoutStatusEnum.in_progress)


class WorkoutService:
    def __init__(
        self,
        db: AsyncSession,
        workouts: WorkoutRepository,
        exercises: ExerciseRepository,
        statistics: StatisticsService,
        achievements: AchievementService,
        clock: Clock,
        cache: StatsCache = stats_cache,
        allow_concurrent_sessions: Optional[bool] = None,
    ):
        self.db = db
        self.workouts = workouts
        self.exercises = exercises
        self.statistics = statistics
        self.achievements = achievements
        self.clock = clock
        self.cache = cache
        if allow_concurrent_sessions is None:
            allow_concurrent_sessions = settings.ALLOW_CONCURRENT_SESSIONS
        self.allow_concurrent_sessions = allow_concurrent_sessions

    # ------------------------------------------------------------------
    # Загрузка и проверка владения
    # ------------------------------------------------------------------

    async def _get_owned_session(self, user: User, workout_id: int, for_update: bool = False) -> Workout:
        if for_update:
            workout = await self.workouts.get_for_update(workout_id)
        else:
            workout = await self.workouts.get_with_exercises(workout_id)
        if workout is None or workout.is_template:
            raise NotFoundError("Тренировка не найдена")
        if workout.user_id != user.id:
            raise ForbiddenError("Нет доступа к этой тренировке")
        return workout

    async def _get_visible_template(self, user: User, template_id: int) -> Workout:
        template = await self.workouts.get_with_exercises(template_id)
        if template is None or not template.is_template:
            raise NotFoundError("Шаблон тренировки не найден")
        if template.user_id != user.id and not template.is_public:
            raise ForbiddenError("Нет доступа к этому шаблону")
        return template

    async def _get_owned_template(self, user: User, template_id: int) -> Workout:
        template = await self._get_visible_template(user, template_id)
        if template.user_id != user.id:
            raise ForbiddenError("Изменять можно только свои шаблоны")
        return template

    async def _ensure_can_start(self, user: User) -> None:
        if self.allow_concurrent_sessions:
            return
        if await self.workouts.has_in_progress(user.id):
            raise ValidationError("У вас уже есть незавершенная тренировка")

    # ------------------------------------------------------------------
    # Оценка
    # ------------------------------------------------------------------

    @staticmethod
    def _calorie_rate(exercise: Optional[Exercise]) -> float:
        if exercise is not None and exercise.calorie_rate is not None:
            return exercise.calorie_rate
        return settings.DEFAULT_CALORIE_RATE

    def _planned_entries(self, rows: List[WorkoutExercise]) -> List[EstimateEntry]:
        return [
            EstimateEntry(
                sets=row.planned_sets or 1,
                reps=row.planned_reps,
                duration_seconds=row.planned_duration,
                rest_seconds=row.planned_rest or 0,
                calorie_rate=self._calorie_rate(row.exercise),
            )
            for row in rows
        ]

    def _performed_entries(self, rows: List[WorkoutExercise]) -> List[EstimateEntry]:
        entries = []
        for row in rows:
            if not row.is_completed:
                continue
            entries.append(EstimateEntry(
                sets=row.actual_sets or row.planned_sets or 1,
                reps=row.actual_reps if row.actual_reps is not None else row.planned_reps,
                duration_seconds=row.actual_duration if row.actual_duration is not None else row.planned_duration,
                rest_seconds=(row.actual_rest if row.actual_rest is not None else row.planned_rest) or 0,
                calorie_rate=self._calorie_rate(row.exercise),
            ))
        return entries

    async def _resolve_inputs(
        self, inputs: List[TemplateExerciseInput]
    ) -> List[Tuple[int, TemplateExerciseInput, Exercise]]:
        """Проверить список упражнений шаблона: все есть в каталоге, порядковые номера уникальны."""
        catalog = await self.exercises.get_many(item.exercise_id for item in inputs)
        missing = sorted({item.exercise_id for item in inputs if item.exercise_id not in catalog})
        if missing:
            raise ValidationError(f"Упражнения не найдены: {', '.join(str(i) for i in missing)}")

        resolved = []
        seen = set()
        for position, item in enumerate(inputs):
            order_index = item.order_index if item.order_index is not None else position
            if order_index in seen:
                raise ValidationError(f"Повторяющийся порядковый номер упражнения: {order_index}")
            seen.add(order_index)
            resolved.append((order_index, item, catalog[item.exercise_id]))
        return sorted(resolved, key=lambda entry: entry[0])

    async def estimate(self, inputs: List[TemplateExerciseInput]) -> WorkoutEstimate:
        resolved = await self._resolve_inputs(inputs)
        return WorkoutEstimator.estimate(
            EstimateEntry(
                sets=item.sets,
                reps=item.reps,
                duration_seconds=item.duration_seconds,
                rest_seconds=item.rest_seconds,
                calorie_rate=self._calorie_rate(exercise),
            )
            for _, item, exercise in resolved
        )

    def _apply_estimate(self, workout: Workout) -> None:
        estimate = WorkoutEstimator.estimate(self._planned_entries(workout.exercises))
        workout.estimated_duration = estimate.estimated_duration
        workout.estimated_calories = estimate.estimated_calories

    # ------------------------------------------------------------------
    # Сессии
    # ------------------------------------------------------------------

    @staticmethod
    def _copy_rows(template: Workout) -> List[WorkoutExercise]:
        # Только плановые поля: фактические заполняются при завершении
        return [
            WorkoutExercise(
                exercise_id=row.exercise_id,
                exercise=row.exercise,
                order_index=row.order_index,
                planned_sets=row.planned_sets,
                planned_reps=row.planned_reps,
                planned_weight=row.planned_weight,
                planned_duration=row.planned_duration,
                planned_rest=row.planned_rest,
                is_completed=False,
                is_personal_record=False,
                notes=row.notes,
            )
            for row in template.exercises
        ]

    def _new_session(self, user: User, template: Optional[Workout], status: WorkoutStatusEnum) -> Workout:
        now = self.clock.now()
        workout = Workout(
            user_id=user.id,
            is_template=False,
            is_public=False,
            status=status,
            completion_percentage=0,
            created_at=now,
            updated_at=now,
        )
        if template is None:
            workout.name = "Свободная тренировка"
            workout.difficulty = DifficultyEnum.beginner
            workout.intensity = IntensityEnum.medium
            workout.exercises = []
        else:
            workout.template_id = template.id
            workout.name = template.name
            workout.description = template.description
            workout.difficulty = template.difficulty
            workout.type = template.type
            workout.focus = template.focus
            workout.intensity = template.intensity
            workout.estimated_duration = template.estimated_duration
            workout.estimated_calories = template.estimated_calories
            workout.exercises = self._copy_rows(template)
        if status == WorkoutStatusEnum.in_progress:
            workout.started_at = now
        return workout

    async def start_workout(self, user: User, template_id: Optional[int] = None) -> Workout:
        async with transaction(self.db):
            await self._ensure_can_start(user)
            template = None
            if template_id is not None:
                template = await self._get_visible_template(user, template_id)
            workout = self._new_session(user, template, WorkoutStatusEnum.in_progress)
            self.workouts.add(workout)

        logger.info(f"Пользователь {user.id} начал тренировку {workout.id} (шаблон {template_id})")
        return workout

    async def plan_workout(self, user: User, template_id: int) -> Workout:
        async with transaction(self.db):
            template = await self._get_visible_template(user, template_id)
            workout = self._new_session(user, template, WorkoutStatusEnum.planned)
            self.workouts.add(workout)

        logger.info(f"Пользователь {user.id} запланировал тренировку {workout.id} по шаблону {template_id}")
        return workout

    async def begin_workout(self, user: User, workout_id: int) -> Workout:
        async with transaction(self.db):
            workout = await self._get_owned_session(user, workout_id, for_update=True)
            if workout.status != WorkoutStatusEnum.planned:
                raise InvalidStateError(f"Нельзя начать тренировку в статусе {workout.status.value}")
            await self._ensure_can_start(user)
            workout.status = WorkoutStatusEnum.in_progress
            workout.started_at = self.clock.now()

        logger.info(f"Тренировка {workout.id}: planned -> in_progress")
        return workout

    async def _mark_personal_records(self, user: User, workout: Workout) -> None:
        session_best: Dict[int, float] = {}
        for row in workout.exercises:
            if not row.is_completed:
                continue
            weight = row.actual_weight if row.actual_weight is not None else row.planned_weight
            reps = row.actual_reps if row.actual_reps is not None else row.planned_reps
            row.one_rep_max = WorkoutEstimator.one_rep_max(weight, reps)
            if row.one_rep_max is None:
                row.is_personal_record = False
                continue

            if row.exercise_id not in session_best:
                previous = await self.workouts.best_one_rep_max(
                    user.id, row.exercise_id, exclude_workout_id=workout.id
                )
                session_best[row.exercise_id] = previous or 0.0
            row.is_personal_record = row.one_rep_max > session_best[row.exercise_id]
            session_best[row.exercise_id] = max(session_best[row.exercise_id], row.one_rep_max)

    @staticmethod
    def _completion_percentage(workout: Workout) -> float:
        if not workout.exercises:
            return 100.0
        completed = sum(1 for row in workout.exercises if row.is_completed)
        return round(completed / len(workout.exercises) * 100, 2)

    async def _refresh_progress(self, user: User) -> None:
        await self.db.flush()
        score = await self.statistics.recompute_user_score(user.id)
        unlocked = await self.achievements.evaluate(user.id, score)
        if unlocked:
            logger.info(f"Пользователь {user.id}: открыто достижений {len(unlocked)}")

    def _completion_estimate(self, workout: Workout) -> WorkoutEstimate:
        performed = self._performed_entries(workout.exercises)
        if performed or workout.started_at is None:
            return WorkoutEstimator.estimate(performed)
        # Ни одно упражнение не отмечено: считаем по времени с начала сессии
        elapsed = (workout.completed_at - workout.started_at).total_seconds() / 60
        rates = [self._calorie_rate(row.exercise) for row in workout.exercises]
        rate = sum(rates) / len(rates) if rates else settings.DEFAULT_CALORIE_RATE
        return WorkoutEstimator.from_elapsed(elapsed, rate)

    async def complete_workout(self, user: User, workout_id: int, payload: CompleteWorkoutRequest) -> Workout:
        async with transaction(self.db):
            workout = await self._get_owned_session(user, workout_id, for_update=True)
            if workout.status != WorkoutStatusEnum.in_progress:
                raise InvalidStateError(f"Нельзя завершить тренировку в статусе {workout.status.value}")

            rows = {row.id: row for row in workout.exercises}
            for item in payload.exercises:
                row = rows.get(item.workout_exercise_id)
                if row is None:
                    raise ValidationError(
                        f"Упражнение {item.workout_exercise_id} не входит в тренировку {workout.id}"
                    )
                for field in ACTUAL_FIELDS:
                    value = getattr(item, field)
                    if value is not None:
                        setattr(row, field, value)
                if item.notes is not None:
                    row.notes = item.notes
                row.is_completed = item.is_completed if item.is_completed is not None else True

            await self._mark_personal_records(user, workout)

            workout.status = WorkoutStatusEnum.completed
            workout.completed_at = self.clock.now()
            estimate = self._completion_estimate(workout)
            workout.updated_at = workout.completed_at
            if payload.notes is not None:
                workout.notes = payload.notes
            workout.actual_duration = (
                payload.actual_duration if payload.actual_duration is not None else estimate.estimated_duration
            )
            workout.actual_calories = (
                payload.actual_calories if payload.actual_calories is not None else estimate.estimated_calories
            )
            if payload.difficulty_felt is not None:
                workout.difficulty_felt = payload.difficulty_felt
            if payload.effort_level is not None:
                workout.effort_level = payload.effort_level
            workout.completion_percentage = self._completion_percentage(workout)

            await self._refresh_progress(user)

        await self.cache.invalidate(user.id)
        logger.info(
            f"Тренировка {workout.id}: in_progress -> completed "
            f"({workout.actual_duration} мин, {workout.actual_calories} ккал)"
        )
        return workout

    async def cancel_workout(self, user: User, workout_id: int) -> Workout:
        async with transaction(self.db):
            workout = await self._get_owned_session(user, workout_id, for_update=True)
            if workout.status not in CANCELLABLE:
                raise InvalidStateError(f"Нельзя отменить тренировку в статусе {workout.status.value}")
            previous = workout.status
            workout.status = WorkoutStatusEnum.cancelled
            workout.updated_at = self.clock.now()

        await self.cache.invalidate(user.id)
        logger.info(f"Тренировка {workout.id}: {previous.value} -> cancelled")
        return workout

    async def log_workout(self, user: User, payload: LogWorkoutRequest) -> Workout:
        """Записать уже проведенную тренировку без прохождения через in_progress."""
        async with transaction(self.db):
            catalog = await self.exercises.get_many(item.exercise_id for item in payload.exercises)
            missing = sorted({item.exercise_id for item in payload.exercises if item.exercise_id not in catalog})
            if missing:
                raise ValidationError(f"Упражнения не найдены: {', '.join(str(i) for i in missing)}")

            completed_at = payload.completed_at or self.clock.now()
            workout = Workout(
                user_id=user.id,
                is_template=False,
                is_public=False,
                name=payload.name,
                type=payload.type,
                difficulty=DifficultyEnum.beginner,
                intensity=IntensityEnum.medium,
                status=WorkoutStatusEnum.completed,
                completed_at=completed_at,
                notes=payload.notes,
                created_at=self.clock.now(),
                updated_at=self.clock.now(),
            )
            workout.exercises = [
                WorkoutExercise(
                    exercise_id=item.exercise_id,
                    exercise=catalog[item.exercise_id],
                    order_index=position,
                    planned_sets=item.sets,
                    planned_reps=item.reps,
                    planned_weight=item.weight,
                    planned_duration=item.duration_seconds,
                    planned_rest=item.rest_seconds,
                    actual_sets=item.sets,
                    actual_reps=item.reps,
                    actual_weight=item.weight,
                    actual_duration=item.duration_seconds,
                    actual_rest=item.rest_seconds,
                    is_completed=True,
                    is_personal_record=False,
                )
                for position, item in enumerate(payload.exercises)
            ]
            self.workouts.add(workout)

            self._apply_estimate(workout)
            estimate = WorkoutEstimator.estimate(self._performed_entries(workout.exercises))
            workout.actual_duration = (
                payload.actual_duration if payload.actual_duration is not None else estimate.estimated_duration
            )
            workout.actual_calories = (
                payload.actual_calories if payload.actual_calories is not None else estimate.estimated_calories
            )
            workout.started_at = completed_at - timedelta(minutes=workout.actual_duration)
            workout.completion_percentage = 100.0

            await self.db.flush()
            await self._mark_personal_records(user, workout)
            await self._refresh_progress(user)

        await self.cache.invalidate(user.id)
        logger.info(f"Пользователь {user.id} записал тренировку {workout.id}")
        return workout

    async def get_workout(self, user: User, workout_id: int) -> Workout:
        workout = await self.workouts.get_with_exercises(workout_id)
        if workout is None:
            raise NotFoundError("Тренировка не найдена")
        if workout.user_id != user.id and not (workout.is_template and workout.is_public):
            raise ForbiddenError("Нет доступа к этой тренировке")
        return workout

    async def list_sessions(
        self,
        user: User,
        status: Optional[WorkoutStatusEnum] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Workout], int]:
        return await self.workouts.list_sessions(user.id, status=status, offset=offset, limit=limit)

    # ------------------------------------------------------------------
    # Шаблоны
    # ------------------------------------------------------------------

    @staticmethod
    def _build_rows(resolved: List[Tuple[int, TemplateExerciseInput, Exercise]]) -> List[WorkoutExercise]:
        return [
            WorkoutExercise(
                exercise_id=exercise.id,
                exercise=exercise,
                order_index=order_index,
                planned_sets=item.sets,
                planned_reps=item.reps,
                planned_weight=item.weight,
                planned_duration=item.duration_seconds,
                planned_rest=item.rest_seconds,
                is_completed=False,
                is_personal_record=False,
                notes=item.notes,
            )
            for order_index, item, exercise in resolved
        ]

    async def list_templates(self, user: User, include_public: bool = True) -> List[Workout]:
        return await self.workouts.list_templates(user.id, include_public=include_public)

    async def create_template(self, user: User, payload: WorkoutTemplateCreate) -> Workout:
        async with transaction(self.db):
            resolved = await self._resolve_inputs(payload.exercises)
            now = self.clock.now()
            template = Workout(
                user_id=user.id,
                is_template=True,
                is_public=payload.is_public,
                name=payload.name,
                description=payload.description,
                difficulty=payload.difficulty,
                type=payload.type,
                focus=payload.focus,
                intensity=payload.intensity,
                status=WorkoutStatusEnum.planned,
                completion_percentage=0,
                created_at=now,
                updated_at=now,
            )
            template.exercises = self._build_rows(resolved)
            self._apply_estimate(template)
            self.workouts.add(template)

        logger.info(f"Пользователь {user.id} создал шаблон {template.id}")
        return template

    async def update_template(self, user: User, template_id: int, payload: WorkoutTemplateUpdate) -> Workout:
        async with transaction(self.db):
            template = await self._get_owned_template(user, template_id)
            data = payload.model_dump(exclude_unset=True, exclude={"exercises"})
            for field, value in data.items():
                if value is not None:
                    setattr(template, field, value)

            if payload.exercises is not None:
                resolved = await self._resolve_inputs(payload.exercises)
                # Старые строки удаляются до вставки новых: уникальный (workout_id, order_index)
                template.exercises.clear()
                await self.db.flush()
                template.exercises.extend(self._build_rows(resolved))

            self._apply_estimate(template)
            template.updated_at = self.clock.now()

        return template

    async def clone_template(self, user: User, template_id: int, name: Optional[str] = None) -> Workout:
        async with transaction(self.db):
            source = await self._get_visible_template(user, template_id)
            now = self.clock.now()
            clone = Workout(
                user_id=user.id,
                is_template=True,
                is_public=False,
                template_id=source.id,
                name=name or f"{source.name} (копия)",
                description=source.description,
                difficulty=source.difficulty,
                type=source.type,
                focus=source.focus,
                intensity=source.intensity,
                status=WorkoutStatusEnum.planned,
                estimated_duration=source.estimated_duration,
                estimated_calories=source.estimated_calories,
                completion_percentage=0,
                created_at=now,
                updated_at=now,
            )
            clone.exercises = self._copy_rows(source)
            self.workouts.add(clone)

        logger.info(f"Пользователь {user.id} скопировал шаблон {template_id} -> {clone.id}")
        return clone

    async def delete_template(self, user: User, template_id: int) -> None:
        async with transaction(self.db):
            template = await self._get_owned_template(user, template_id)
            await self.workouts.delete(template)

        logger.info(f"Пользователь {user.id} удалил шаблон {template_id}")
