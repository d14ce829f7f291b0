"""
Проверка достижений по текущему снимку UserScore.

evaluate идемпотентен: уже открытые достижения пропускаются, а вставка
дубликата (гонка двух запросов) гасится уникальным ключом (user, achievement).
"""
import logging
from typing import Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from app.core.clock import Clock
from app.core.config import settings
from app.models.gamification import Achievement, UserAchievement, UserScore
from app.repositories.gamification_repository import GamificationRepository
from app.repositories.goal_repository import GoalRepository
from app.schemas.achievement import (
    AchievementProgressRead,
    GoalsInCategoryRequirement,
    RequirementProgress,
    StatisticName,
    StatisticRequirement,
    ComparisonOperator,
    parse_requirements,
)
from app.services.statistics_service import apply_points, new_user_score

logger = logging.getLogger(__name__)


def score_snapshot(score: UserScore) -> Dict[str, int]:
    return {name.value: getattr(score, name.value) or 0 for name in StatisticName}


class AchievementService:
    def __init__(
        self,
        gamification: GamificationRepository,
        goals: GoalRepository,
        clock: Clock,
    ):
        self.gamification = gamification
        self.goals = goals
        self.clock = clock

    def _requirements(self, achievement: Achievement) -> Optional[list]:
        try:
            return parse_requirements(achievement.requirements)
        except (PydanticValidationError, ValueError, TypeError) as e:
            logger.warning(f"Некорректные требования достижения {achievement.key}: {e}")
            return None

    async def _current_value(self, user_id: int, score: UserScore, requirement, category_cache: Dict[str, int]) -> float:
        if isinstance(requirement, StatisticRequirement):
            return getattr(score, requirement.statistic.value) or 0
        if requirement.category not in category_cache:
            category_cache[requirement.category] = await self.goals.count_completed_in_category(
                user_id, requirement.category
            )
        return category_cache[requirement.category]

    @staticmethod
    def _is_met(requirement, current: float) -> bool:
        if isinstance(requirement, StatisticRequirement):
            return requirement.operator.compare(current, requirement.threshold)
        return current >= requirement.count

    async def evaluate(self, user_id: int, score: UserScore) -> List[UserAchievement]:
        """
        Открыть все достижения, требования которых выполнены.

        Очки за новые достижения сразу добавляются в score, поэтому проход
        повторяется, пока открываются новые (достижения за очки/уровень).
        """
        if not settings.ACHIEVEMENTS_ENABLED:
            return []

        achievements = await self.gamification.list_active_achievements()
        unlocked_ids = set(await self.gamification.unlocked_achievement_ids(user_id))
        category_cache: Dict[str, int] = {}
        newly_unlocked: List[UserAchievement] = []

        changed = True
        while changed:
            changed = False
            for achievement in achievements:
                if achievement.id in unlocked_ids:
                    continue

                requirements = self._requirements(achievement)
                # Без требований достижение выдается только вручную
                if not requirements:
                    continue

                met = True
                for requirement in requirements:
                    current = await self._current_value(user_id, score, requirement, category_cache)
                    if not self._is_met(requirement, current):
                        met = False
                        break
                if not met:
                    continue

                user_achievement = UserAchievement(
                    user_id=user_id,
                    achievement_id=achievement.id,
                    points_earned=achievement.points,
                    progress_data=score_snapshot(score),
                    unlocked_at=self.clock.now(),
                )
                inserted = await self.gamification.insert_user_achievement(user_achievement)
                unlocked_ids.add(achievement.id)
                if not inserted:
                    continue

                user_achievement.achievement = achievement
                apply_points(score, score.total_points + achievement.points)
                score.achievements_unlocked = (score.achievements_unlocked or 0) + 1
                newly_unlocked.append(user_achievement)
                changed = True
                logger.info(
                    f"Пользователь {user_id} открыл достижение {achievement.key} (+{achievement.points})"
                )

        return newly_unlocked

    def _requirement_progress(self, requirement, current: float) -> RequirementProgress:
        if isinstance(requirement, StatisticRequirement):
            label = f"{requirement.statistic.value} {requirement.operator.value} {requirement.threshold:g}"
            target = requirement.threshold
        else:
            label = f"goals_in_category[{requirement.category}] >= {requirement.count}"
            target = requirement.count

        met = self._is_met(requirement, current)
        ascending = isinstance(requirement, GoalsInCategoryRequirement) or requirement.operator in (
            ComparisonOperator.gte,
            ComparisonOperator.gt,
        )
        if met:
            percentage = 100.0
        elif ascending and target > 0:
            percentage = round(min(100.0, current / target * 100), 1)
        else:
            percentage = 0.0

        return RequirementProgress(label=label, current=current, target=target, met=met, percentage=percentage)

    async def list_with_progress(self, user_id: int) -> List[AchievementProgressRead]:
        score = await self.gamification.get_score(user_id) or new_user_score(user_id)
        achievements = await self.gamification.list_active_achievements()
        unlocked = {ua.achievement_id: ua for ua in await self.gamification.list_user_achievements(user_id)}
        category_cache: Dict[str, int] = {}

        result = []
        for achievement in achievements:
            requirements = self._requirements(achievement) or []
            progress = []
            for requirement in requirements:
                current = await self._current_value(user_id, score, requirement, category_cache)
                progress.append(self._requirement_progress(requirement, current))

            user_achievement = unlocked.get(achievement.id)
            if user_achievement is not None:
                percentage = 100.0
            elif progress:
                percentage = round(sum(p.percentage for p in progress) / len(progress), 1)
            else:
                percentage = 0.0

            result.append(AchievementProgressRead(
                id=achievement.id,
                key=achievement.key,
                name=achievement.name,
                description=achievement.description,
                icon=achievement.icon,
                points=achievement.points,
                category=achievement.category,
                rarity=achievement.rarity,
                unlocked=user_achievement is not None,
                unlocked_at=user_achievement.unlocked_at if user_achievement else None,
                percentage=percentage,
                requirements=progress,
            ))
        return result

    async def list_unlocked(self, user_id: int) -> List[UserAchievement]:
        return await self.gamification.list_user_achievements(user_id)
