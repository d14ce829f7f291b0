from typing import Dict, Optional, Tuple

from app.models.user import User, ActivityLevelEnum, GenderEnum


class NutritionCalculator:
    ACTIVITY_MULTIPLIERS = {
        ActivityLevelEnum.sedentary: 1.2,
        ActivityLevelEnum.lightly_active: 1.375,
        ActivityLevelEnum.moderately_active: 1.55,
        ActivityLevelEnum.very_active: 1.725,
        ActivityLevelEnum.extremely_active: 1.9,
    }

    MACRO_RATIOS = {
        "weight_loss": {"protein": 0.35, "carbs": 0.40, "fat": 0.25},
        "maintenance": {"protein": 0.30, "carbs": 0.40, "fat": 0.30},
        "muscle_gain": {"protein": 0.35, "carbs": 0.45, "fat": 0.20}
    }

    DEFAULT_CALORIES = 2000
    DEFAULT_WATER_ML = 2000
    WATER_ML_PER_KG = 35

    @classmethod
    def calculate_bmr(cls, weight: float, height: float, age: int, gender: Optional[GenderEnum]) -> float:
        """Формула Миффлина-Сан Жеора."""
        if gender == GenderEnum.female:
            return 10 * weight + 6.25 * height - 5 * age - 161
        else:
            return 10 * weight + 6.25 * height - 5 * age + 5

    @classmethod
    def calculate_tdee(cls, bmr: float, activity_level: Optional[ActivityLevelEnum]) -> float:
        multiplier = cls.ACTIVITY_MULTIPLIERS.get(activity_level, cls.ACTIVITY_MULTIPLIERS[ActivityLevelEnum.moderately_active])
        return bmr * multiplier

    @classmethod
    def calculate_macros(cls, calories: int, goal: str = "maintenance") -> Dict[str, int]:
        ratios = cls.MACRO_RATIOS.get(goal, cls.MACRO_RATIOS["maintenance"])

        protein_g = int((calories * ratios["protein"]) / 4)
        carbs_g = int((calories * ratios["carbs"]) / 4)
        fat_g = int((calories * ratios["fat"]) / 9)

        return {
            "protein": protein_g,
            "carbs": carbs_g,
            "fat": fat_g
        }

    @classmethod
    def get_user_calorie_needs(cls, user: User) -> int:
        if all([user.weight, user.height, user.age]):
            bmr = cls.calculate_bmr(
                weight=user.weight,
                height=user.height,
                age=user.age,
                gender=user.gender,
            )
            return round(cls.calculate_tdee(bmr, user.activity_level))

        return cls.DEFAULT_CALORIES

    @classmethod
    def get_water_goal(cls, user: User) -> int:
        if user.weight:
            return int(user.weight * cls.WATER_ML_PER_KG)
        return cls.DEFAULT_WATER_ML

    @classmethod
    def ideal_weight_range(cls, height_cm: float) -> Tuple[float, float]:
        """Диапазон веса для ИМТ 18.5–24.9."""
        height_m = height_cm / 100
        return round(18.5 * height_m ** 2, 1), round(24.9 * height_m ** 2, 1)
