"""
Начальный каталог: упражнения, достижения и публичные шаблоны тренировок.
calorie_rate: ккал за минуту активной работы (оценка по MET для человека ~70 кг).
"""

INITIAL_EXERCISES = [
    # Грудь
    {
        "name": "Push-Up",
        "body_part": "chest",
        "description": "Классические отжимания от пола.",
        "difficulty": "beginner",
        "category": "strength",
        "calorie_rate": 8.0,
        "equipment": "none",
        "muscle_groups": ["chest", "triceps", "deltoids"],
        "instructions": ["Примите упор лежа", "Опуститесь, сгибая руки", "Выжмите себя вверх"],
        "tips": ["Держите корпус прямым", "Контролируйте опускание"],
    },
    {
        "name": "Bench Press",
        "body_part": "chest",
        "description": "Жим штанги лежа на горизонтальной скамье.",
        "difficulty": "intermediate",
        "category": "strength",
        "calorie_rate": 6.0,
        "equipment": "barbell",
        "muscle_groups": ["chest", "triceps", "deltoids"],
        "instructions": ["Лягте на скамью", "Опустите гриф к груди", "Выжмите вверх"],
        "tips": ["Лопатки сведены", "Стопы прижаты к полу"],
    },
    {
        "name": "Dumbbell Fly",
        "body_part": "chest",
        "description": "Разведение гантелей лежа.",
        "difficulty": "intermediate",
        "category": "strength",
        "calorie_rate": 5.0,
        "equipment": "dumbbells",
        "muscle_groups": ["chest"],
        "instructions": ["Лягте на скамью", "Разведите руки в стороны", "Сведите гантели над грудью"],
        "tips": ["Локти слегка согнуты"],
    },
    # Спина
    {
        "name": "Pull-Up",
        "body_part": "back",
        "description": "Подтягивания на перекладине.",
        "difficulty": "intermediate",
        "category": "strength",
        "calorie_rate": 9.0,
        "equipment": "pull-up bar",
        "muscle_groups": ["lats", "biceps"],
        "instructions": ["Повисните на перекладине", "Подтянитесь до подбородка", "Опуститесь подконтрольно"],
        "tips": ["Без раскачки"],
    },
    {
        "name": "Deadlift",
        "body_part": "back",
        "description": "Становая тяга со штангой.",
        "difficulty": "advanced",
        "category": "strength",
        "calorie_rate": 9.0,
        "equipment": "barbell",
        "muscle_groups": ["lower back", "glutes", "hamstrings"],
        "instructions": ["Встаньте у штанги", "Возьмите гриф", "Выпрямитесь, толкая пол ногами"],
        "tips": ["Спина нейтральная", "Гриф близко к ногам"],
    },
    {
        "name": "Bent-Over Row",
        "body_part": "back",
        "description": "Тяга штанги в наклоне.",
        "difficulty": "intermediate",
        "category": "strength",
        "calorie_rate": 6.5,
        "equipment": "barbell",
        "muscle_groups": ["lats", "rhomboids", "biceps"],
        "instructions": ["Наклонитесь вперед", "Тяните гриф к поясу", "Опустите подконтрольно"],
        "tips": ["Не округляйте спину"],
    },
    # Ноги
    {
        "name": "Bodyweight Squat",
        "body_part": "legs",
        "description": "Приседания с собственным весом.",
        "difficulty": "beginner",
        "category": "strength",
        "calorie_rate": 7.0,
        "equipment": "none",
        "muscle_groups": ["quadriceps", "glutes"],
        "instructions": ["Ноги на ширине плеч", "Присядьте до параллели", "Встаньте"],
        "tips": ["Колени по направлению носков"],
    },
    {
        "name": "Barbell Squat",
        "body_part": "legs",
        "description": "Приседания со штангой на спине.",
        "difficulty": "advanced",
        "category": "strength",
        "calorie_rate": 8.5,
        "equipment": "barbell",
        "muscle_groups": ["quadriceps", "glutes", "hamstrings"],
        "instructions": ["Положите гриф на трапеции", "Присядьте", "Встаньте, толкая пол"],
        "tips": ["Пятки не отрываются"],
    },
    {
        "name": "Lunge",
        "body_part": "legs",
        "description": "Выпады вперед.",
        "difficulty": "beginner",
        "category": "strength",
        "calorie_rate": 6.5,
        "equipment": "none",
        "muscle_groups": ["quadriceps", "glutes"],
        "instructions": ["Шагните вперед", "Опуститесь до угла 90°", "Вернитесь в стойку"],
        "tips": ["Корпус вертикально"],
    },
    # Руки и плечи
    {
        "name": "Biceps Curl",
        "body_part": "arms",
        "description": "Сгибание рук с гантелями.",
        "difficulty": "beginner",
        "category": "strength",
        "calorie_rate": 4.0,
        "equipment": "dumbbells",
        "muscle_groups": ["biceps"],
        "instructions": ["Руки вдоль тела", "Согните руки", "Опустите подконтрольно"],
        "tips": ["Локти прижаты"],
    },
    {
        "name": "Overhead Press",
        "body_part": "shoulders",
        "description": "Жим штанги стоя.",
        "difficulty": "intermediate",
        "category": "strength",
        "calorie_rate": 5.5,
        "equipment": "barbell",
        "muscle_groups": ["deltoids", "triceps"],
        "instructions": ["Гриф на уровне груди", "Выжмите над головой", "Опустите"],
        "tips": ["Не прогибайтесь в пояснице"],
    },
    # Пресс
    {
        "name": "Plank",
        "body_part": "abs",
        "description": "Статическая планка на локтях.",
        "difficulty": "beginner",
        "category": "strength",
        "calorie_rate": 4.0,
        "equipment": "none",
        "muscle_groups": ["abs", "obliques"],
        "instructions": ["Упор на локтях", "Держите корпус прямым"],
        "tips": ["Не поднимайте таз"],
    },
    {
        "name": "Crunch",
        "body_part": "abs",
        "description": "Скручивания лежа.",
        "difficulty": "beginner",
        "category": "strength",
        "calorie_rate": 5.0,
        "equipment": "none",
        "muscle_groups": ["abs"],
        "instructions": ["Лягте на спину", "Поднимите плечи к коленям", "Опуститесь"],
        "tips": ["Не тяните голову руками"],
    },
    # Кардио
    {
        "name": "Jumping Jacks",
        "body_part": "cardio",
        "description": "Прыжки с разведением рук и ног.",
        "difficulty": "beginner",
        "category": "cardio",
        "calorie_rate": 10.0,
        "equipment": "none",
        "muscle_groups": ["full body"],
        "instructions": ["Прыжком разведите ноги и руки", "Вернитесь в исходное положение"],
        "tips": ["Приземляйтесь мягко"],
    },
    {
        "name": "Burpee",
        "body_part": "cardio",
        "description": "Берпи: присед, упор лежа, прыжок.",
        "difficulty": "intermediate",
        "category": "hiit",
        "calorie_rate": 12.0,
        "equipment": "none",
        "muscle_groups": ["full body"],
        "instructions": ["Присядьте", "Выбросьте ноги в упор лежа", "Вернитесь и выпрыгните"],
        "tips": ["Держите темп"],
    },
    {
        "name": "Mountain Climber",
        "body_part": "cardio",
        "description": "Альпинист: бег в упоре лежа.",
        "difficulty": "intermediate",
        "category": "hiit",
        "calorie_rate": 11.0,
        "equipment": "none",
        "muscle_groups": ["abs", "shoulders", "legs"],
        "instructions": ["Упор лежа", "Поочередно подтягивайте колени к груди"],
        "tips": ["Таз не поднимается"],
    },
    # Гибкость
    {
        "name": "Hamstring Stretch",
        "body_part": "legs",
        "description": "Растяжка задней поверхности бедра.",
        "difficulty": "beginner",
        "category": "flexibility",
        "calorie_rate": 2.5,
        "equipment": "none",
        "muscle_groups": ["hamstrings"],
        "instructions": ["Сядьте, выпрямив ноги", "Тянитесь к носкам"],
        "tips": ["Без рывков"],
    },
]

INITIAL_ACHIEVEMENTS = [
    # Цели
    {
        "key": "first_goal",
        "name": "Первые шаги",
        "description": "Создайте первую цель",
        "icon": "🎯",
        "points": 10,
        "category": "goals",
        "rarity": "common",
        "requirements": [{"kind": "statistic", "statistic": "goals_created", "operator": ">=", "threshold": 1}],
        "sort_order": 1,
    },
    {
        "key": "goal_achiever",
        "name": "Цель достигнута",
        "description": "Выполните первую цель",
        "icon": "🏆",
        "points": 25,
        "category": "goals",
        "rarity": "common",
        "requirements": [{"kind": "statistic", "statistic": "goals_completed", "operator": ">=", "threshold": 1}],
        "sort_order": 2,
    },
    {
        "key": "milestone_master",
        "name": "Мастер рубежей",
        "description": "Выполните 5 целей",
        "icon": "🎖️",
        "points": 50,
        "category": "goals",
        "rarity": "rare",
        "requirements": [{"kind": "statistic", "statistic": "goals_completed", "operator": ">=", "threshold": 5}],
        "sort_order": 3,
    },
    {
        "key": "goal_champion",
        "name": "Чемпион целей",
        "description": "Выполните 10 целей",
        "icon": "👑",
        "points": 100,
        "category": "goals",
        "rarity": "epic",
        "requirements": [{"kind": "statistic", "statistic": "goals_completed", "operator": ">=", "threshold": 10}],
        "sort_order": 4,
    },
    {
        "key": "legendary_achiever",
        "name": "Легенда",
        "description": "Выполните 25 целей",
        "icon": "💎",
        "points": 250,
        "category": "goals",
        "rarity": "legendary",
        "requirements": [{"kind": "statistic", "statistic": "goals_completed", "operator": ">=", "threshold": 25}],
        "sort_order": 5,
    },
    {
        "key": "strength_focus",
        "name": "Сила в цифрах",
        "description": "Выполните 3 силовые цели",
        "icon": "🏋️",
        "points": 40,
        "category": "goals",
        "rarity": "rare",
        "requirements": [{"kind": "goals_in_category", "category": "strength", "count": 3}],
        "sort_order": 6,
    },
    # Серии
    {
        "key": "consistency_starter",
        "name": "Начало привычки",
        "description": "Серия активности 3 дня подряд",
        "icon": "🔥",
        "points": 30,
        "category": "streak",
        "rarity": "common",
        "requirements": [{"kind": "statistic", "statistic": "current_streak", "operator": ">=", "threshold": 3}],
        "sort_order": 10,
    },
    {
        "key": "week_warrior",
        "name": "Воин недели",
        "description": "Серия активности 7 дней подряд",
        "icon": "⚡",
        "points": 70,
        "category": "streak",
        "rarity": "rare",
        "requirements": [{"kind": "statistic", "statistic": "current_streak", "operator": ">=", "threshold": 7}],
        "sort_order": 11,
    },
    {
        "key": "streak_master",
        "name": "Мастер серий",
        "description": "Серия активности 14 дней подряд",
        "icon": "🌟",
        "points": 150,
        "category": "streak",
        "rarity": "epic",
        "requirements": [{"kind": "statistic", "statistic": "current_streak", "operator": ">=", "threshold": 14}],
        "sort_order": 12,
    },
    {
        "key": "unstoppable_force",
        "name": "Неудержимый",
        "description": "Серия активности 30 дней подряд",
        "icon": "🚀",
        "points": 300,
        "category": "streak",
        "rarity": "legendary",
        "requirements": [{"kind": "statistic", "statistic": "current_streak", "operator": ">=", "threshold": 30}],
        "sort_order": 13,
    },
    # Тренировки
    {
        "key": "first_workout",
        "name": "Первая тренировка",
        "description": "Завершите первую тренировку",
        "icon": "💪",
        "points": 10,
        "category": "milestone",
        "rarity": "common",
        "requirements": [{"kind": "statistic", "statistic": "workouts_completed", "operator": ">=", "threshold": 1}],
        "sort_order": 20,
    },
    {
        "key": "ten_workouts",
        "name": "Десятка",
        "description": "Завершите 10 тренировок",
        "icon": "🥉",
        "points": 50,
        "category": "milestone",
        "rarity": "rare",
        "requirements": [{"kind": "statistic", "statistic": "workouts_completed", "operator": ">=", "threshold": 10}],
        "sort_order": 21,
    },
    {
        "key": "calorie_burner",
        "name": "Печь",
        "description": "Сожгите 5000 ккал на тренировках",
        "icon": "🔥",
        "points": 100,
        "category": "milestone",
        "rarity": "epic",
        "requirements": [
            {"kind": "statistic", "statistic": "total_calories_burned", "operator": ">=", "threshold": 5000}
        ],
        "sort_order": 22,
    },
    {
        "key": "weekly_warrior",
        "name": "Продуктивная неделя",
        "description": "Выполните 5 целей за неделю",
        "icon": "📅",
        "points": 75,
        "category": "milestone",
        "rarity": "rare",
        "requirements": [
            {"kind": "statistic", "statistic": "weekly_goals_completed", "operator": ">=", "threshold": 5}
        ],
        "sort_order": 23,
    },
    # Уровни и очки
    {
        "key": "level_up",
        "name": "Новый уровень",
        "description": "Достигните 5 уровня",
        "icon": "⬆️",
        "points": 50,
        "category": "progress",
        "rarity": "common",
        "requirements": [{"kind": "statistic", "statistic": "level", "operator": ">=", "threshold": 5}],
        "sort_order": 30,
    },
    {
        "key": "point_collector",
        "name": "Коллекционер очков",
        "description": "Наберите 500 очков",
        "icon": "💰",
        "points": 50,
        "category": "progress",
        "rarity": "common",
        "requirements": [{"kind": "statistic", "statistic": "total_points", "operator": ">=", "threshold": 500}],
        "sort_order": 31,
    },
    {
        "key": "goal_creator",
        "name": "Планировщик",
        "description": "Создайте 10 целей",
        "icon": "📝",
        "points": 50,
        "category": "special",
        "rarity": "common",
        "requirements": [{"kind": "statistic", "statistic": "goals_created", "operator": ">=", "threshold": 10}],
        "sort_order": 40,
    },
]

# Упражнения шаблонов ссылаются на INITIAL_EXERCISES по имени
INITIAL_TEMPLATES = [
    {
        "name": "Full Body для начинающих",
        "description": "Базовая тренировка на все тело без оборудования.",
        "difficulty": "beginner",
        "type": "strength",
        "focus": "full_body",
        "intensity": "low",
        "exercises": [
            {"exercise": "Bodyweight Squat", "sets": 3, "reps": 12, "rest_seconds": 60},
            {"exercise": "Push-Up", "sets": 3, "reps": 10, "rest_seconds": 60},
            {"exercise": "Lunge", "sets": 2, "reps": 10, "rest_seconds": 60},
            {"exercise": "Plank", "sets": 3, "duration_seconds": 30, "rest_seconds": 30},
        ],
    },
    {
        "name": "Силовая: верх тела",
        "description": "Жимы и тяги со свободными весами.",
        "difficulty": "intermediate",
        "type": "strength",
        "focus": "upper_body",
        "intensity": "medium",
        "exercises": [
            {"exercise": "Bench Press", "sets": 4, "reps": 8, "weight": 60, "rest_seconds": 120},
            {"exercise": "Bent-Over Row", "sets": 4, "reps": 8, "weight": 50, "rest_seconds": 120},
            {"exercise": "Overhead Press", "sets": 3, "reps": 10, "weight": 35, "rest_seconds": 90},
            {"exercise": "Biceps Curl", "sets": 3, "reps": 12, "weight": 12, "rest_seconds": 60},
        ],
    },
    {
        "name": "HIIT 15 минут",
        "description": "Интервальная кардио-тренировка.",
        "difficulty": "intermediate",
        "type": "hiit",
        "focus": "full_body",
        "intensity": "high",
        "exercises": [
            {"exercise": "Jumping Jacks", "sets": 3, "duration_seconds": 45, "rest_seconds": 15},
            {"exercise": "Burpee", "sets": 3, "duration_seconds": 30, "rest_seconds": 30},
            {"exercise": "Mountain Climber", "sets": 3, "duration_seconds": 30, "rest_seconds": 30},
            {"exercise": "Crunch", "sets": 3, "reps": 20, "rest_seconds": 30},
        ],
    },
]
