from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "FitnessPro"
    DATABASE_URL: str = "postgresql://fitness_user:fitness_password@db:5432/fitness_db"
    SECRET_KEY: str = "SECRET_KEY_FOR_FITNESSPRO"
    REFRESH_SECRET_KEY: str = "REFRESH_SECRET_KEY_FOR_FITNESSPRO"
    # При продакшн/обычной разработке лучше не пересоздавать БД на каждом старте
    RESET_DATABASE: bool = False
    SEED_CATALOG_ON_STARTUP: bool = True
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    LOG_LEVEL: str = "INFO"

    # Без REDIS_URL статистика считается на каждый запрос
    REDIS_URL: Optional[str] = None
    STATS_CACHE_TTL: int = 900

    # Тренировки и геймификация
    ALLOW_CONCURRENT_SESSIONS: bool = True
    ACHIEVEMENTS_ENABLED: bool = True
    DEFAULT_CALORIE_RATE: float = 6.0
    SYSTEM_USER_EMAIL: str = "system@fitnesspro.app"
    SYSTEM_USER_NICKNAME: str = "FitnessPro"
    CREATE_DEMO_USER: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

settings = Settings()
