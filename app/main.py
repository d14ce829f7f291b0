import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from app.api.router import api_router
from app.core.config import settings
from app.core.database import init_database
from app.core.db import AsyncSessionLocal
from app.core.exceptions import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.seed_catalog import get_or_create_system_user, seed_catalog
from app.core.test_data import DEMO_EMAIL, create_test_data
from app.models.user import User

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="FitnessPro - workouts, goals and achievements")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8080",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    await init_database()

    async with AsyncSessionLocal() as session:
        if settings.SEED_CATALOG_ON_STARTUP:
            system_user = await get_or_create_system_user(session)
            await seed_catalog(session, system_user.id)

        if settings.CREATE_DEMO_USER:
            result = await session.execute(select(User).where(User.email == DEMO_EMAIL))
            existing_user = result.scalar_one_or_none()
            if not existing_user:
                await create_test_data(session)
            else:
                logger.info(f"Демо-пользователь уже существует: {existing_user.email} (ID: {existing_user.id})")

    logger.info("Приложение запущено")


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "message": "FitnessPro - workouts, goals and achievements",
        "links": {
            "api": "/api/v1",
            "docs": "/docs",
            "redoc": "/redoc",
        }
    }
