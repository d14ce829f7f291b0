import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from app.core.config import settings
from app.core.exceptions import DomainError, InvalidStateError

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")

engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    future=True,
    pool_pre_ping=True
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False
)

async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def transaction(session: AsyncSession):
    """Одна транзакция на операцию сервиса: commit в конце, rollback на любой ошибке."""
    try:
        yield session
        await session.commit()
    except StaleDataError:
        await session.rollback()
        logger.error("Транзакция откатена: объект изменен параллельным запросом")
        raise InvalidStateError("Объект был изменен параллельным запросом")
    except DomainError:
        await session.rollback()
        raise
    except Exception:
        await session.rollback()
        logger.exception("Транзакция откатена из-за ошибки")
        raise
