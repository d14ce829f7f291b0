from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.rbac import require_admin
from app.core.seed_catalog import get_or_create_system_user, seed_catalog
from app.models.user import User
from app.schemas.admin import SeedCatalogResponse

router = APIRouter(tags=["admin"])


@router.post("/seed-catalog", response_model=SeedCatalogResponse)
async def seed_catalog_endpoint(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Догрузить упражнения, достижения и публичные шаблоны.

    Повторный вызов ничего не дублирует: создаются только отсутствующие записи.
    """
    system_user = await get_or_create_system_user(db)
    created = await seed_catalog(db, system_user.id)
    return SeedCatalogResponse(system_user_id=system_user.id, **created)
