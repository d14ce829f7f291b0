import logging

from fastapi import Depends, HTTPException, status

from app.core.dependencies import get_current_user
from app.models.user import User, RoleEnum

logger = logging.getLogger(__name__)


def require_role(*allowed_roles: RoleEnum):
    """Зависимость: пропускает только пользователей с одной из ролей allowed_roles.

    Владение тренировками и целями проверяют сервисы, а не роль.
    """
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role in allowed_roles:
            return current_user
        logger.warning(
            f"Пользователь {current_user.id} ({current_user.role.value}) "
            f"без доступа: нужна роль {', '.join(r.value for r in allowed_roles)}"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Недостаточно прав для выполнения этого действия"
        )
    return role_checker


# Загрузка каталога упражнений, достижений и публичных шаблонов
require_admin = require_role(RoleEnum.admin)
