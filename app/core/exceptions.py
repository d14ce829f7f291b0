"""
Доменные ошибки сервисов и их отображение в HTTP-ответы.

Сервисы ничего не знают про HTTP: они бросают наследников DomainError,
а register_exception_handlers превращает их в JSON {"detail": ...}.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DomainError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(DomainError):
    """Запрошенная тренировка/шаблон/цель/пользователь не существует."""
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(DomainError):
    """Объект принадлежит другому пользователю."""
    status_code = status.HTTP_403_FORBIDDEN


class InvalidStateError(DomainError):
    """Недопустимый переход жизненного цикла (например, повторное завершение)."""
    status_code = status.HTTP_409_CONFLICT


class ValidationError(DomainError):
    """Некорректные данные запроса, которые не отсекла схема."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
