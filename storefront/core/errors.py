# storefront/core/errors.py
# Доменные исключения и обработчики ошибок: все ответы об ошибках имеют вид {"message": ...}.
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class DuplicateUsernameError(Exception):
    """Администратор с таким username уже существует."""


class ProductNotFoundError(Exception):
    """Товар, на который ссылается запрос, не найден."""


class CartQuantityLimitError(Exception):
    """Количество в строке корзины превысило бы допустимый максимум."""


class CartUpdateConflictError(Exception):
    """Параллельные изменения не дали записать строку корзины."""


def _format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Validation error"
    first = errors[0]
    # loc вида ("body", "price") -> "price"
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    msg = first.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = _format_validation_error(exc)
    logger.info(f"Validation failed for {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


def install_exception_handlers(app: FastAPI) -> None:
    """Регистрирует обработчики ошибок приложения."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Глобальный обработчик ошибок."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        development = request.app.state.settings.ENVIRONMENT == "development"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": str(exc) if development else "Internal server error"},
        )
