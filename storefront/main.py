# storefront/main.py
# Точка входа FastAPI. Создание таблиц выполняется в lifespan с повторными попытками.

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from storefront import __version__
from storefront.api import admin, cart, client, health, products
from storefront.core.config import Settings, load_settings
from storefront.core.errors import install_exception_handlers
from storefront.core.security import make_password_context
from storefront.db.base import Base
from storefront.db.session import make_engine, make_session_factory

# Импорт моделей, чтобы SQLAlchemy видел их определения
import storefront.models  # noqa: F401

logger = logging.getLogger(__name__)


def try_create_tables(engine: Engine, retries: int = 5, delay: float = 2) -> bool:
    """
    Пытаемся создать таблицы с повторными попытками.
    Если БД недоступна, логируем ошибку и пробуем снова.

    Args:
        engine: Engine целевой базы
        retries: Количество попыток подключения
        delay: Задержка между попытками в секундах

    Returns:
        True если таблицы созданы/существуют, False если все попытки исчерпаны
    """
    for attempt in range(1, retries + 1):
        try:
            logger.info(f"Creating tables ({attempt}/{retries})...")
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables created (or already exist).")
            return True
        except Exception as e:
            logger.warning(f"Attempt {attempt}/{retries} failed to create tables: {e}")
            if attempt < retries:
                logger.info(f"Waiting {delay}s before retry...")
                time.sleep(delay)
    logger.error(f"Could not create tables after {retries} retries.")
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Управление жизненным циклом приложения.
    Запускается при старте и завершении приложения.
    """
    settings: Settings = app.state.settings
    logger.info("Storefront API starting up...")
    if not try_create_tables(app.state.engine, settings.DB_INIT_RETRIES, settings.DB_INIT_DELAY):
        if settings.is_production:
            raise RuntimeError("Cannot start application: database tables creation failed")
        logger.error("Failed to create database tables. Application may not work correctly.")

    yield

    logger.info("Storefront API shutting down...")
    app.state.engine.dispose()
    logger.info("Database connection closed")


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """Собирает приложение; настройки и engine внедряются, глобального состояния нет."""
    if settings is None:
        settings = load_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title="Storefront API",
        description="Каталог товаров, корзина и админ-аутентификация",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine if engine is not None else make_engine(settings.DATABASE_URL)
    app.state.session_factory = make_session_factory(app.state.engine)
    app.state.pwd_context = make_password_context(settings.BCRYPT_ROUNDS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    install_exception_handlers(app)

    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
    app.include_router(products.router, prefix="/api/products", tags=["products"])
    app.include_router(cart.router, prefix="/api/cart", tags=["cart"])
    app.include_router(health.router)
    # Должен подключаться последним: перехватывает все остальные GET
    app.include_router(client.router)

    return app


def main() -> None:
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
