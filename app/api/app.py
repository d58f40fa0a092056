# app/api/app.py
"""
FastAPI приложение: REST API бэк-офиса ресторанов.

Сервисы кидают BackofficeError (app/errors.py),
здесь они превращаются в HTTP-ответ:

    {"detail": "<текст>", "error": "<not_found | validation | ...>"}
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routes import routers
from app.errors import BackofficeError
from infrastructure.database.base import close_db, init_db

import structlog

logger = structlog.get_logger()


# ==========================================
# LIFESPAN (старт / выключение)
# ==========================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Таблицы создаём при старте, пул соединений закрываем при выключении."""
    await init_db()
    logger.info("api_startup")
    try:
        yield
    finally:
        await close_db()
        logger.info("api_shutdown")


# ==========================================
# ОШИБКИ -> HTTP
# ==========================================

async def backoffice_error_handler(request: Request, exc: BackofficeError):
    logger.info(
        "request_rejected",
        path=request.url.path,
        method=request.method,
        status=exc.status_code,
        error=exc.kind,
        detail=exc.message
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(BackofficeError, backoffice_error_handler)


# ==========================================
# СБОРКА ПРИЛОЖЕНИЯ
# ==========================================

def create_app(with_lifespan: bool = True) -> FastAPI:
    """
    Собрать приложение.

    with_lifespan=False - для тестов: таблицы создаёт фикстура,
    а не init_db().
    """
    app = FastAPI(
        title="Restaurant Backoffice API",
        description="Рестораны, меню, заказы, долги и журнал денег",
        version="1.0.0",
        lifespan=lifespan if with_lifespan else None,
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        """
        Проверка что приложение живо (Docker, мониторинг).

        GET /health -> {"status": "ok", "service": "backoffice"}
        """
        return {"status": "ok", "service": "backoffice"}

    for router in routers:
        app.include_router(router)

    return app
