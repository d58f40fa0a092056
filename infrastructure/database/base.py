# infrastructure/database/base.py
"""
🗄️ ПОДКЛЮЧЕНИЕ К БД

Один async engine на процесс и фабрика сессий.

Правило: одна сессия = один запрос (HTTP или сообщение бота).
Коммитит тот, кто пишет (сервис), а не репозиторий.
"""

from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from config.settings import config

import structlog

logger = structlog.get_logger()


# Base - базовый класс для всех моделей
Base = declarative_base()


def enable_sqlite_foreign_keys(engine: AsyncEngine):
    """
    SQLite по умолчанию НЕ проверяет внешние ключи.

    Включаем PRAGMA на каждом новом соединении, чтобы удаление
    продукта из заказа падало так же, как в PostgreSQL (-> 409).
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    config.async_database_url,
    echo=config.database_echo,
    pool_pre_ping=True,
)
enable_sqlite_foreign_keys(engine)

# expire_on_commit=False: после commit объекты остаются читаемыми
# (иначе обращение к полю после commit = новый запрос в async = ошибка)
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """
    FastAPI dependency: отдаёт сессию на время запроса.

    Пример:
        @router.get("/")
        async def handler(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_maker() as session:
        yield session


async def init_db():
    """Создаём таблицы если их нет (миграций нет)."""

    # импорт нужен чтобы модели зарегистрировались в Base.metadata
    from infrastructure.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("database_tables_ready", url=engine.url.render_as_string(hide_password=True))


async def close_db():
    """Закрываем пул соединений."""
    await engine.dispose()
