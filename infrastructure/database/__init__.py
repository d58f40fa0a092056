# infrastructure/database/__init__.py
"""
🗄️ DATABASE ИНИЦИАЛИЗАЦИЯ

Экспортируем engine, фабрику сессий и хелперы старта/остановки БД.
"""

from infrastructure.database.base import (
    Base,
    engine,
    enable_sqlite_foreign_keys,
    async_session_maker,
    get_db_session,
    init_db,
    close_db,
)

__all__ = [
    "Base",
    "engine",
    "enable_sqlite_foreign_keys",
    "async_session_maker",
    "get_db_session",
    "init_db",
    "close_db",
]
