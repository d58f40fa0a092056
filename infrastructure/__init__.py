# infrastructure/__init__.py
"""Инфраструктура приложения: логирование, БД, хранилище FSM бота."""

from .logger import logger, setup_logging
from .redis_storage import check_redis_connection, create_fsm_storage
from .database import engine, async_session_maker, get_db_session, init_db, close_db

__all__ = [
    "logger",
    "setup_logging",
    "create_fsm_storage",
    "check_redis_connection",
    "engine",
    "async_session_maker",
    "get_db_session",
    "init_db",
    "close_db",
]
