# infrastructure/redis_storage.py
"""
🔴 FSM STORAGE

Бот хранит выбранный ресторан в FSM data.
REDIS_URL задан -> RedisStorage (переживает перезапуск бота),
не задан -> MemoryStorage (выбор теряется при перезапуске).
"""

from typing import Optional

from aiogram.fsm.storage.base import BaseStorage
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.fsm.storage.redis import RedisStorage
from redis.asyncio.client import Redis

from config.settings import config

import structlog

logger = structlog.get_logger()


def create_fsm_storage(redis_url: Optional[str] = None) -> BaseStorage:
    url = redis_url if redis_url is not None else config.redis_url

    if not url:
        logger.info("fsm_storage_selected", storage="memory")
        return MemoryStorage()

    redis = Redis.from_url(url)
    logger.info("fsm_storage_selected", storage="redis")
    return RedisStorage(redis=redis)


async def check_redis_connection(storage: BaseStorage) -> bool:
    """
    Пингуем Redis при старте (для диагностики).

    MemoryStorage -> True, проверять нечего.
    """
    if not isinstance(storage, RedisStorage):
        return True

    try:
        await storage.redis.ping()
        return True
    except Exception as e:
        logger.error("redis_connection_error", error=str(e))
        return False


__all__ = [
    "create_fsm_storage",
    "check_redis_connection",
]
