# app/bot/middlewares/database.py
"""
Middleware для подачи БД сессии в каждый обработчик.

1. Создаем сессию
2. Передаем её обработчику (аргумент session)
3. После обработчика закрываем сессию

Бот только читает, поэтому commit здесь не нужен.
"""

from typing import Any, Awaitable, Callable

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message

from infrastructure.database.base import async_session_maker


class DatabaseMiddleware(BaseMiddleware):
    """Middleware который подает AsyncSession в контекст."""

    def __init__(self, session_maker=async_session_maker):
        self.session_maker = session_maker

    async def __call__(
        self,
        handler: Callable[[Message | CallbackQuery, dict[str, Any]], Awaitable[Any]],
        event: Message | CallbackQuery,
        data: dict[str, Any]
    ) -> Any:
        async with self.session_maker() as session:
            data["session"] = session
            return await handler(event, data)
