# app/bot/middlewares/logging.py
"""
Middleware для логирования событий бота.

Пишем что пришло (bot_message_received) и сколько
обработчик работал (bot_update_handled, duration_ms).
"""

import time
from typing import Any, Awaitable, Callable

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message

import structlog

logger = structlog.get_logger()


class LoggingMiddleware(BaseMiddleware):

    async def __call__(
        self,
        handler: Callable[[Message | CallbackQuery, dict[str, Any]], Awaitable[Any]],
        event: Message | CallbackQuery,
        data: dict[str, Any]
    ) -> Any:
        user_id = event.from_user.id if event.from_user else None

        if isinstance(event, Message):
            logger.info(
                "bot_message_received",
                user_id=user_id,
                chat_id=event.chat.id,
                text=event.text[:50] if event.text else None
            )
        elif isinstance(event, CallbackQuery):
            logger.info(
                "bot_callback_received",
                user_id=user_id,
                callback_data=event.data
            )

        started = time.perf_counter()
        try:
            return await handler(event, data)
        finally:
            logger.debug(
                "bot_update_handled",
                user_id=user_id,
                duration_ms=round((time.perf_counter() - started) * 1000, 1)
            )
