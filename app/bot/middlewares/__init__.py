# app/bot/middlewares/__init__.py
"""
🔄 MIDDLEWARE (перехватчики)

Срабатывают для КАЖДОГО сообщения:
- LoggingMiddleware  - пишет событие в лог
- DatabaseMiddleware - кладёт session в обработчик
"""

from .database import DatabaseMiddleware
from .logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
    "DatabaseMiddleware",
]
