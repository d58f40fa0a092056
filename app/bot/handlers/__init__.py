# app/bot/handlers/__init__.py
"""
🤖 BOT HANDLERS (обработчики команд)

Все роутеры бота собираются в main_router,
main.py подключает его к Dispatcher.
"""

from aiogram import Router

from .restaurants import router as restaurants_router

main_router = Router()
main_router.include_router(restaurants_router)

__all__ = ["main_router"]
