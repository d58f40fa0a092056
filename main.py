# main.py
"""
🚀 ГЛАВНЫЙ ФАЙЛ ЗАПУСКА

Поднимает одним процессом:
- REST API бэк-офиса (FastAPI + uvicorn)
- Telegram бота со сводками по ресторанам (aiogram, polling)

BOT_TOKEN не задан -> работает только API.

Запуск:
    python main.py
"""

import asyncio

from aiogram import Bot, Dispatcher
import uvicorn

from config.settings import config
from infrastructure.logger import setup_logging
from infrastructure.database.base import init_db
from infrastructure.redis_storage import check_redis_connection, create_fsm_storage
from app.api import create_app
from app.bot.handlers import main_router
from app.bot.middlewares import DatabaseMiddleware, LoggingMiddleware

import structlog

logger = structlog.get_logger()


# ==========================================
# 🤖 БОТ
# ==========================================

def create_dispatcher() -> Dispatcher:
    """Dispatcher с хранилищем FSM, middleware и роутерами."""
    dp = Dispatcher(storage=create_fsm_storage())

    # Порядок важен: сначала логируем, затем даём сессию БД
    dp.message.middleware(LoggingMiddleware())
    dp.message.middleware(DatabaseMiddleware())

    dp.include_router(main_router)
    return dp


async def run_bot():
    bot = Bot(token=config.bot_token)
    dp = create_dispatcher()

    if not await check_redis_connection(dp.storage):
        logger.warning("redis_unavailable")

    try:
        me = await bot.get_me()
        logger.info("polling_started", bot_username=f"@{me.username}")
        await dp.start_polling(bot)

    except asyncio.CancelledError:
        logger.info("polling_cancelled")
        raise

    finally:
        await dp.storage.close()
        await bot.session.close()
        logger.info("bot_session_closed")


# ==========================================
# 🌐 API
# ==========================================

async def run_api():
    server = uvicorn.Server(uvicorn.Config(
        create_app(),
        host=config.api_host,
        port=config.api_port,
        log_level="info",
        access_log=True,
    ))
    logger.info("api_starting", host=config.api_host, port=config.api_port)
    await server.serve()


# ==========================================
# 🚀 ГЛАВНАЯ ФУНКЦИЯ
# ==========================================

async def main():
    setup_logging()
    logger.info("application_start", environment=config.environment)

    # Таблицы нужны и боту, и API: создаём до запуска обоих
    await init_db()

    tasks = [run_api()]
    if config.bot_token:
        tasks.append(run_bot())
    else:
        logger.warning("bot_token_missing", message="BOT_TOKEN не задан, бот не запущен")

    # Упал один -> падает всё приложение
    await asyncio.gather(*tasks)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("app_interrupted")
