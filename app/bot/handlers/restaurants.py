# app/bot/handlers/restaurants.py
"""
Обработчики бота: сводки по ресторану (только чтение).

Сценарий:
1. /start -> приветствие + клавиатура с ресторанами
2. Нажал ресторан -> запоминаем его id в FSM, кнопки Order / Workers / Info
3. Order   -> по сообщению на каждый заказ (новые сверху)
   Workers -> по сообщению на каждого сотрудника
   Info    -> карточка ресторана

Без выбранного ресторана кнопки просят сначала выбрать ресторан.
"""

from typing import Optional

from aiogram import F, Router, types
from aiogram.filters import CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import ReplyKeyboardRemove
from sqlalchemy.ext.asyncio import AsyncSession

from app.bot.keyboards import actions_keyboard, restaurants_keyboard
from app.bot.services import summaries
from infrastructure.database.repositories import (
    OrderRepository,
    RestaurantRepository,
    UserRepository,
)

import structlog

logger = structlog.get_logger()

router = Router()

# Ключ в FSM data
SELECTED_RESTAURANT = "restaurant_id"


# ==========================================
# ВСПОМОГАТЕЛЬНОЕ
# ==========================================

async def _ask_restaurant(message: types.Message, session: AsyncSession, text: str):
    """Ответить текстом + клавиатура ресторанов."""
    restaurants = await RestaurantRepository(session).list_all()
    keyboard = restaurants_keyboard(restaurants)
    if keyboard is None:
        await message.answer(summaries.NO_RESTAURANTS, reply_markup=ReplyKeyboardRemove())
        return
    await message.answer(text, reply_markup=keyboard)


async def _selected_restaurant_id(state: FSMContext) -> Optional[int]:
    data = await state.get_data()
    return data.get(SELECTED_RESTAURANT)


async def _reply_error(message: types.Message, handler: str, error: Exception):
    logger.error(
        "bot_handler_error",
        handler=handler,
        user_id=message.from_user.id if message.from_user else None,
        error=str(error),
        error_type=type(error).__name__
    )
    await message.answer(str(error) or summaries.SOMETHING_WENT_WRONG)


# ==========================================
# КОМАНДА: /start
# ==========================================

@router.message(CommandStart())
async def cmd_start(message: types.Message, state: FSMContext, session: AsyncSession):
    try:
        await state.clear()
        first_name = message.from_user.first_name if message.from_user else None
        await _ask_restaurant(message, session, summaries.greeting(first_name))
    except Exception as e:
        await _reply_error(message, "start", e)


# ==========================================
# КНОПКА: Order
# ==========================================

@router.message(F.text == summaries.ACTION_ORDER)
async def show_orders(message: types.Message, state: FSMContext, session: AsyncSession):
    try:
        restaurant_id = await _selected_restaurant_id(state)
        if restaurant_id is None:
            await _ask_restaurant(message, session, summaries.CHOOSE_RESTAURANT_FIRST)
            return

        orders = await OrderRepository(session).list_by_restaurant(restaurant_id)
        if not orders:
            await message.answer(summaries.NO_ORDERS)
            return

        for order in orders:
            await message.answer(summaries.order_summary(order))

        await message.answer(summaries.ASK_ACTION, reply_markup=actions_keyboard())
    except Exception as e:
        await _reply_error(message, "orders", e)


# ==========================================
# КНОПКА: Workers
# ==========================================

@router.message(F.text == summaries.ACTION_WORKERS)
async def show_workers(message: types.Message, state: FSMContext, session: AsyncSession):
    try:
        restaurant_id = await _selected_restaurant_id(state)
        if restaurant_id is None:
            await _ask_restaurant(message, session, summaries.CHOOSE_RESTAURANT_FIRST)
            return

        workers = await UserRepository(session).list_by_restaurant(restaurant_id)
        if not workers:
            await message.answer(summaries.NO_WORKERS)
            return

        for worker in workers:
            await message.answer(summaries.worker_summary(worker))

        await message.answer(summaries.ASK_ACTION, reply_markup=actions_keyboard())
    except Exception as e:
        await _reply_error(message, "workers", e)


# ==========================================
# КНОПКА: Info
# ==========================================

@router.message(F.text == summaries.ACTION_INFO)
async def show_info(message: types.Message, state: FSMContext, session: AsyncSession):
    try:
        restaurant_id = await _selected_restaurant_id(state)
        if restaurant_id is None:
            await _ask_restaurant(message, session, summaries.CHOOSE_RESTAURANT_FIRST)
            return

        restaurant = await RestaurantRepository(session).get_by_id_with_relations(restaurant_id)
        if restaurant is None:
            # Ресторан удалили пока он был выбран
            await state.update_data(**{SELECTED_RESTAURANT: None})
            await message.answer(summaries.RESTAURANT_NOT_FOUND)
            return

        await message.answer(summaries.restaurant_info(restaurant))
        await message.answer(summaries.ASK_ACTION, reply_markup=actions_keyboard())
    except Exception as e:
        await _reply_error(message, "info", e)


# ==========================================
# ЛЮБОЙ ДРУГОЙ ТЕКСТ = имя ресторана
# ==========================================

@router.message(F.text)
async def select_restaurant(message: types.Message, state: FSMContext, session: AsyncSession):
    try:
        restaurant = await RestaurantRepository(session).get_by_name(message.text)
        if restaurant is None:
            await _ask_restaurant(message, session, summaries.RESTAURANT_NOT_FOUND)
            return

        await state.update_data(**{SELECTED_RESTAURANT: restaurant.id})
        logger.info(
            "bot_restaurant_selected",
            user_id=message.from_user.id if message.from_user else None,
            restaurant_id=restaurant.id
        )

        await message.answer(
            summaries.restaurant_selected(restaurant.name),
            reply_markup=actions_keyboard()
        )
    except Exception as e:
        await _reply_error(message, "select_restaurant", e)
