# app/bot/keyboards/restaurants.py
"""
Клавиатуры бота.

Обе - ReplyKeyboardMarkup (кнопки снизу экрана):
текст кнопки приходит боту обычным сообщением.
"""

from typing import Iterable, Optional

from aiogram.types import KeyboardButton, ReplyKeyboardMarkup

from app.bot.services.summaries import ACTIONS


def restaurants_keyboard(restaurants: Iterable) -> Optional[ReplyKeyboardMarkup]:
    """
    По кнопке на ресторан, одна в строке.

    Ресторанов нет -> None (пустую клавиатуру Telegram не примет).
    """
    rows = [[KeyboardButton(text=restaurant.name)] for restaurant in restaurants]
    if not rows:
        return None

    return ReplyKeyboardMarkup(
        keyboard=rows,
        resize_keyboard=True,
        # Клавиатура скроется после нажатия
        one_time_keyboard=True
    )


def actions_keyboard() -> ReplyKeyboardMarkup:
    """Order / Workers / Info в одну строку."""
    return ReplyKeyboardMarkup(
        keyboard=[[KeyboardButton(text=action) for action in ACTIONS]],
        resize_keyboard=True,
        one_time_keyboard=True
    )
