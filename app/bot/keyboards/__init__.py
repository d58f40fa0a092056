"""Инициализация клавиатур."""

from .restaurants import actions_keyboard, restaurants_keyboard

__all__ = ["actions_keyboard", "restaurants_keyboard"]
