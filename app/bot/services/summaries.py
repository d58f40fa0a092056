# app/bot/services/summaries.py
"""
📝 ТЕКСТЫ БОТА

Чистые функции: ORM-объект на входе, строка на выходе.
Никакого Telegram и БД, поэтому легко тестировать.

Тексты на узбекском (для персонала ресторанов).
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.services.pricing import quantize
from config.settings import config


# ==========================================
# КОРОТКИЕ ОТВЕТЫ
# ==========================================

ACTION_ORDER = "Order"
ACTION_WORKERS = "Workers"
ACTION_INFO = "Info"
ACTIONS = (ACTION_ORDER, ACTION_WORKERS, ACTION_INFO)

ASK_ACTION = "Qanday malumot kerak:"
CHOOSE_RESTAURANT_FIRST = "Avval restoran tanlang"
NO_RESTAURANTS = "Hali restoranlar yo'q"
RESTAURANT_NOT_FOUND = "Restoran topilmadi"
NO_ORDERS = "Hali hech qanday orderlar yoq"
NO_WORKERS = "Hali bu restoranda hech kim ishlamaydi"
SOMETHING_WENT_WRONG = "Xatolik yuz berdi"


def format_money(amount) -> str:
    """Decimal("25000") -> "25 000.00 so'm" """
    value = quantize(amount if amount is not None else Decimal("0"))
    return f"{value:,}".replace(",", " ") + f" {config.currency}"


def format_date(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%d.%m.%Y %H:%M")


def _enum_value(value) -> str:
    return getattr(value, "value", value) or "-"


# ==========================================
# ПРИВЕТСТВИЕ / ВЫБОР РЕСТОРАНА
# ==========================================

def greeting(first_name: Optional[str]) -> str:
    return f"Hush kelibsiz {first_name or ''}🤗\nQaysi Restoran haqida malumot kerak?:"


def restaurant_selected(name: str) -> str:
    return f"Restoran tanlandi: {name}\nQanday malumot kerak?"


# ==========================================
# ЗАКАЗ
# ==========================================

def order_summary(order) -> str:
    """
    Карточка заказа: шапка + позиции.

    Сумма строки = текущая цена продукта * количество,
    итог = зафиксированный order.total.
    """
    restaurant_name = order.restaurant.name if order.restaurant else "-"

    lines = [
        f"📌 Zakaz: {order.id}",
        f"🍽️ Restoran: {restaurant_name}",
        f"🪑 Table: {order.table}",
        f"💰 Summa: {format_money(order.total)}",
        f"📅 Date: {format_date(order.created_at)}",
        f"📊 Status: {_enum_value(order.status)}",
        "",
        "🍱 Taomlar:",
    ]

    for item in order.order_items:
        product = item.product
        line_sum = product.price * item.quantity
        lines.append(f"- {product.name} {item.quantity}ta = {format_money(line_sum)}")

    lines.append("")
    lines.append(f"💵 Jami: {format_money(order.total)}")

    return "\n".join(lines)


# ==========================================
# СОТРУДНИК
# ==========================================

def worker_summary(user) -> str:
    region_name = user.region.name if user.region else "-"

    return "\n".join([
        f"👤 Ishci: {user.name}",
        f"📱 Telefon: {user.phone}",
        f"🏷️ Role: {_enum_value(user.role)}",
        f"💰 Balance: {format_money(user.balance)}",
        f"🏠 Region: {region_name}",
        f"📅 Qachondan beri ishlaydi: {format_date(user.created_at)}",
    ])


# ==========================================
# КАРТОЧКА РЕСТОРАНА
# ==========================================

def restaurant_info(restaurant) -> str:
    """
    Полная карточка: контакты, баланс, меню, персонал,
    число заказов и их сумма, категории.

    restaurant должен прийти с загруженными products, users,
    orders и categories (RestaurantRepository.get_by_id_with_relations).
    """
    revenue = sum((order.total for order in restaurant.orders), Decimal("0"))

    lines = [
        "🏢 Restoran haqida to'liq ma'lumot:",
        "",
        f"📛 Nomi: {restaurant.name}",
        f"📍 Manzil: {restaurant.address or '-'}",
        f"📞 Telefon: {restaurant.phone}",
        f"💳 Balans: {format_money(restaurant.balance)}",
        f"📅 Ochilgan sana: {format_date(restaurant.created_at)}",
        "",
        f"🍽️ Taomlar ({len(restaurant.products)} ta):",
    ]
    lines.extend(f"- {p.name}: {format_money(p.price)}" for p in restaurant.products)

    lines.append("")
    lines.append(f"👥 Xodimlar ({len(restaurant.users)} ta):")
    lines.extend(f"- {u.name} ({_enum_value(u.role)})" for u in restaurant.users)

    lines.append("")
    lines.append(f"📊 Zakazlar ({len(restaurant.orders)} ta):")
    lines.append(f"- Jami summa: {format_money(revenue)}")

    lines.append("")
    lines.append(f"📂 Kategoriyalar ({len(restaurant.categories)} ta):")
    lines.extend(f"- {c.name}" for c in restaurant.categories)

    return "\n".join(lines)
