# app/services/dashboard.py
"""Цифры для главной страницы админки."""

from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import OrderStatus, Product, Restaurant, User
from infrastructure.database.repositories import OrderRepository, count_rows


async def dashboard_stats(session: AsyncSession) -> dict:
    orders = OrderRepository(session)

    return {
        "total_users": await count_rows(session, User),
        "total_restaurants": await count_rows(session, Restaurant),
        "total_products": await count_rows(session, Product),
        "total_orders": await orders.count(),
        "pending_orders": await orders.count(OrderStatus.PENDING),
        "total_revenue": await orders.revenue(),
    }
