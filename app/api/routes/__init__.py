# app/api/routes/__init__.py
"""Роутеры REST API, по одному на ресурс."""

from app.api.routes import (
    brands,
    categories,
    dashboard,
    debts,
    orders,
    products,
    regions,
    restaurants,
    users,
    withdraws,
)

routers = [
    users.router,
    regions.router,
    brands.router,
    restaurants.router,
    categories.router,
    products.router,
    orders.router,
    debts.router,
    withdraws.router,
    dashboard.router,
]

__all__ = ["routers"]
