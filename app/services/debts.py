# app/services/debts.py
"""
Сервис долгов.

Долг на заказ: проверяем что заказ есть, принадлежит ресторану
и долг не больше суммы заказа. После записи долга заказ
переходит в статус DEBT (в той же транзакции).
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, ValidationError
from app.services.base import atomic, paginated
from infrastructure.database.models import Debt, OrderStatus
from infrastructure.database.repositories import (
    DebtRepository,
    OrderRepository,
    RestaurantRepository,
)

import structlog

logger = structlog.get_logger()


class DebtService:

    def __init__(self, session: AsyncSession):
        self.session = session
        self.debts = DebtRepository(session)
        self.orders = OrderRepository(session)
        self.restaurants = RestaurantRepository(session)

    async def create_debt(self, data) -> Debt:
        """
        Записать долг.

        data: username, amount, restaurant_id?, order_id?

        Если указан заказ, а ресторан нет - берём ресторан заказа.
        Статус меняем запросом с условием (order_id, restaurant_id):
        0 обновлённых строк = предупреждение в лог, не ошибка.
        """
        restaurant_id = data.restaurant_id

        async with atomic(self.session, "debt_create"):
            if data.order_id is not None:
                order = await self.orders.get_by_id(data.order_id)
                if order is None:
                    raise NotFoundError("Order not found")
                if restaurant_id is not None and order.restaurant_id != restaurant_id:
                    raise ValidationError("This restaurant doesnt have this order")
                if data.amount > order.total:
                    raise ValidationError("Debt cannot be higher that total sum of order")
                restaurant_id = order.restaurant_id

            elif restaurant_id is not None:
                if await self.restaurants.get_by_id(restaurant_id) is None:
                    raise NotFoundError(f"Restaurant with {restaurant_id} id not found")

            debt = Debt(
                username=data.username,
                amount=data.amount,
                restaurant_id=restaurant_id,
                order_id=data.order_id,
            )
            await self.debts.add(debt)

            if data.order_id is not None:
                updated = await self.orders.set_status_scoped(
                    data.order_id, restaurant_id, OrderStatus.DEBT
                )
                if not updated:
                    logger.warning(
                        "debt_order_status_not_updated",
                        order_id=data.order_id,
                        restaurant_id=restaurant_id
                    )

        logger.info(
            "debt_created",
            debt_id=debt.id,
            order_id=data.order_id,
            amount=str(data.amount)
        )

        return await self.debts.get_by_id_with_relations(debt.id)

    async def get_debt(self, debt_id: int) -> Debt:
        debt = await self.debts.get_by_id_with_relations(debt_id)
        if debt is None:
            raise NotFoundError(f"Debt with id {debt_id} not found")
        return debt

    async def list_debts(
        self,
        page: int,
        limit: int,
        order_id: Optional[int] = None,
        restaurant_id: Optional[int] = None,
        client: Optional[str] = None,
        min_amount=None,
        max_amount=None,
        sort_by_amount: Optional[str] = None,
    ) -> dict:
        debts, total = await self.debts.list(
            page=page,
            limit=limit,
            order_id=order_id,
            restaurant_id=restaurant_id,
            client=client,
            min_amount=min_amount,
            max_amount=max_amount,
            sort_by_amount=sort_by_amount,
        )
        return paginated(debts, total, page, limit)

    async def update_debt(self, debt_id: int, data) -> Debt:
        """Ручная правка (username / amount)."""
        async with atomic(self.session, "debt_update"):
            debt = await self.debts.get_by_id(debt_id)
            if debt is None:
                raise NotFoundError(f"Debt with id {debt_id} not found")
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(debt, field, value)
            await self.session.flush()

        return await self.debts.get_by_id_with_relations(debt_id)

    async def delete_debt(self, debt_id: int) -> dict:
        async with atomic(self.session, "debt_delete"):
            debt = await self.debts.get_by_id(debt_id)
            if debt is None:
                raise NotFoundError(f"Debt with id {debt_id} not found")
            await self.debts.delete(debt)

        logger.info("debt_deleted", debt_id=debt_id)
        return {"message": f"Debt with id {debt_id} removed successfully"}
