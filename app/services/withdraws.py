# app/services/withdraws.py
"""
Ручные записи журнала (POST /withdraw).

Если запись ссылается на заказ - это закрытие заказа:
ресторану на баланс идёт сумма позиций минус tip %,
заказ становится PAID. Всё в одной транзакции с записью.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError
from app.services.base import atomic, paginated
from app.services.ledger import LedgerRecorder
from app.services.pricing import quantize
from infrastructure.database.models import OrderStatus, Withdraw
from infrastructure.database.repositories import (
    OrderRepository,
    RestaurantRepository,
    WithdrawRepository,
)

import structlog

logger = structlog.get_logger()


def settlement_amount(order) -> Decimal:
    """
    Сколько идёт ресторану при закрытии заказа.

    Сумма позиций по текущим ценам минус tip % ресторана.
    """
    items_total = sum(
        (Decimal(item.product.price) * item.quantity for item in order.order_items),
        Decimal("0"),
    )
    tip_percent = Decimal(order.restaurant.tip or 0)
    return quantize(items_total - items_total * tip_percent / 100)


class WithdrawService:

    def __init__(self, session: AsyncSession):
        self.session = session
        self.withdraws = WithdrawRepository(session)
        self.orders = OrderRepository(session)
        self.restaurants = RestaurantRepository(session)
        self.ledger = LedgerRecorder(session)

    async def create_withdraw(self, data) -> Withdraw:
        """
        data: type, amount, restaurant_id, order_id?, description?
        """
        async with atomic(self.session, "withdraw_create"):
            if await self.restaurants.get_by_id(data.restaurant_id) is None:
                raise NotFoundError(f"Restaurant with {data.restaurant_id} id not found")

            if data.order_id is not None:
                order = await self.orders.get_by_id_with_relations(data.order_id)
                if order is None:
                    raise NotFoundError("Order not found")

                amount = settlement_amount(order)
                await self.restaurants.increment_balance(order.restaurant_id, amount)
                order.status = OrderStatus.PAID

                logger.info(
                    "order_settled",
                    order_id=order.id,
                    restaurant_id=order.restaurant_id,
                    credited=str(amount)
                )

            entry = await self.ledger.record(
                data.type,
                data.amount,
                restaurant_id=data.restaurant_id,
                order_id=data.order_id,
                description=data.description,
            )

        return await self.withdraws.get_by_id_with_relations(entry.id)

    async def get_withdraw(self, withdraw_id: int) -> Withdraw:
        entry = await self.withdraws.get_by_id_with_relations(withdraw_id)
        if entry is None:
            raise NotFoundError(f"Withdraw with id {withdraw_id} not found")
        return entry

    async def list_withdraws(
        self,
        page: int,
        limit: int,
        order_id: Optional[int] = None,
        restaurant_id: Optional[int] = None,
        type=None,
        sort: str = "desc",
    ) -> dict:
        entries, total = await self.withdraws.list(
            page=page,
            limit=limit,
            order_id=order_id,
            restaurant_id=restaurant_id,
            type=type,
            sort=sort,
        )
        return paginated(entries, total, page, limit)

    async def update_withdraw(self, withdraw_id: int, data) -> Withdraw:
        """Ручная корректировка записи (тип, сумма, описание)."""
        async with atomic(self.session, "withdraw_update"):
            entry = await self.withdraws.get_by_id(withdraw_id)
            if entry is None:
                raise NotFoundError(f"Withdraw with id {withdraw_id} not found")
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(entry, field, value)
            await self.session.flush()

        logger.info("withdraw_updated", withdraw_id=withdraw_id)
        return await self.withdraws.get_by_id_with_relations(withdraw_id)

    async def delete_withdraw(self, withdraw_id: int) -> dict:
        async with atomic(self.session, "withdraw_delete"):
            entry = await self.withdraws.get_by_id(withdraw_id)
            if entry is None:
                raise NotFoundError(f"Withdraw with id {withdraw_id} not found")
            await self.withdraws.delete(entry)

        logger.info("withdraw_deleted", withdraw_id=withdraw_id)
        return {"message": f"Withdraw with id {withdraw_id} removed successfully"}
