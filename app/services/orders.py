# app/services/orders.py
"""
Сервис заказов.

Главное здесь - create_order(): заказ + позиции + 4 записи журнала
+ зарплата официанту на баланс. Всё одной транзакцией:
упало на любом шаге = в БД ничего не осталось.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError
from app.services.base import atomic, paginated
from app.services.ledger import LedgerRecorder
from app.services.pricing import OrderPricing, PricingPolicy, price_order
from infrastructure.database.models import (
    Order,
    OrderItem,
    OrderStatus,
    User,
    WithdrawType,
)
from infrastructure.database.repositories import (
    OrderRepository,
    ProductRepository,
    RestaurantRepository,
    UserRepository,
)

import structlog

logger = structlog.get_logger()


# Тексты записей журнала при создании заказа
SALARY_DESCRIPTION = "Ofitsiant maoshi"
PRODUCT_COST_DESCRIPTION = "Mahsulot tannarxi"
OTHER_EXPENSES_DESCRIPTION = "Boshqa xarajatlar"
NET_PROFIT_DESCRIPTION = "Sof foyda"


def ledger_lines(pricing: OrderPricing):
    """(тип, сумма, описание) для четырёх записей журнала заказа."""
    return [
        (WithdrawType.OUTCOME, pricing.waiter_salary, SALARY_DESCRIPTION),
        (WithdrawType.OUTCOME, pricing.product_cost, PRODUCT_COST_DESCRIPTION),
        (WithdrawType.OUTCOME, pricing.other_expenses, OTHER_EXPENSES_DESCRIPTION),
        (WithdrawType.INCOME, pricing.net_profit, NET_PROFIT_DESCRIPTION),
    ]


class OrderService:
    """Сервис для работы с заказами."""

    def __init__(self, session: AsyncSession, policy: Optional[PricingPolicy] = None):
        self.session = session
        self.policy = policy or PricingPolicy.from_settings()
        self.orders = OrderRepository(session)
        self.restaurants = RestaurantRepository(session)
        self.products = ProductRepository(session)
        self.users = UserRepository(session)
        self.ledger = LedgerRecorder(session)

    # ==========================================
    # СОЗДАТЬ ЗАКАЗ
    # ==========================================

    async def create_order(self, data, requester: Optional[User] = None) -> Order:
        """
        Создать заказ.

        data: table, restaurant_id, order_items[{product_id, quantity}]
        requester: сотрудник который создаёт заказ (может не быть)

        Шаги:
        1. Ресторан есть? Нет -> NotFoundError
        2. Считаем суммы (нет продукта -> NotFoundError)
        3. Сохраняем заказ с позициями
        4. 4 записи журнала (зарплата, себестоимость, прочее, прибыль)
        5. Зарплату официанта на баланс requester
        6. Возвращаем заказ с рестораном, официантом и позициями

        Requester записывается как официант заказа: кому начислили
        зарплату, тот и официант.
        """
        requester_id = getattr(requester, "id", None)
        items = [(item.product_id, item.quantity) for item in data.order_items]

        async with atomic(self.session, "order_create"):
            restaurant = await self.restaurants.get_by_id(data.restaurant_id)
            if restaurant is None:
                raise NotFoundError(f"Restaurant with {data.restaurant_id} id not found")

            products = await self.products.get_many(product_id for product_id, _ in items)
            pricing = price_order(items, products, self.policy.for_restaurant(restaurant))

            order = Order(
                table=data.table,
                restaurant_id=restaurant.id,
                waiter_id=requester_id,
                total=pricing.total,
                status=OrderStatus.PENDING,
                order_items=[
                    OrderItem(product_id=product_id, quantity=quantity)
                    for product_id, quantity in items
                ],
            )
            await self.orders.add(order)

            for entry_type, amount, description in ledger_lines(pricing):
                await self.ledger.record(
                    entry_type,
                    amount,
                    restaurant_id=restaurant.id,
                    order_id=order.id,
                    description=description,
                )

            if requester_id is not None:
                updated = await self.users.increment_balance(requester_id, pricing.waiter_salary)
                if not updated:
                    logger.warning("waiter_balance_not_updated", user_id=requester_id)

        logger.info(
            "order_created",
            order_id=order.id,
            restaurant_id=restaurant.id,
            waiter_id=requester_id,
            total=str(pricing.total),
            net_profit=str(pricing.net_profit)
        )

        return await self.orders.get_by_id_with_relations(order.id)

    # ==========================================
    # ЧТЕНИЕ
    # ==========================================

    async def get_order(self, order_id: int) -> Order:
        order = await self.orders.get_by_id_with_relations(order_id)
        if order is None:
            raise NotFoundError(f"Order with id {order_id} not found")
        return order

    async def list_orders(
        self,
        page: int,
        limit: int,
        restaurant_id: Optional[int] = None,
        product_id: Optional[int] = None,
        quantity: Optional[int] = None,
        sort: str = "desc",
    ) -> dict:
        orders, total = await self.orders.list(
            page=page,
            limit=limit,
            restaurant_id=restaurant_id,
            product_id=product_id,
            quantity=quantity,
            sort=sort,
        )
        return paginated(orders, total, page, limit)

    # ==========================================
    # ОБНОВИТЬ / УДАЛИТЬ
    # ==========================================

    async def update_order(self, order_id: int, data) -> Order:
        """
        Поменять стол и/или статус.

        total НЕ пересчитывается - он фиксируется при создании.
        """
        changes = data.model_dump(exclude_unset=True)

        async with atomic(self.session, "order_update"):
            order = await self.orders.get_by_id(order_id)
            if order is None:
                raise NotFoundError(f"Order with id {order_id} not found")

            for field, value in changes.items():
                setattr(order, field, value)
            await self.session.flush()

        logger.info("order_updated", order_id=order_id, fields=list(changes))

        return await self.orders.get_by_id_with_relations(order_id)

    async def delete_order(self, order_id: int) -> dict:
        """Удалить заказ вместе с позициями (cascade)."""
        async with atomic(self.session, "order_delete"):
            order = await self.orders.get_by_id_with_relations(order_id)
            if order is None:
                raise NotFoundError(f"Order with id {order_id} not found")
            await self.orders.delete(order)

        logger.info("order_deleted", order_id=order_id)

        return {"message": f"Order with id {order_id} removed successfully"}
