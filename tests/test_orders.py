"""
Создание заказа: заказ + позиции + 4 записи журнала + зарплата официанту
одной транзакцией.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaError
from sqlalchemy import func, select

from app.api.schemas import OrderCreate, OrderUpdate
from app.errors import NotFoundError
from app.services.ledger import LedgerRecorder
from app.services.orders import (
    NET_PROFIT_DESCRIPTION,
    SALARY_DESCRIPTION,
    OrderService,
)
from infrastructure.database.models import (
    Order,
    OrderItem,
    OrderStatus,
    Restaurant,
    User,
    Withdraw,
    WithdrawType,
)
from infrastructure.database.repositories import UserRepository


def order_data(seed, items=None, restaurant_id=None):
    return OrderCreate(
        table="5",
        restaurant_id=restaurant_id or seed.restaurant_id,
        order_items=items or [
            {"product_id": seed.osh_id, "quantity": 2},
            {"product_id": seed.choy_id, "quantity": 1},
        ],
    )


async def count(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


async def waiter_balance(session, user_id: int) -> Decimal:
    stmt = select(User.balance).where(User.id == user_id)
    return (await session.execute(stmt)).scalar_one()


class TestCreateOrder:

    async def test_creates_order_with_items(self, session, seed):
        order = await OrderService(session).create_order(order_data(seed), requester=seed.waiter)

        assert order.total == Decimal("25000.00")
        assert order.status == OrderStatus.PENDING
        assert order.table == "5"
        assert order.restaurant.name == "Rayhon"
        assert [(i.product.name, i.quantity) for i in order.order_items] == [
            ("Osh", 2),
            ("Choy", 1),
        ]

    async def test_writes_four_ledger_entries(self, session, seed):
        order = await OrderService(session).create_order(order_data(seed), requester=seed.waiter)

        result = await session.execute(
            select(Withdraw).where(Withdraw.order_id == order.id).order_by(Withdraw.id)
        )
        entries = result.scalars().all()

        assert [(e.type, e.amount) for e in entries] == [
            (WithdrawType.OUTCOME, Decimal("2500.00")),
            (WithdrawType.OUTCOME, Decimal("10000.00")),
            (WithdrawType.OUTCOME, Decimal("3750.00")),
            (WithdrawType.INCOME, Decimal("8750.00")),
        ]
        assert entries[0].description == SALARY_DESCRIPTION
        assert entries[-1].description == NET_PROFIT_DESCRIPTION
        assert all(e.restaurant_id == seed.restaurant_id for e in entries)

    async def test_requester_is_waiter_and_gets_salary(self, session, seed):
        order = await OrderService(session).create_order(order_data(seed), requester=seed.waiter)

        assert order.waiter_id == seed.waiter_id
        assert await waiter_balance(session, seed.waiter_id) == Decimal("2500.00")

    async def test_salary_accumulates_over_orders(self, session, seed):
        service = OrderService(session)
        await service.create_order(order_data(seed), requester=seed.waiter)
        await service.create_order(order_data(seed), requester=seed.waiter)

        assert await waiter_balance(session, seed.waiter_id) == Decimal("5000.00")

    async def test_without_requester_nobody_is_credited(self, session, seed):
        order = await OrderService(session).create_order(order_data(seed))

        assert order.waiter_id is None
        assert await waiter_balance(session, seed.waiter_id) == Decimal("0.00")
        assert await count(session, Withdraw) == 4

    async def test_unknown_restaurant(self, session, seed):
        with pytest.raises(NotFoundError) as exc:
            await OrderService(session).create_order(order_data(seed, restaurant_id=9999))

        assert exc.value.message == "Restaurant with 9999 id not found"
        assert await count(session, Order) == 0

    async def test_unknown_product_leaves_nothing_behind(self, session, seed):
        items = [
            {"product_id": seed.osh_id, "quantity": 1},
            {"product_id": 9999, "quantity": 1},
        ]

        with pytest.raises(NotFoundError) as exc:
            await OrderService(session).create_order(order_data(seed, items=items), requester=seed.waiter)

        assert exc.value.message == "Product with 9999 id not found"
        assert await count(session, Order) == 0
        assert await count(session, OrderItem) == 0
        assert await count(session, Withdraw) == 0
        assert await waiter_balance(session, seed.waiter_id) == Decimal("0.00")

    async def test_ledger_failure_rolls_back_flushed_order(self, session, seed, monkeypatch):
        original_record = LedgerRecorder.record
        calls = []

        async def record_then_fail(self, *args, **kwargs):
            calls.append(args)
            if len(calls) == 3:
                raise RuntimeError("ledger unavailable")
            return await original_record(self, *args, **kwargs)

        monkeypatch.setattr(LedgerRecorder, "record", record_then_fail)

        with pytest.raises(RuntimeError):
            await OrderService(session).create_order(order_data(seed), requester=seed.waiter)

        # заказ, позиции и 2 записи журнала уже были во flush
        assert len(calls) == 3
        assert await count(session, Order) == 0
        assert await count(session, OrderItem) == 0
        assert await count(session, Withdraw) == 0
        assert await waiter_balance(session, seed.waiter_id) == Decimal("0.00")

    async def test_balance_failure_rolls_back_ledger(self, session, seed, monkeypatch):
        async def fail(self, user_id, amount):
            raise RuntimeError("balance update failed")

        monkeypatch.setattr(UserRepository, "increment_balance", fail)

        with pytest.raises(RuntimeError):
            await OrderService(session).create_order(order_data(seed), requester=seed.waiter)

        assert await count(session, Order) == 0
        assert await count(session, OrderItem) == 0
        assert await count(session, Withdraw) == 0

    async def test_policy_override_on_restaurant(self, session, seed):
        restaurant = await session.get(Restaurant, seed.restaurant_id)
        restaurant.waiter_salary_rate = Decimal("0.2000")
        await session.commit()

        order = await OrderService(session).create_order(order_data(seed), requester=seed.waiter)

        salary = (await session.execute(
            select(Withdraw.amount).where(
                Withdraw.order_id == order.id,
                Withdraw.description == SALARY_DESCRIPTION,
            )
        )).scalar_one()
        assert salary == Decimal("5000.00")


class TestOrderLifecycle:

    async def test_update_changes_table_and_status_only(self, session, seed):
        service = OrderService(session)
        order = await service.create_order(order_data(seed))

        updated = await service.update_order(
            order.id, OrderUpdate(table="12", status=OrderStatus.PAID)
        )

        assert updated.table == "12"
        assert updated.status == OrderStatus.PAID
        assert updated.total == Decimal("25000.00")

    def test_null_status_is_rejected(self):
        with pytest.raises(SchemaError):
            OrderUpdate(status=None)

        assert OrderUpdate(table="3").model_dump(exclude_unset=True) == {"table": "3"}

    async def test_delete_removes_items(self, session, seed):
        service = OrderService(session)
        order = await service.create_order(order_data(seed))

        await service.delete_order(order.id)

        assert await count(session, Order) == 0
        assert await count(session, OrderItem) == 0

    async def test_get_missing_order(self, session, seed):
        with pytest.raises(NotFoundError):
            await OrderService(session).get_order(9999)

    async def test_list_filters_by_product(self, session, seed):
        service = OrderService(session)
        await service.create_order(order_data(seed))
        await service.create_order(order_data(seed, items=[{"product_id": seed.choy_id, "quantity": 3}]))

        only_osh = await service.list_orders(page=1, limit=10, product_id=seed.osh_id)
        by_quantity = await service.list_orders(page=1, limit=10, quantity=3)
        everything = await service.list_orders(page=1, limit=1)

        assert only_osh["meta"]["total"] == 1
        assert by_quantity["meta"]["total"] == 1
        assert everything["meta"] == {"total": 2, "page": 1, "limit": 1, "last_page": 2}
        assert len(everything["data"]) == 1
