"""
Ручные записи журнала и закрытие заказа через withdraw.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import func, select

from app.api.schemas import OrderCreate, WithdrawCreate, WithdrawUpdate
from app.errors import NotFoundError
from app.services.orders import OrderService
from app.services.withdraws import WithdrawService, settlement_amount
from infrastructure.database.models import (
    Order,
    OrderStatus,
    Restaurant,
    Withdraw,
    WithdrawType,
)


@pytest.fixture
async def order_id(session, seed):
    order = await OrderService(session).create_order(OrderCreate(
        table="7",
        restaurant_id=seed.restaurant_id,
        order_items=[
            {"product_id": seed.osh_id, "quantity": 2},
            {"product_id": seed.choy_id, "quantity": 1},
        ],
    ))
    return order.id


async def restaurant_balance(session, restaurant_id: int) -> Decimal:
    stmt = select(Restaurant.balance).where(Restaurant.id == restaurant_id)
    return (await session.execute(stmt)).scalar_one()


async def withdraws_count(session) -> int:
    return (await session.execute(select(func.count()).select_from(Withdraw))).scalar_one()


def test_settlement_amount_subtracts_tip():
    order = SimpleNamespace(
        restaurant=SimpleNamespace(tip=10),
        order_items=[
            SimpleNamespace(product=SimpleNamespace(price=Decimal("10000")), quantity=2),
            SimpleNamespace(product=SimpleNamespace(price=Decimal("5000")), quantity=1),
        ],
    )

    assert settlement_amount(order) == Decimal("22500.00")


def test_settlement_amount_without_tip():
    order = SimpleNamespace(
        restaurant=SimpleNamespace(tip=None),
        order_items=[SimpleNamespace(product=SimpleNamespace(price=Decimal("999.99")), quantity=1)],
    )

    assert settlement_amount(order) == Decimal("999.99")


class TestCreateWithdraw:

    async def test_plain_entry(self, session, seed):
        entry = await WithdrawService(session).create_withdraw(WithdrawCreate(
            type=WithdrawType.OUTCOME,
            amount=Decimal("150000"),
            restaurant_id=seed.restaurant_id,
            description="Ijara",
        ))

        assert entry.type == WithdrawType.OUTCOME
        assert entry.amount == Decimal("150000.00")
        assert entry.order is None
        assert await restaurant_balance(session, seed.restaurant_id) == Decimal("0.00")

    async def test_order_settlement(self, session, seed, order_id):
        entry = await WithdrawService(session).create_withdraw(WithdrawCreate(
            type=WithdrawType.INCOME,
            amount=Decimal("22500"),
            restaurant_id=seed.restaurant_id,
            order_id=order_id,
        ))

        status = (await session.execute(select(Order.status).where(Order.id == order_id))).scalar_one()

        assert entry.order_id == order_id
        assert status == OrderStatus.PAID
        # 25 000 минус 10% tip
        assert await restaurant_balance(session, seed.restaurant_id) == Decimal("22500.00")

    async def test_unknown_order_writes_nothing(self, session, seed, order_id):
        before = await withdraws_count(session)

        with pytest.raises(NotFoundError) as exc:
            await WithdrawService(session).create_withdraw(WithdrawCreate(
                type=WithdrawType.INCOME,
                amount=Decimal("1"),
                restaurant_id=seed.restaurant_id,
                order_id=9999,
            ))

        assert exc.value.message == "Order not found"
        assert await withdraws_count(session) == before
        assert await restaurant_balance(session, seed.restaurant_id) == Decimal("0.00")

    async def test_unknown_restaurant(self, session, seed):
        with pytest.raises(NotFoundError):
            await WithdrawService(session).create_withdraw(WithdrawCreate(
                type=WithdrawType.INCOME, amount=Decimal("1"), restaurant_id=9999,
            ))


class TestWithdrawQueries:

    async def test_list_by_order_and_type(self, session, seed, order_id):
        service = WithdrawService(session)

        for_order = await service.list_withdraws(page=1, limit=10, order_id=order_id)
        incomes = await service.list_withdraws(page=1, limit=10, type=WithdrawType.INCOME)

        assert for_order["meta"]["total"] == 4
        assert incomes["meta"]["total"] == 1

    async def test_update_and_delete(self, session, seed):
        service = WithdrawService(session)
        entry = await service.create_withdraw(WithdrawCreate(
            type=WithdrawType.OUTCOME, amount=Decimal("100"), restaurant_id=seed.restaurant_id,
        ))

        updated = await service.update_withdraw(entry.id, WithdrawUpdate(description="Gaz"))
        assert updated.description == "Gaz"
        assert updated.amount == Decimal("100.00")

        await service.delete_withdraw(entry.id)
        with pytest.raises(NotFoundError):
            await service.get_withdraw(entry.id)
