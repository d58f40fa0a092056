"""
Долги: проверки против заказа и перевод заказа в статус DEBT.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.api.schemas import DebtCreate, DebtUpdate, OrderCreate
from app.errors import NotFoundError, ValidationError
from app.services.debts import DebtService
from app.services.orders import OrderService
from infrastructure.database.models import Debt, Order, OrderStatus


@pytest.fixture
async def order_id(session, seed):
    """Заказ на 25 000 в ресторане Rayhon."""
    order = await OrderService(session).create_order(OrderCreate(
        table="3",
        restaurant_id=seed.restaurant_id,
        order_items=[
            {"product_id": seed.osh_id, "quantity": 2},
            {"product_id": seed.choy_id, "quantity": 1},
        ],
    ))
    return order.id


async def order_status(session, order_id: int) -> OrderStatus:
    return (await session.execute(select(Order.status).where(Order.id == order_id))).scalar_one()


async def debts_count(session) -> int:
    return (await session.execute(select(func.count()).select_from(Debt))).scalar_one()


class TestCreateDebt:

    async def test_debt_within_order_total(self, session, seed, order_id):
        debt = await DebtService(session).create_debt(DebtCreate(
            username="Sardor",
            amount=Decimal("20000"),
            restaurant_id=seed.restaurant_id,
            order_id=order_id,
        ))

        assert debt.amount == Decimal("20000.00")
        assert debt.order_id == order_id
        assert debt.restaurant.name == "Rayhon"
        assert await order_status(session, order_id) == OrderStatus.DEBT

    async def test_debt_equal_to_total_is_allowed(self, session, seed, order_id):
        await DebtService(session).create_debt(DebtCreate(
            username="Sardor", amount=Decimal("25000"), order_id=order_id,
        ))

        assert await order_status(session, order_id) == OrderStatus.DEBT

    async def test_debt_above_total_is_rejected(self, session, seed, order_id):
        with pytest.raises(ValidationError) as exc:
            await DebtService(session).create_debt(DebtCreate(
                username="Sardor",
                amount=Decimal("30000"),
                restaurant_id=seed.restaurant_id,
                order_id=order_id,
            ))

        assert exc.value.message == "Debt cannot be higher that total sum of order"
        assert await debts_count(session) == 0
        assert await order_status(session, order_id) == OrderStatus.PENDING

    async def test_order_of_other_restaurant_is_rejected(self, session, seed, order_id):
        with pytest.raises(ValidationError) as exc:
            await DebtService(session).create_debt(DebtCreate(
                username="Sardor",
                amount=Decimal("1000"),
                restaurant_id=seed.other_restaurant_id,
                order_id=order_id,
            ))

        assert exc.value.message == "This restaurant doesnt have this order"
        assert await order_status(session, order_id) == OrderStatus.PENDING

    async def test_unknown_order(self, session, seed):
        with pytest.raises(NotFoundError) as exc:
            await DebtService(session).create_debt(DebtCreate(
                username="Sardor", amount=Decimal("1000"), order_id=9999,
            ))

        assert exc.value.message == "Order not found"

    async def test_restaurant_is_taken_from_order(self, session, seed, order_id):
        debt = await DebtService(session).create_debt(DebtCreate(
            username="Sardor", amount=Decimal("100"), order_id=order_id,
        ))

        assert debt.restaurant_id == seed.restaurant_id

    async def test_debt_without_order(self, session, seed):
        debt = await DebtService(session).create_debt(DebtCreate(
            username="Jasur", amount=Decimal("5000"), restaurant_id=seed.restaurant_id,
        ))

        assert debt.order_id is None
        assert debt.order is None

    async def test_debt_without_order_unknown_restaurant(self, session, seed):
        with pytest.raises(NotFoundError):
            await DebtService(session).create_debt(DebtCreate(
                username="Jasur", amount=Decimal("5000"), restaurant_id=9999,
            ))


class TestDebtQueries:

    async def test_filters_and_amount_sorting(self, session, seed):
        service = DebtService(session)
        for name, amount in (("Sardor", "300"), ("Jasur", "100"), ("Sardorbek", "200")):
            await service.create_debt(DebtCreate(
                username=name, amount=Decimal(amount), restaurant_id=seed.restaurant_id,
            ))

        by_client = await service.list_debts(page=1, limit=10, client="sardor")
        in_range = await service.list_debts(
            page=1, limit=10, min_amount=Decimal("150"), max_amount=Decimal("250"),
        )
        sorted_desc = await service.list_debts(page=1, limit=10, sort_by_amount="desc")

        assert by_client["meta"]["total"] == 2
        assert [d.username for d in in_range["data"]] == ["Sardorbek"]
        assert [d.amount for d in sorted_desc["data"]] == [
            Decimal("300.00"), Decimal("200.00"), Decimal("100.00"),
        ]

    async def test_update_and_delete(self, session, seed):
        service = DebtService(session)
        debt = await service.create_debt(DebtCreate(
            username="Jasur", amount=Decimal("5000"), restaurant_id=seed.restaurant_id,
        ))

        updated = await service.update_debt(debt.id, DebtUpdate(amount=Decimal("4000")))
        assert updated.amount == Decimal("4000.00")

        await service.delete_debt(debt.id)
        assert await debts_count(session) == 0

        with pytest.raises(NotFoundError):
            await service.get_debt(debt.id)
