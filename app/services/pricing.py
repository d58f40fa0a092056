# app/services/pricing.py
"""
💰 РАСЧЁТ ЗАКАЗА

Из позиций (product_id, quantity) считаем:

    total          = Σ price × quantity
    product_cost   = Σ price × product_cost_rate × quantity
    waiter_salary  = total × waiter_salary_rate
    other_expenses = total × other_expenses_rate
    net_profit     = total − (waiter_salary + product_cost + other_expenses)

По умолчанию 40% себестоимость, 10% официанту, 15% прочее,
остаток - прибыль. Доли берутся из PricingPolicy, а не из кода.

Все суммы Decimal, округление до 0.01 (ROUND_HALF_EVEN).
net_profit считается из уже округлённых частей, поэтому
salary + cost + other + profit == total без копеечного дрейфа.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Iterable, Mapping, Optional, Tuple

from app.errors import NotFoundError
from config.settings import config

CENT = Decimal("0.01")


def quantize(amount) -> Decimal:
    """Округление денег до 0.01."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_EVEN)


@dataclass(frozen=True)
class PricingPolicy:
    """Доли от суммы заказа."""

    product_cost_rate: Decimal = Decimal("0.40")
    waiter_salary_rate: Decimal = Decimal("0.10")
    other_expenses_rate: Decimal = Decimal("0.15")

    @classmethod
    def from_settings(cls) -> "PricingPolicy":
        return cls(
            product_cost_rate=Decimal(config.product_cost_rate),
            waiter_salary_rate=Decimal(config.waiter_salary_rate),
            other_expenses_rate=Decimal(config.other_expenses_rate),
        )

    def for_restaurant(self, restaurant) -> "PricingPolicy":
        """
        Политика с учётом переопределений ресторана.

        Поле ресторана NULL = берём значение по умолчанию.
        """
        return PricingPolicy(
            product_cost_rate=_pick(restaurant.product_cost_rate, self.product_cost_rate),
            waiter_salary_rate=_pick(restaurant.waiter_salary_rate, self.waiter_salary_rate),
            other_expenses_rate=_pick(restaurant.other_expenses_rate, self.other_expenses_rate),
        )


def _pick(override: Optional[Decimal], default: Decimal) -> Decimal:
    return default if override is None else Decimal(override)


@dataclass(frozen=True)
class OrderPricing:
    """Результат расчёта. Сумма четырёх частей == total."""

    total: Decimal
    product_cost: Decimal
    waiter_salary: Decimal
    other_expenses: Decimal
    net_profit: Decimal


def price_order(
    items: Iterable[Tuple[int, int]],
    products: Mapping[int, object],
    policy: PricingPolicy,
) -> OrderPricing:
    """
    Посчитать заказ.

    items    - пары (product_id, quantity) в порядке заказа
    products - {product_id: Product}, уже загруженные из БД

    Первый же product_id которого нет в products -> NotFoundError,
    никакого частичного результата.

    Пример (цены 10 000 × 2 и 5 000 × 1):
        total=25000, product_cost=10000, waiter_salary=2500,
        other_expenses=3750, net_profit=8750
    """

    total = Decimal("0")
    product_cost = Decimal("0")

    for product_id, quantity in items:
        product = products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product with {product_id} id not found")

        price = Decimal(product.price)
        total += price * quantity
        product_cost += price * policy.product_cost_rate * quantity

    total = quantize(total)
    product_cost = quantize(product_cost)
    waiter_salary = quantize(total * policy.waiter_salary_rate)
    other_expenses = quantize(total * policy.other_expenses_rate)
    net_profit = total - (waiter_salary + product_cost + other_expenses)

    return OrderPricing(
        total=total,
        product_cost=product_cost,
        waiter_salary=waiter_salary,
        other_expenses=other_expenses,
        net_profit=net_profit,
    )
