# app/services/ledger.py
"""
Журнал доходов/расходов (withdraw).

LedgerRecorder.record() только добавляет запись, без commit -
его вызывают внутри чужой транзакции (создание заказа, ручной withdraw).
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import Withdraw, WithdrawType
from infrastructure.database.repositories import WithdrawRepository

import structlog

logger = structlog.get_logger()


class LedgerRecorder:
    """Добавляет записи в журнал."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = WithdrawRepository(session)

    async def record(
        self,
        type: WithdrawType,
        amount: Decimal,
        restaurant_id: int,
        order_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> Withdraw:
        """
        Записать доход (INCOME) или расход (OUTCOME).

        Знак суммы не проверяем - это делает API (amount >= 0).

        Пример:
            await LedgerRecorder(session).record(
                WithdrawType.OUTCOME, Decimal("2500"), restaurant_id=1,
                order_id=7, description="Ofitsiant maoshi"
            )
        """
        entry = Withdraw(
            type=WithdrawType(type),
            amount=amount,
            restaurant_id=restaurant_id,
            order_id=order_id,
            description=description,
        )
        await self.repo.add(entry)
        # ресторан и заказ нужны в ответе API
        await self.session.refresh(entry, ["restaurant", "order"])

        logger.debug(
            "ledger_entry_recorded",
            withdraw_id=entry.id,
            type=entry.type.value,
            amount=str(amount),
            restaurant_id=restaurant_id,
            order_id=order_id
        )

        return entry
