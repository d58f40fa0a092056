# app/api/routes/withdraws.py
"""
Журнал денег (приход / расход).

POST с order_id = расчёт по заказу: баланс ресторана
пополняется, заказ становится PAID.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, get_current_user, require
from app.api.schemas import MessageOut, Page, WithdrawCreate, WithdrawOut, WithdrawUpdate
from app.services.withdraws import WithdrawService
from infrastructure.database.base import get_db_session
from infrastructure.database.models import User, WithdrawType

router = APIRouter(prefix="/withdraw", tags=["withdraw"])


@router.post("", response_model=WithdrawOut, status_code=201)
async def create_withdraw(
    data: WithdrawCreate,
    _: User = Depends(require("withdraw:create")),
    session: AsyncSession = Depends(get_db_session),
):
    return await WithdrawService(session).create_withdraw(data)


@router.get("", response_model=Page[WithdrawOut])
async def list_withdraws(
    order_id: Optional[int] = None,
    restaurant_id: Optional[int] = None,
    type: Optional[WithdrawType] = None,
    sort: Literal["asc", "desc"] = "desc",
    pagination: Pagination = Depends(),
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await WithdrawService(session).list_withdraws(
        page=pagination.page,
        limit=pagination.limit,
        order_id=order_id,
        restaurant_id=restaurant_id,
        type=type,
        sort=sort,
    )


@router.get("/{withdraw_id}", response_model=WithdrawOut)
async def get_withdraw(
    withdraw_id: int,
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await WithdrawService(session).get_withdraw(withdraw_id)


@router.patch("/{withdraw_id}", response_model=WithdrawOut)
async def update_withdraw(
    withdraw_id: int,
    data: WithdrawUpdate,
    _: User = Depends(require("withdraw:update")),
    session: AsyncSession = Depends(get_db_session),
):
    return await WithdrawService(session).update_withdraw(withdraw_id, data)


@router.delete("/{withdraw_id}", response_model=MessageOut)
async def delete_withdraw(
    withdraw_id: int,
    _: User = Depends(require("withdraw:delete")),
    session: AsyncSession = Depends(get_db_session),
):
    return await WithdrawService(session).delete_withdraw(withdraw_id)
