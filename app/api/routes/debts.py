# app/api/routes/debts.py
"""Долги клиентов."""

from decimal import Decimal
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, get_current_user, require
from app.api.schemas import DebtCreate, DebtOut, DebtUpdate, MessageOut, Page
from app.services.debts import DebtService
from infrastructure.database.base import get_db_session
from infrastructure.database.models import User

router = APIRouter(prefix="/debt", tags=["debt"])


@router.post("", response_model=DebtOut, status_code=201)
async def create_debt(
    data: DebtCreate,
    _: User = Depends(require("debt:create")),
    session: AsyncSession = Depends(get_db_session),
):
    return await DebtService(session).create_debt(data)


@router.get("", response_model=Page[DebtOut])
async def list_debts(
    order_id: Optional[int] = None,
    restaurant_id: Optional[int] = None,
    client: Optional[str] = None,
    min_amount: Optional[Decimal] = None,
    max_amount: Optional[Decimal] = None,
    sort_by_amount: Optional[Literal["asc", "desc"]] = None,
    pagination: Pagination = Depends(),
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await DebtService(session).list_debts(
        page=pagination.page,
        limit=pagination.limit,
        order_id=order_id,
        restaurant_id=restaurant_id,
        client=client,
        min_amount=min_amount,
        max_amount=max_amount,
        sort_by_amount=sort_by_amount,
    )


@router.get("/{debt_id}", response_model=DebtOut)
async def get_debt(
    debt_id: int,
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await DebtService(session).get_debt(debt_id)


@router.patch("/{debt_id}", response_model=DebtOut)
async def update_debt(
    debt_id: int,
    data: DebtUpdate,
    _: User = Depends(require("debt:update")),
    session: AsyncSession = Depends(get_db_session),
):
    return await DebtService(session).update_debt(debt_id, data)


@router.delete("/{debt_id}", response_model=MessageOut)
async def delete_debt(
    debt_id: int,
    _: User = Depends(require("debt:delete")),
    session: AsyncSession = Depends(get_db_session),
):
    return await DebtService(session).delete_debt(debt_id)
