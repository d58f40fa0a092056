# app/api/routes/orders.py
"""
Заказы.

POST /order - главный сценарий: заказ + 4 записи журнала
+ зарплата официанту. См. OrderService.create_order().
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, require
from app.api.schemas import MessageOut, OrderCreate, OrderOut, OrderUpdate, Page
from app.services.orders import OrderService
from infrastructure.database.base import get_db_session
from infrastructure.database.models import User

router = APIRouter(prefix="/order", tags=["order"])


@router.post("", response_model=OrderOut, status_code=201)
async def create_order(
    data: OrderCreate,
    user: User = Depends(require("order:create")),
    session: AsyncSession = Depends(get_db_session),
):
    return await OrderService(session).create_order(data, requester=user)


@router.get("", response_model=Page[OrderOut])
async def list_orders(
    restaurant_id: Optional[int] = None,
    product_id: Optional[int] = None,
    quantity: Optional[int] = Query(None, gt=0),
    sort: Literal["asc", "desc"] = "desc",
    pagination: Pagination = Depends(),
    _: User = Depends(require("order:read")),
    session: AsyncSession = Depends(get_db_session),
):
    return await OrderService(session).list_orders(
        page=pagination.page,
        limit=pagination.limit,
        restaurant_id=restaurant_id,
        product_id=product_id,
        quantity=quantity,
        sort=sort,
    )


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(
    order_id: int,
    _: User = Depends(require("order:read")),
    session: AsyncSession = Depends(get_db_session),
):
    return await OrderService(session).get_order(order_id)


@router.patch("/{order_id}", response_model=OrderOut)
async def update_order(
    order_id: int,
    data: OrderUpdate,
    _: User = Depends(require("order:update")),
    session: AsyncSession = Depends(get_db_session),
):
    return await OrderService(session).update_order(order_id, data)


@router.delete("/{order_id}", response_model=MessageOut)
async def delete_order(
    order_id: int,
    _: User = Depends(require("order:delete")),
    session: AsyncSession = Depends(get_db_session),
):
    return await OrderService(session).delete_order(order_id)
