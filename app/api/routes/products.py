# app/api/routes/products.py
"""Продукты (меню)."""

from decimal import Decimal
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, get_current_user, require
from app.api.schemas import MessageOut, Page, ProductCreate, ProductOut, ProductUpdate
from app.services.catalog import ProductService
from infrastructure.database.base import get_db_session
from infrastructure.database.models import User

router = APIRouter(prefix="/product", tags=["product"])


@router.post("", response_model=ProductOut, status_code=201)
async def create_product(
    data: ProductCreate,
    _: User = Depends(require("product:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await ProductService(session).create(data)


@router.get("", response_model=Page[ProductOut])
async def list_products(
    name: Optional[str] = None,
    price: Optional[Decimal] = None,
    is_active: Optional[bool] = None,
    restaurant_id: Optional[int] = None,
    category_id: Optional[int] = None,
    sort: Literal["asc", "desc"] = "asc",
    pagination: Pagination = Depends(),
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await ProductService(session).list(
        pagination.page,
        pagination.limit,
        name=name,
        price=price,
        is_active=is_active,
        restaurant_id=restaurant_id,
        category_id=category_id,
        sort=sort,
    )


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(
    product_id: int,
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await ProductService(session).get(product_id)


@router.patch("/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    _: User = Depends(require("product:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await ProductService(session).update(product_id, data)


@router.delete("/{product_id}", response_model=MessageOut)
async def delete_product(
    product_id: int,
    _: User = Depends(require("product:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await ProductService(session).delete(product_id)
