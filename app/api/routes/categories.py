# app/api/routes/categories.py
"""Категории меню."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, get_current_user, require
from app.api.schemas import CategoryCreate, CategoryOut, CategoryUpdate, MessageOut, Page
from app.services.catalog import CategoryService
from infrastructure.database.base import get_db_session
from infrastructure.database.models import User

router = APIRouter(prefix="/category", tags=["category"])


@router.post("", response_model=CategoryOut, status_code=201)
async def create_category(
    data: CategoryCreate,
    _: User = Depends(require("category:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await CategoryService(session).create(data)


@router.get("", response_model=Page[CategoryOut])
async def list_categories(
    name: Optional[str] = None,
    restaurant_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    sort: Literal["asc", "desc"] = "asc",
    pagination: Pagination = Depends(),
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await CategoryService(session).list(
        pagination.page,
        pagination.limit,
        name=name,
        restaurant_id=restaurant_id,
        is_active=is_active,
        sort=sort,
    )


@router.get("/{category_id}", response_model=CategoryOut)
async def get_category(
    category_id: int,
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await CategoryService(session).get(category_id)


@router.patch("/{category_id}", response_model=CategoryOut)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    _: User = Depends(require("category:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await CategoryService(session).update(category_id, data)


@router.delete("/{category_id}", response_model=MessageOut)
async def delete_category(
    category_id: int,
    _: User = Depends(require("category:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await CategoryService(session).delete(category_id)
