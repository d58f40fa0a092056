# app/api/routes/brands.py
"""Бренды. Список отдаёт только активные, без пагинации."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require
from app.api.schemas import BrandCreate, BrandOut, BrandUpdate, MessageOut
from app.services.catalog import BrandService
from infrastructure.database.base import get_db_session
from infrastructure.database.models import User

router = APIRouter(prefix="/brand", tags=["brand"])


@router.post("", response_model=BrandOut, status_code=201)
async def create_brand(
    data: BrandCreate,
    _: User = Depends(require("brand:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await BrandService(session).create(data)


@router.get("", response_model=List[BrandOut])
async def list_brands(
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await BrandService(session).list_active()


@router.get("/{brand_id}", response_model=BrandOut)
async def get_brand(
    brand_id: int,
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await BrandService(session).get(brand_id)


@router.patch("/{brand_id}", response_model=BrandOut)
async def update_brand(
    brand_id: int,
    data: BrandUpdate,
    _: User = Depends(require("brand:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await BrandService(session).update(brand_id, data)


@router.delete("/{brand_id}", response_model=MessageOut)
async def delete_brand(
    brand_id: int,
    _: User = Depends(require("brand:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await BrandService(session).delete(brand_id)
