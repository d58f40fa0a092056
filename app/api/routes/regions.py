# app/api/routes/regions.py
"""Регионы (справочник)."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, get_current_user, require
from app.api.schemas import MessageOut, Page, RegionCreate, RegionOut, RegionUpdate
from app.services.catalog import RegionService
from infrastructure.database.base import get_db_session
from infrastructure.database.models import User

router = APIRouter(prefix="/region", tags=["region"])


@router.post("", response_model=RegionOut, status_code=201)
async def create_region(
    data: RegionCreate,
    _: User = Depends(require("region:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await RegionService(session).create(data)


@router.get("", response_model=Page[RegionOut])
async def list_regions(
    name: Optional[str] = None,
    pagination: Pagination = Depends(),
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await RegionService(session).list(pagination.page, pagination.limit, name=name)


@router.get("/{region_id}", response_model=RegionOut)
async def get_region(
    region_id: int,
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await RegionService(session).get(region_id)


@router.patch("/{region_id}", response_model=RegionOut)
async def update_region(
    region_id: int,
    data: RegionUpdate,
    _: User = Depends(require("region:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await RegionService(session).update(region_id, data)


@router.delete("/{region_id}", response_model=MessageOut)
async def delete_region(
    region_id: int,
    _: User = Depends(require("region:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await RegionService(session).delete(region_id)
