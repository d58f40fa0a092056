# app/api/routes/restaurants.py
"""Рестораны."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, get_current_user, require
from app.api.schemas import (
    MessageOut,
    Page,
    RestaurantCreate,
    RestaurantOut,
    RestaurantUpdate,
)
from app.services.catalog import RestaurantService
from infrastructure.database.base import get_db_session
from infrastructure.database.models import User

router = APIRouter(prefix="/restaurant", tags=["restaurant"])


@router.post("", response_model=RestaurantOut, status_code=201)
async def create_restaurant(
    data: RestaurantCreate,
    _: User = Depends(require("restaurant:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await RestaurantService(session).create(data)


@router.get("", response_model=Page[RestaurantOut])
async def list_restaurants(
    name: Optional[str] = None,
    address: Optional[str] = None,
    region_id: Optional[int] = None,
    tip: Optional[int] = Query(None, ge=0, le=100),
    is_active: Optional[bool] = None,
    pagination: Pagination = Depends(),
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await RestaurantService(session).list(
        pagination.page,
        pagination.limit,
        name=name,
        address=address,
        region_id=region_id,
        tip=tip,
        is_active=is_active,
    )


@router.get("/{restaurant_id}", response_model=RestaurantOut)
async def get_restaurant(
    restaurant_id: int,
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await RestaurantService(session).get(restaurant_id)


@router.patch("/{restaurant_id}", response_model=RestaurantOut)
async def update_restaurant(
    restaurant_id: int,
    data: RestaurantUpdate,
    _: User = Depends(require("restaurant:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await RestaurantService(session).update(restaurant_id, data)


@router.delete("/{restaurant_id}", response_model=MessageOut)
async def delete_restaurant(
    restaurant_id: int,
    _: User = Depends(require("restaurant:write")),
    session: AsyncSession = Depends(get_db_session),
):
    return await RestaurantService(session).delete(restaurant_id)
