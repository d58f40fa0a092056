# app/api/routes/users.py
"""
Сотрудники и авторизация.

Открытые: POST /user/register, /user/login, /user/refresh-token.
Остальное - с Bearer токеном.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, get_current_user, require
from app.api.schemas import (
    AuthOut,
    MessageOut,
    Page,
    RefreshTokenIn,
    RoleUpdate,
    UserLogin,
    UserOut,
    UserRegister,
    UserUpdate,
)
from app.services.users import UserService
from infrastructure.database.base import get_db_session
from infrastructure.database.models import RoleType, User

router = APIRouter(prefix="/user", tags=["user"])


# ==========================================
# АВТОРИЗАЦИЯ
# ==========================================

@router.post("/register", response_model=AuthOut, status_code=201)
async def register(data: UserRegister, session: AsyncSession = Depends(get_db_session)):
    return await UserService(session).register(data)


@router.post("/login", response_model=AuthOut)
async def login(data: UserLogin, session: AsyncSession = Depends(get_db_session)):
    return await UserService(session).login(data.phone, data.password)


@router.post("/refresh-token", response_model=AuthOut)
async def refresh_token(data: RefreshTokenIn, session: AsyncSession = Depends(get_db_session)):
    return await UserService(session).refresh(data.refresh_token)


@router.get("/me", response_model=UserOut)
async def me(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await UserService(session).get(user.id)


# ==========================================
# CRUD
# ==========================================

@router.get("", response_model=Page[UserOut])
async def list_users(
    name: Optional[str] = None,
    phone: Optional[str] = None,
    role: Optional[RoleType] = None,
    restaurant_id: Optional[int] = None,
    region_id: Optional[int] = None,
    sort: Literal["asc", "desc"] = "desc",
    pagination: Pagination = Depends(),
    _: User = Depends(require("user:read")),
    session: AsyncSession = Depends(get_db_session),
):
    return await UserService(session).list(
        pagination.page,
        pagination.limit,
        name=name,
        phone=phone,
        role=role,
        restaurant_id=restaurant_id,
        region_id=region_id,
        sort=sort,
    )


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: int,
    _: User = Depends(require("user:read")),
    session: AsyncSession = Depends(get_db_session),
):
    return await UserService(session).get(user_id)


@router.patch("/{user_id}/role", response_model=UserOut)
async def set_role(
    user_id: int,
    data: RoleUpdate,
    _: User = Depends(require("user:set_role")),
    session: AsyncSession = Depends(get_db_session),
):
    return await UserService(session).set_role(user_id, data.role)


@router.patch("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: int,
    data: UserUpdate,
    _: User = Depends(require("user:update")),
    session: AsyncSession = Depends(get_db_session),
):
    return await UserService(session).update(user_id, data)


@router.delete("/{user_id}", response_model=MessageOut)
async def delete_user(
    user_id: int,
    _: User = Depends(require("user:delete")),
    session: AsyncSession = Depends(get_db_session),
):
    return await UserService(session).delete(user_id)
