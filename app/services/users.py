# app/services/users.py
"""
Сервис сотрудников: регистрация, вход, токены, CRUD.

Регистрация открытая, но роль выбирать нельзя:
самый первый сотрудник в системе = SUPER_ADMIN,
все остальные = WAITER. Роль потом меняет SUPER_ADMIN
через PATCH /user/{id}/role.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import AuthenticationError, ConflictError, NotFoundError
from app.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.services.base import atomic, paginated
from infrastructure.database.models import RoleType, User
from infrastructure.database.repositories import (
    RegionRepository,
    RestaurantRepository,
    UserRepository,
    count_rows,
)

import structlog

logger = structlog.get_logger()


class UserService:

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.regions = RegionRepository(session)
        self.restaurants = RestaurantRepository(session)

    async def _check_links(self, region_id: Optional[int], restaurant_id: Optional[int]):
        if region_id is not None and await self.regions.get_by_id(region_id) is None:
            raise NotFoundError(f"Region with id {region_id} not found")
        if restaurant_id is not None and await self.restaurants.get_by_id(restaurant_id) is None:
            raise NotFoundError(f"Restaurant with id {restaurant_id} not found")

    # ==========================================
    # РЕГИСТРАЦИЯ / ВХОД
    # ==========================================

    async def register(self, data) -> dict:
        async with atomic(self.session, "user_register"):
            if await self.users.get_by_phone(data.phone):
                raise ConflictError("User with this phone already exists")
            await self._check_links(data.region_id, data.restaurant_id)

            is_first = await count_rows(self.session, User) == 0
            user = await self.users.add(User(
                name=data.name,
                phone=data.phone,
                password_hash=hash_password(data.password),
                role=RoleType.SUPER_ADMIN if is_first else RoleType.WAITER,
                region_id=data.region_id,
                restaurant_id=data.restaurant_id,
            ))

        logger.info("user_registered", user_id=user.id, role=user.role.value)
        return await self._tokens(user)

    async def login(self, phone: str, password: str) -> dict:
        user = await self.users.get_by_phone(phone)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("login_failed", phone=phone)
            raise AuthenticationError("Invalid phone or password")

        logger.info("user_logged_in", user_id=user.id)
        return await self._tokens(user)

    async def refresh(self, refresh_token: str) -> dict:
        payload = decode_token(refresh_token, expected_type="refresh")
        user = await self.users.get_by_id(int(payload["sub"]))
        if user is None:
            raise AuthenticationError("User no longer exists")
        return await self._tokens(user)

    async def _tokens(self, user: User) -> dict:
        return {
            "access_token": create_access_token(user),
            "refresh_token": create_refresh_token(user),
            "user": await self.get(user.id),
        }

    # ==========================================
    # CRUD
    # ==========================================

    async def get(self, user_id: int) -> User:
        user = await self.users.get_by_id_with_relations(user_id)
        if user is None:
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    async def list(self, page: int, limit: int, **filters) -> dict:
        users, total = await self.users.list(page=page, limit=limit, **filters)
        return paginated(users, total, page, limit)

    async def update(self, user_id: int, data) -> User:
        changes = data.model_dump(exclude_unset=True)
        async with atomic(self.session, "user_update"):
            user = await self.users.get_by_id(user_id)
            if user is None:
                raise NotFoundError(f"User with id {user_id} not found")

            if "phone" in changes and changes["phone"] != user.phone:
                if await self.users.get_by_phone(changes["phone"]):
                    raise ConflictError("User with this phone already exists")
            await self._check_links(changes.get("region_id"), changes.get("restaurant_id"))

            password = changes.pop("password", None)
            if password:
                user.password_hash = hash_password(password)
            for field, value in changes.items():
                setattr(user, field, value)
            await self.session.flush()

        logger.info("user_updated", user_id=user_id, fields=list(changes))
        return await self.get(user_id)

    async def set_role(self, user_id: int, role: RoleType) -> User:
        async with atomic(self.session, "user_set_role"):
            user = await self.users.get_by_id(user_id)
            if user is None:
                raise NotFoundError(f"User with id {user_id} not found")
            user.role = role
            await self.session.flush()

        logger.info("user_role_changed", user_id=user_id, role=role.value)
        return await self.get(user_id)

    async def delete(self, user_id: int) -> dict:
        async with atomic(self.session, "user_delete"):
            user = await self.users.get_by_id(user_id)
            if user is None:
                raise NotFoundError(f"User with id {user_id} not found")
            await self.users.delete(user)

        logger.info("user_deleted", user_id=user_id)
        return {"message": f"User with id {user_id} removed successfully"}
