# app/api/deps.py
"""
Зависимости FastAPI (Depends).

get_current_user - кто пришёл (Bearer JWT).
require(action)  - можно ли ему это действие (см. app/policy.py).

Пример:
    @router.post("", dependencies=[Depends(require("order:create"))])
"""

from typing import Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import AuthenticationError
from app.policy import check
from app.security import decode_token
from config.settings import config
from infrastructure.database.base import get_db_session
from infrastructure.database.models import User
from infrastructure.database.repositories import UserRepository

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None:
        raise AuthenticationError("Authorization header is missing")

    payload = decode_token(credentials.credentials, expected_type="access")
    user = await UserRepository(session).get_by_id(int(payload["sub"]))
    if user is None:
        raise AuthenticationError("User no longer exists")
    return user


def require(action: str):
    """
    Dependency: текущий сотрудник + проверка роли.

    Роль берём из БД, а не из токена - после PATCH /user/{id}/role
    новые права работают сразу.
    """

    async def dependency(user: User = Depends(get_current_user)) -> User:
        check(action, user.role)
        return user

    return dependency


class Pagination:
    """?page=1&limit=10"""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(config.default_page_size, ge=1, le=100),
    ):
        self.page = page
        self.limit = limit
