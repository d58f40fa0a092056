# app/policy.py
"""
🛂 КТО ЧТО МОЖЕТ

Одна таблица: действие -> роли, которым оно разрешено.
API проверяет её один раз на запрос через require(action)
(см. app/api/deps.py). Бизнес-логика про роли ничего не знает.

Действие без записи в таблице = доступно любому
авторизованному сотруднику.
"""

from typing import Dict, FrozenSet

from app.errors import PermissionDeniedError
from infrastructure.database.models import RoleType


SUPER_ADMIN = RoleType.SUPER_ADMIN
ADMIN = RoleType.ADMIN
OWNER = RoleType.OWNER
CASHER = RoleType.CASHER
WAITER = RoleType.WAITER

MANAGERS = frozenset({SUPER_ADMIN, ADMIN})
STAFF = frozenset(RoleType)


POLICY: Dict[str, FrozenSet[RoleType]] = {
    # Заказы
    "order:create": frozenset({WAITER, ADMIN, SUPER_ADMIN}),
    "order:read": STAFF,
    "order:update": frozenset({WAITER, ADMIN, SUPER_ADMIN}),
    "order:delete": frozenset({WAITER, ADMIN, SUPER_ADMIN}),

    # Деньги
    "debt:create": frozenset({CASHER, WAITER, ADMIN, SUPER_ADMIN}),
    "debt:update": frozenset({CASHER, ADMIN, SUPER_ADMIN}),
    "debt:delete": MANAGERS,
    "withdraw:create": frozenset({CASHER, ADMIN, SUPER_ADMIN, OWNER}),
    "withdraw:update": MANAGERS,
    "withdraw:delete": MANAGERS,

    # Справочники
    "region:write": MANAGERS,
    "brand:write": MANAGERS,
    "restaurant:write": frozenset({ADMIN, SUPER_ADMIN, OWNER}),
    "category:write": frozenset({ADMIN, SUPER_ADMIN, OWNER}),
    "product:write": frozenset({ADMIN, SUPER_ADMIN, OWNER}),

    # Сотрудники
    "user:read": frozenset({ADMIN, SUPER_ADMIN, OWNER}),
    "user:update": MANAGERS,
    "user:delete": MANAGERS,
    "user:set_role": frozenset({SUPER_ADMIN}),
}


def is_allowed(action: str, role: RoleType) -> bool:
    allowed = POLICY.get(action)
    if allowed is None:
        return True
    return role in allowed


def check(action: str, role: RoleType):
    """Кидает PermissionDeniedError если роли нельзя."""
    if not is_allowed(action, role):
        raise PermissionDeniedError(f"Role {role.value} is not allowed to {action}")
