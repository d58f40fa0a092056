"""
Таблица прав: действие -> роли.
"""

import pytest

from app.errors import PermissionDeniedError
from app.policy import POLICY, check, is_allowed
from infrastructure.database.models import RoleType


@pytest.mark.parametrize("role", [RoleType.WAITER, RoleType.ADMIN, RoleType.SUPER_ADMIN])
def test_order_create_allowed(role):
    assert is_allowed("order:create", role)


@pytest.mark.parametrize("role", [RoleType.CASHER, RoleType.OWNER])
def test_order_create_denied(role):
    assert not is_allowed("order:create", role)


def test_everyone_reads_orders():
    assert all(is_allowed("order:read", role) for role in RoleType)


def test_only_super_admin_sets_roles():
    allowed = {role for role in RoleType if is_allowed("user:set_role", role)}

    assert allowed == {RoleType.SUPER_ADMIN}


def test_unknown_action_is_open():
    assert "dashboard:read" not in POLICY
    assert is_allowed("dashboard:read", RoleType.WAITER)


def test_check_raises_forbidden():
    with pytest.raises(PermissionDeniedError) as exc:
        check("region:write", RoleType.WAITER)

    assert exc.value.status_code == 403
    assert "region:write" in exc.value.message
