"""
Tests for the role permission table
"""
import pytest

from app.core.permissions import ROLE_PERMISSIONS, Permission, has_permission
from app.domain.actor import UserRole


def test_every_role_has_an_entry():
    assert set(ROLE_PERMISSIONS) == set(UserRole)


@pytest.mark.parametrize(
    "role,permission,allowed",
    [
        (UserRole.STAFF, Permission.VIEW_JOBS, True),
        (UserRole.STAFF, Permission.VIEW_AUDIT_LOGS, False),
        (UserRole.CUSTOMER, Permission.VIEW_JOBS, False),
        (UserRole.CUSTOMER, Permission.VIEW_AUDIT_LOGS, False),
        (UserRole.ADMIN, Permission.VIEW_JOBS, True),
        (UserRole.ADMIN, Permission.VIEW_AUDIT_LOGS, True),
    ],
)
def test_has_permission(role, permission, allowed):
    assert has_permission(role, permission) is allowed
