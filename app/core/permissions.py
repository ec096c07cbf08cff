"""Role-based access to the read-only views.

Which status changes a role may make is decided by the booking state
table, not here.
"""

from enum import Enum
from typing import Annotated, Any, Callable

from fastapi import Depends

from app.api.deps import get_current_active_user
from app.core.exceptions import AuthorizationError
from app.domain.actor import UserRole
from app.models.user import User


class Permission(str, Enum):
    """System permissions."""

    # Staff portal job lists
    VIEW_JOBS = "view_jobs"

    # Booking status history
    VIEW_AUDIT_LOGS = "view_audit_logs"


# Role to permissions mapping
ROLE_PERMISSIONS: dict[UserRole, set[Permission]] = {
    UserRole.CUSTOMER: set(),
    UserRole.STAFF: {Permission.VIEW_JOBS},
    UserRole.ADMIN: {
        # Admins have all permissions
        perm for perm in Permission
    },
}


def has_permission(role: UserRole, permission: Permission) -> bool:
    """Check if a role has a specific permission."""
    return permission in ROLE_PERMISSIONS.get(role, set())


def require_permission(permission: Permission) -> Callable[..., Any]:
    """Dependency to require a specific permission."""

    async def permission_checker(current_user: Annotated[User, Depends(get_current_active_user)]) -> User:
        if not has_permission(UserRole(current_user.role), permission):
            raise AuthorizationError(f"Permission '{permission.value}' is required for this action")
        return current_user

    return permission_checker


# Convenience dependencies
require_job_access = require_permission(Permission.VIEW_JOBS)
require_audit_access = require_permission(Permission.VIEW_AUDIT_LOGS)
