# loandesk/utils/permissions.py
"""Role based permission checks.

Roles are stored on the user record; each role maps to a fixed set of
permission names. Routers depend on ``require_permission(...)`` and services
call ``has_permission`` for rules that depend on the request body.
"""
import logging
from typing import Dict, FrozenSet

from fastapi import Depends

from loandesk.models.user import User
from loandesk.utils.auth import get_current_user
from loandesk.utils.errors import PermissionDenied

logger = logging.getLogger(__name__)

HIERARCHY_MANAGE = "admin.hierarchy.manage"
USERS_MANAGE = "admin.users.manage"
TASK_CREATE_COMMON = "task.create.common"
TASK_VIEW_SUBORDINATES = "task.view.subordinates"

ALL_PERMISSIONS = frozenset({
    HIERARCHY_MANAGE,
    USERS_MANAGE,
    TASK_CREATE_COMMON,
    TASK_VIEW_SUBORDINATES,
})

ROLE_PERMISSIONS: Dict[str, FrozenSet[str]] = {
    "admin": ALL_PERMISSIONS,
    "manager": frozenset({TASK_CREATE_COMMON, TASK_VIEW_SUBORDINATES}),
    "employee": frozenset(),
}

ROLES = tuple(ROLE_PERMISSIONS)


def is_admin(user: User) -> bool:
    return (user.role or "").lower() == "admin"


def get_permissions(user: User) -> FrozenSet[str]:
    return ROLE_PERMISSIONS.get((user.role or "").lower(), frozenset())


def has_permission(user: User, permission: str) -> bool:
    return permission in get_permissions(user)


def ensure_permission(user: User, permission: str) -> None:
    if not has_permission(user, permission):
        logger.warning("Permission denied: user %s (%s) lacks %s", user.id, user.role, permission)
        raise PermissionDenied(f"Insufficient permissions: {permission} required")


def require_permission(permission: str):
    """FastAPI dependency that returns the current user if they hold `permission`"""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        ensure_permission(current_user, permission)
        return current_user

    return dependency
