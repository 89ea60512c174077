"""
Role-based authorization dependencies.

Endpoints declare ``StaffUserDep`` or ``AdminUserDep`` (see
``app.core.common_deps``) instead of checking roles themselves.
"""

from typing import Annotated, Iterable

from fastapi import Depends

from app.core.security import get_active_user
from app.core.service_utils import ADMIN_ROLES, STAFF_ROLES, ensure_role
from app.models.user import User, UserRole


def require_role(allowed: Iterable[UserRole], label: str):
    """Build a dependency that resolves to the current user if their role is allowed."""
    allowed = tuple(allowed)

    def dependency(current_user: User = Depends(get_active_user)) -> User:
        return ensure_role(current_user, allowed, label)

    return dependency


RequireStaffRole = Annotated[User, Depends(require_role(STAFF_ROLES, "Staff"))]
RequireAdminRole = Annotated[User, Depends(require_role(ADMIN_ROLES, "Admin"))]
