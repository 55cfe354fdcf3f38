from typing import Iterable
from fastapi import Depends
from app.core.exceptions import Forbidden
from app.core.logging_config import logger
from app.dependencies import get_current_user
from app.models.user import User, UserRole


def authorize(principal: User, allowed_roles: Iterable[UserRole]) -> None:
    """
    Check the principal's role against an explicit set of accepted roles.

    Roles are flat: superadmin does not implicitly satisfy a
    company_admin-only route, so every caller lists each role it accepts.

    Raises:
        Forbidden: If the role is not in allowed_roles
    """
    allowed = {UserRole(role) for role in allowed_roles}
    if principal.role not in allowed:
        logger.warning(f"Role denied: user_id={principal.id}, role={principal.role.value}")
        raise Forbidden(f"Role {principal.role.value} is not allowed to access this resource")


def require_roles(*roles: UserRole):
    """
    FastAPI dependency factory for role-restricted routes.

    Usage:
        current_user: User = Depends(require_roles(UserRole.superadmin))
    """

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        authorize(current_user, roles)
        return current_user

    return dependency
