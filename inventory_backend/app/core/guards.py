"""
Security guards for role-based access control.
"""

from typing import List
from fastapi import Depends, HTTPException, status
from inventory_backend.app.core.exceptions import InsufficientPermissionsError
from inventory_backend.app.models.enums import RoleName
from inventory_backend.app.core.dependencies import get_current_user


def require_role(allowed_roles: List[RoleName]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/users")
        async def list_users(current_user: dict = Depends(require_role([RoleName.ADMIN]))):
            ...

    Raises:
        InsufficientPermissionsError (403) if the caller's role is not in allowed_roles
    """
    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        role = current_user.get("role")

        if not role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Role information missing from token"
            )

        if role not in {r.value for r in allowed_roles}:
            raise InsufficientPermissionsError(
                "Access denied for this role",
                details={"required_roles": [r.value for r in allowed_roles], "role": role},
            )

        return current_user

    return role_checker


require_admin = require_role([RoleName.ADMIN])
