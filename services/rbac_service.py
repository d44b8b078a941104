"""
Role-Based Access Control (RBAC) service
Defines roles and dependencies for FastAPI
"""
from typing import List

from fastapi import Depends, HTTPException

from api.auth import get_current_user
from models import User

ROLE_ADMIN = "admin"
ROLE_TRAINER = "trainer"
ROLE_USER = "user"

VALID_ROLES = [ROLE_ADMIN, ROLE_TRAINER, ROLE_USER]


def require_role(allowed_roles: List[str]):
    """
    Dependency factory that ensures user has one of the allowed roles.

    Usage:
        @router.get("/admin-endpoint")
        async def admin_endpoint(user: User = Depends(require_role([ROLE_ADMIN]))):
            ...
    """
    async def check_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=403,
                detail=f"User role {current_user.role} is not authorized to access this route",
            )
        return current_user

    return check_role


def ensure_self_or_admin(current_user: User, user_id: int, what: str) -> None:
    """403 unless the caller owns the resource or is an admin"""
    if current_user.id != user_id and current_user.role != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail=f"Not authorized to access this {what}")


def ensure_owner_or_admin(current_user: User, owner_id: int, action: str, what: str) -> None:
    if current_user.id != owner_id and current_user.role != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail=f"Not authorized to {action} this {what}")
