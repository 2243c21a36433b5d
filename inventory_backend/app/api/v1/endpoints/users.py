"""
Staff user and role endpoints.

Creating and listing users is restricted to the Admin role.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.guards import require_admin
from inventory_backend.app.db.session import get_db
from inventory_backend.app.schemas.auth import RoleResponse, UserCreate, UserResponse
from inventory_backend.app.services import users

router = APIRouter(tags=["Users"])


@router.get("/roles", response_model=List[RoleResponse])
async def list_roles(db: AsyncSession = Depends(get_db)):
    return await users.list_roles(db)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a staff user with an existing role (Admin only)."""
    user = await users.create_user(db, user_data.username, user_data.password, user_data.role_id)
    return UserResponse.model_validate(user)


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return [UserResponse.model_validate(user) for user in await users.list_users(db)]
