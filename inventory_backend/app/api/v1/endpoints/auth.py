"""
Staff login and current-user endpoints.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from inventory_backend.app.db.session import get_db
from inventory_backend.app.schemas.auth import UserLogin, TokenResponse, UserResponse
from inventory_backend.app.core.exceptions import AuthenticationError, ResourceNotFoundError
from inventory_backend.app.core.jwt import issue_user_token
from inventory_backend.app.core.dependencies import get_current_user
from inventory_backend.app.services import users

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Exchange username and password for a bearer token."""
    try:
        user = await users.authenticate(db, credentials.username, credentials.password)
    except AuthenticationError:
        logger.warning("Login failed", extra={"username": credentials.username})
        raise

    logger.info("Login succeeded", extra={"user_id": user.id})
    return TokenResponse(
        access_token=issue_user_token(user),
        token_type="bearer",
        user_id=user.id,
        username=user.username,
        role=user.role_name,
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    user = await users.get_user(db, current_user["user_id"])
    if user is None:
        raise ResourceNotFoundError("User", current_user["user_id"])
    return UserResponse.model_validate(user)
