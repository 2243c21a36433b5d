"""
User and role management.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.exceptions import (
    AuthenticationError,
    DuplicateUsernameError,
    ResourceNotFoundError,
)
from inventory_backend.app.core.security import get_password_hash, verify_password
from inventory_backend.app.models.user import Role, User
from inventory_backend.app.services.ledger import rollback_quietly

logger = logging.getLogger(__name__)


async def list_roles(db: AsyncSession) -> List[Role]:
    result = await db.execute(select(Role).order_by(Role.name))
    return list(result.scalars().all())


async def list_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.username))
    return list(result.unique().scalars().all())


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id).execution_options(populate_existing=True))
    return result.unique().scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username).execution_options(populate_existing=True))
    return result.unique().scalar_one_or_none()


async def create_user(db: AsyncSession, username: str, password: str, role_id: int) -> User:
    if await db.get(Role, role_id) is None:
        raise ResourceNotFoundError("Role", role_id)
    if await get_user_by_username(db, username) is not None:
        raise DuplicateUsernameError(username)

    user = User(username=username, password_hash=get_password_hash(password), role_id=role_id)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await rollback_quietly(db, "create user")
        raise DuplicateUsernameError(username)

    logger.info("User created", extra={"user_id": user.id, "role_id": role_id})
    return await get_user_by_username(db, username)


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    user = await get_user_by_username(db, username)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Incorrect username or password")
    return user
