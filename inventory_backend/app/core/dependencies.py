"""
Request dependencies for staff authentication.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from inventory_backend.app.core.jwt import decode_access_token
from inventory_backend.app.db.session import get_db
from inventory_backend.app.services import users

security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    Resolve the bearer token to its claims.

    The user must still exist (a restore can replace the user table), and
    the ``role`` claim is refreshed from the database so role changes take
    effect without re-login.

    Raises:
        HTTPException: 401 for an invalid token or a vanished user
    """
    claims = decode_access_token(credentials.credentials)
    if claims is None:
        raise _unauthorized("Could not validate credentials")
    if not claims.get("user_id"):
        raise _unauthorized("Invalid token payload")

    user = await users.get_user(db, claims["user_id"])
    if user is None:
        raise _unauthorized("User not found")

    claims["role"] = user.role_name
    return claims
