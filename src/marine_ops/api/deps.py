"""
Shared route dependencies: the authenticated user and permission checks.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from marine_ops.api.auth.jwt_handler import JWTHandler, InvalidTokenError
from marine_ops.api.auth.permissions import has_permission, should_hide_totals
from marine_ops.db import get_db_session
from marine_ops.models import User
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()
jwt_handler = JWTHandler()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db_session)
) -> User:
    """Resolve the bearer token to an active user."""
    try:
        token_data = jwt_handler.verify_token(credentials.credentials)
        user_id = int(token_data["sub"])
    except (InvalidTokenError, KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")
    return user


def require_permission(module: str, action: str = "view"):
    """Dependency factory rejecting users whose role lacks ``action`` on ``module``."""

    async def checker(user: User = Depends(get_current_user)) -> User:
        if not has_permission(user.role, module, action):
            logger.warning(f"User {user.id} ({user.role}) denied {action} on {module}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not allowed to {action} {module}"
            )
        return user

    return checker


def hides_totals(user: User, module: str) -> bool:
    return should_hide_totals(user.role, module)
