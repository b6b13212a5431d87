from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Any, Callable, Dict
import uuid

from reportverse.core.database import get_db
from reportverse.core.exceptions import AuthenticationError, AuthorizationError, InvalidTokenError
from reportverse.core.logging_config import set_user_id
from reportverse.core.security import get_current_user_token
from reportverse.models.user import User, UserRole


async def get_current_user(
    request: Request,
    payload: Dict[str, Any] = Depends(get_current_user_token),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Resolve the bearer token to a stored user. Runs on every request."""
    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenError()

    try:
        uuid.UUID(user_id)
    except ValueError:
        raise InvalidTokenError()

    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError()

    request.state.user_id = user.id
    set_user_id(user.id)
    return user


# Message per role, shown when the caller has the other one
_ROLE_MESSAGES = {
    UserRole.MENTOR: "Only mentors can access this route",
    UserRole.MENTEE: "Only mentees can access this route",
}


def require_role(role: UserRole) -> Callable:
    """Dependency factory: the current user, or Forbidden if their role differs"""

    async def _require_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != role:
            raise AuthorizationError(_ROLE_MESSAGES[role])
        return current_user

    return _require_role


get_current_mentor = require_role(UserRole.MENTOR)
get_current_mentee = require_role(UserRole.MENTEE)
