from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials

from ..core.config import settings
from ..core.database import SessionLocal, get_redis
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..core.locks import LocalDateLock, RedisDateLock
from ..core.security import TokenPayload, decode_access_token, security
from ..core.store import DocumentStore
from ..models.constants import Collection, Messages, UserRole
from ..services.auth_service import public_user


@lru_cache
def get_store() -> DocumentStore:
    """Process-wide document store."""
    return DocumentStore(SessionLocal)


@lru_cache
def get_booking_lock():
    """Per-date lock guarding the appointment check-then-write."""
    if settings.BOOKING_LOCK_BACKEND == "redis":
        return RedisDateLock(
            get_redis(),
            timeout=settings.BOOKING_LOCK_TIMEOUT,
            blocking_timeout=settings.BOOKING_LOCK_BLOCKING_TIMEOUT,
        )
    return LocalDateLock()


async def get_current_user_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenPayload:
    """Extract and verify JWT token from Authorization header."""
    if credentials is None:
        raise AuthenticationError(Messages.TOKEN_REQUIRED)

    token_payload = decode_access_token(credentials.credentials)
    if not token_payload or not token_payload.sub:
        raise AuthenticationError(Messages.TOKEN_INVALID)

    return token_payload


async def get_current_user(
    token_payload: TokenPayload = Depends(get_current_user_token),
    store: DocumentStore = Depends(get_store)
) -> Dict[str, Any]:
    """Get current authenticated user from the store."""
    user = store.get(Collection.USERS.value, token_payload.sub)
    if user is None:
        raise AuthenticationError(Messages.TOKEN_INVALID)

    return public_user(user)


# Role-based access control dependencies
def require_role(allowed_roles: List[UserRole]):
    """Create a dependency that requires specific user roles."""
    async def role_checker(
        current_user: Dict[str, Any] = Depends(get_current_user)
    ) -> Dict[str, Any]:
        if current_user.get("role") not in [role.value for role in allowed_roles]:
            raise AuthorizationError(
                f"{Messages.FORBIDDEN}. Required roles: {[role.value for role in allowed_roles]}"
            )
        return current_user

    return role_checker


async def get_professional_user(
    current_user: Dict[str, Any] = Depends(require_role([UserRole.PROFESSIONAL]))
) -> Dict[str, Any]:
    """Require professional role."""
    return current_user
