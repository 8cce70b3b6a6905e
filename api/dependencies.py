from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
import logging

from services.auth_service import AuthService, CurrentUser

logger = logging.getLogger(__name__)

# auto_error off so a missing header is a 401, not a 403
bearer_scheme = HTTPBearer(auto_error=False)

INTERNAL_ERROR_DETAIL = "Something went wrong. Please contact Admin"


def internal_error(message: str) -> HTTPException:
    """Log the real failure, hand the caller a generic 500"""
    logger.error(message)
    return HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> CurrentUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise credentials_exception

    user = AuthService.decode_access_token(credentials.credentials)
    if user is None:
        raise credentials_exception

    return user


def require_roles(*roles: str):
    """Dependency factory: authenticated user holding at least one of roles"""

    async def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not any(user.is_in_role(role) for role in roles):
            logger.warning(f"User {user.email} lacks role(s) {', '.join(roles)}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return checker
