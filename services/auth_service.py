"""
Authentication service.

Password hashing with bcrypt and JWT issuing/validation with python-jose.
Tokens carry the user's email as ``sub``, a unique ``jti``, the user id as
``nameid`` and the user's role names as ``role``.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel

from config import settings
from repositories.user_repo import UserRepository
import logging

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
BCRYPT_ROUNDS = 12

ROLE_ADMINISTRATOR = "Administrator"
ROLE_CUSTOMER = "Customer"


class CurrentUser(BaseModel):
    id: int
    email: str
    roles: List[str] = []

    def is_in_role(self, role: str) -> bool:
        return role in self.roles


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode('utf-8')[:72]


class AuthService:

    @staticmethod
    def hash_password(password: str) -> str:
        hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
        return hashed.decode('utf-8')

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode('utf-8'))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False

    @staticmethod
    def create_access_token(user: CurrentUser, expires_delta: Optional[timedelta] = None) -> str:
        """Issue a signed JWT for the given user"""
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        claims = {
            "sub": user.email,
            "jti": str(uuid.uuid4()),
            "nameid": str(user.id),
            "role": list(user.roles),
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
            "exp": expire,
        }
        return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=ALGORITHM)

    @staticmethod
    def decode_access_token(token: str) -> Optional[CurrentUser]:
        """
        Validate signature, expiry, issuer and audience.
        Returns None for any invalid token.
        """
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[ALGORITHM],
                audience=settings.JWT_AUDIENCE,
                issuer=settings.JWT_ISSUER,
            )
        except JWTError as e:
            logger.info(f"Rejected access token: {e}")
            return None

        email = payload.get("sub")
        user_id = payload.get("nameid")
        if not email or user_id is None:
            return None

        roles = payload.get("role") or []
        if isinstance(roles, str):
            roles = [roles]

        try:
            return CurrentUser(id=int(user_id), email=email, roles=roles)
        except ValueError:
            return None

    @staticmethod
    async def authenticate(email: str, password: str) -> Optional[CurrentUser]:
        """Check credentials, return the user with roles or None"""
        user = await UserRepository.get_by_email(email)
        if not user:
            return None

        if not await asyncio.to_thread(AuthService.verify_password, password, user['password_hash']):
            return None

        roles = await UserRepository.get_roles(user['id'])
        return CurrentUser(id=user['id'], email=user['email'], roles=roles)

    @staticmethod
    async def register(email: str, password: str, role: str = ROLE_CUSTOMER) -> Optional[int]:
        """Create a user in the given role. Returns None if the email is taken."""
        if await UserRepository.get_by_email(email):
            return None

        password_hash = await asyncio.to_thread(AuthService.hash_password, password)
        return await UserRepository.create_user(email, password_hash, role)
