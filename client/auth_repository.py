import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from jose import JWTError, jwt

from client.endpoints import Endpoints
from client.http_client import BookStoreHttpClient
from client.models import LoginModel, RegistrationModel
from client.token_store import TokenStore

logger = logging.getLogger(__name__)

ADMINISTRATOR_ROLE = "Administrator"


class AuthenticationRepository:

    def __init__(self, http_client: BookStoreHttpClient, endpoints: Optional[Endpoints] = None):
        self.http_client = http_client
        self.endpoints = endpoints or Endpoints()

    @property
    def token_store(self) -> TokenStore:
        return self.http_client.token_store

    async def register(self, user: RegistrationModel) -> bool:
        payload = user.model_dump(include={"email_address", "password"})
        try:
            response = await self.http_client.post(self.endpoints.register, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Registration request failed: {e}")
            return False
        return response.is_success

    async def login(self, user: LoginModel) -> bool:
        """Exchange credentials for a token and keep it in the token store"""
        try:
            response = await self.http_client.post(self.endpoints.login, json=user.model_dump())
        except httpx.HTTPError as e:
            logger.error(f"Login request failed: {e}")
            return False

        if not response.is_success:
            return False

        self.token_store.set_token(response.json()["token"])
        return True

    def logout(self) -> None:
        self.token_store.clear()


class AuthenticationState:
    """
    Who the stored token says the user is.

    The claims are read without verifying the signature; the API does the
    verification, this only drives what the front end shows.
    """

    def __init__(self, token_store: TokenStore):
        self.claims: Dict[str, Any] = {}
        token = token_store.get_token()
        if token:
            try:
                self.claims = jwt.get_unverified_claims(token)
            except JWTError as e:
                logger.warning(f"Stored token is unreadable: {e}")

    @property
    def email(self) -> Optional[str]:
        return self.claims.get("sub")

    @property
    def roles(self) -> List[str]:
        roles = self.claims.get("role") or []
        return [roles] if isinstance(roles, str) else list(roles)

    @property
    def expires_at(self) -> Optional[datetime]:
        exp = self.claims.get("exp")
        return datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None

    @property
    def is_authenticated(self) -> bool:
        if not self.email:
            return False
        expires_at = self.expires_at
        return expires_at is None or expires_at > datetime.now(timezone.utc)

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and ADMINISTRATOR_ROLE in self.roles
