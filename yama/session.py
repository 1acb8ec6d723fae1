"""Bearer-token session used to authorise catalog mutations."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import httpx

from .backend import BackendSelector
from .errors import (
    AuthenticationError,
    DecodeError,
    TransportError,
    ValidationError,
)
from .storage import TOKEN_SLOT, LocalStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(slots=True)
class AuthSession:
    """The single active credential of the process."""

    token: str
    email: str | None = None


class AuthSessionManager:
    """Issues, stores and clears the bearer token.

    Tokens never expire on the client side; the backend is the only party that
    can reject a stale one.
    """

    def __init__(
        self,
        selector: BackendSelector,
        store: LocalStore,
        http_client: httpx.AsyncClient,
    ):
        self._selector = selector
        self._store = store
        self._client = http_client
        self._session: AuthSession | None = None

    @property
    def current(self) -> AuthSession | None:
        return self._session

    @property
    def token(self) -> str | None:
        return self._session.token if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    async def load(self) -> None:
        """Restore a token persisted by an earlier login."""

        stored = await self._store.get(TOKEN_SLOT)
        self._session = AuthSession(token=stored) if stored else None

    async def login(self, email: str, password: str) -> str:
        """Obtain a token for ``email`` and make it the active session."""

        if self._selector.is_live():
            token = await self._remote_login(email, password)
        else:
            token = self._simulated_login(password)
        await self._store.set(TOKEN_SLOT, token)
        self._session = AuthSession(token=token, email=email)
        logger.info("Studio session opened for %s", email)
        return token

    async def logout(self) -> None:
        if self._session is not None:
            logger.info("Studio session closed")
        self._session = None
        await self._store.remove(TOKEN_SLOT)

    async def _remote_login(self, email: str, password: str) -> str:
        url = f"{self._selector.require_endpoint()}/auth/login"
        try:
            response = await self._client.post(
                url, json={"email": email, "password": password}
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Login request failed: {exc}") from exc
        if response.status_code >= 400:
            logger.info("Login rejected for %s: %s", email, response.status_code)
            raise AuthenticationError("Invalid Credentials")
        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError("Login response was not valid JSON") from exc
        token = payload.get("token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise DecodeError("Login response did not include a token")
        return token

    @staticmethod
    def _simulated_login(password: str) -> str:
        # Simulation placeholder: any sufficiently long password is accepted.
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password too short")
        return f"mock-jwt-token-{int(time.time() * 1000)}"
