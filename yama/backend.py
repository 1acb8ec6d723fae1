"""Selection between the remote catalog service and the offline store."""

from __future__ import annotations

import logging

import httpx

from .errors import NotConfiguredError, ValidationError
from .storage import ENDPOINT_SLOT, LocalStore

logger = logging.getLogger(__name__)


class BackendSelector:
    """Holds the configured endpoint and answers which backend is active.

    ``is_live`` and ``base_endpoint`` are synchronous and read only the cached
    endpoint, so every caller sees the same answer between ``load`` and
    ``configure`` calls.
    """

    def __init__(self, store: LocalStore, default_endpoint: str | None = None):
        self._store = store
        self._default_endpoint = self._normalize_endpoint(default_endpoint)
        self._endpoint = self._default_endpoint

    def is_live(self) -> bool:
        return bool(self._endpoint)

    def base_endpoint(self) -> str:
        return self._endpoint

    def require_endpoint(self) -> str:
        if not self._endpoint:
            raise NotConfiguredError("No catalog endpoint configured")
        return self._endpoint

    async def load(self) -> None:
        """Refresh the cached endpoint from the durable store."""

        stored = await self._store.get(ENDPOINT_SLOT)
        if stored is None:
            self._endpoint = self._default_endpoint
        else:
            endpoint = self._normalize_endpoint(stored)
            try:
                self._endpoint = self._validate_endpoint(endpoint)
            except ValidationError as exc:
                logger.warning("Ignoring stored catalog endpoint: %s", exc)
                self._endpoint = self._default_endpoint
        logger.info(
            "Catalog backend: %s",
            self._endpoint if self._endpoint else "offline simulation",
        )

    async def configure(self, endpoint: str | None) -> None:
        """Persist a new endpoint, or switch to offline mode when blank.

        Raises :class:`ValidationError` and leaves the stored endpoint
        untouched when ``endpoint`` is not an http(s) URL.
        """

        normalized = self._validate_endpoint(self._normalize_endpoint(endpoint))
        # An explicit empty slot overrides any configured default.
        await self._store.set(ENDPOINT_SLOT, normalized)
        self._endpoint = normalized
        logger.info(
            "Catalog backend switched to %s",
            normalized if normalized else "offline simulation",
        )

    @staticmethod
    def _normalize_endpoint(value: str | None) -> str:
        if not value:
            return ""
        return value.strip().rstrip("/")

    @staticmethod
    def _validate_endpoint(value: str) -> str:
        if not value:
            return value
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValidationError(f"Invalid catalog endpoint {value!r}: {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ValidationError(f"Catalog endpoint {value!r} must be an http(s) URL")
        return value
