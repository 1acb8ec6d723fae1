"""Dual-mode CRUD facade over the remote catalog service and the offline store."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from ..backend import BackendSelector
from ..errors import DecodeError, NotConfiguredError, TransportError
from ..models import (
    CatalogEntry,
    EntryId,
    ExistingEntry,
    classify_entry,
    parse_entries,
)
from ..session import AuthSessionManager
from ..storage import CATALOG_SLOT, LocalStore

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Reads and writes catalog entries against whichever backend is active.

    Reads never raise: outages degrade to an empty catalog. Writes always
    surface failures so a lost edit is never hidden from the caller.
    """

    def __init__(
        self,
        selector: BackendSelector,
        session: AuthSessionManager,
        store: LocalStore,
        http_client: httpx.AsyncClient,
        *,
        read_retry_attempts: int = 0,
        read_retry_backoff: float = 0.25,
    ):
        self._selector = selector
        self._session = session
        self._store = store
        self._client = http_client
        self._read_retry_attempts = max(0, read_retry_attempts)
        self._read_retry_backoff = max(0.0, read_retry_backoff)
        self._store_lock = asyncio.Lock()

    async def list_all(self) -> list[CatalogEntry]:
        """Return every entry, or an empty list when the backend is unavailable."""

        if self._selector.is_live():
            return await self._fetch_remote()
        return await self._read_local()

    async def save(self, entry: CatalogEntry) -> CatalogEntry:
        """Create or fully replace ``entry`` and return the canonical record."""

        if self._selector.is_live():
            return await self._save_remote(entry)
        async with self._store_lock:
            return await self._save_local(entry)

    async def remove(self, entry_id: EntryId) -> None:
        """Delete the entry with ``entry_id``; unknown ids are a no-op."""

        if self._selector.is_live():
            await self._remove_remote(entry_id)
            return
        async with self._store_lock:
            entries = await self._read_local()
            remaining = [entry for entry in entries if not entry.matches_id(entry_id)]
            if len(remaining) != len(entries):
                await self._write_local(remaining)

    async def replace_all(self, entries: list[CatalogEntry]) -> None:
        """Overwrite the offline catalog in one write."""

        async with self._store_lock:
            await self._write_local(entries)

    async def _fetch_remote(self) -> list[CatalogEntry]:
        url = f"{self._selector.require_endpoint()}/movies"
        max_attempts = self._read_retry_attempts + 1
        response: httpx.Response | None = None
        for attempt in range(1, max_attempts + 1):
            try:
                response = await self._client.get(url)
                break
            except httpx.InvalidURL as exc:
                logger.warning("Catalog endpoint %s is not a valid URL: %s", url, exc)
                return []
            except httpx.HTTPError as exc:
                if attempt < max_attempts:
                    await asyncio.sleep(self._read_retry_backoff * 2 ** (attempt - 1))
                    continue
                logger.warning("Catalog fetch from %s failed: %s", url, exc)
                return []
        if response is None:
            return []

        if response.status_code >= 400:
            logger.warning(
                "Catalog fetch from %s returned %s", url, response.status_code
            )
            return []
        try:
            payload = response.json()
        except ValueError:
            logger.warning("Unexpected non-JSON catalog response from %s", url)
            return []
        if not isinstance(payload, list):
            logger.warning("Unexpected catalog response structure from %s", url)
            return []
        return parse_entries(payload)

    async def _save_remote(self, entry: CatalogEntry) -> CatalogEntry:
        base = self._selector.require_endpoint()
        headers = self._auth_headers()
        body = entry.to_payload()
        target = classify_entry(entry)
        try:
            if isinstance(target, ExistingEntry):
                response = await self._client.put(
                    f"{base}/movies/{target.id}", json=body, headers=headers
                )
            else:
                response = await self._client.post(
                    f"{base}/movies", json=body, headers=headers
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Saving entry failed: {exc}") from exc
        if response.status_code >= 400:
            raise TransportError(
                f"Saving entry failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return self._decode_entry(response)

    async def _remove_remote(self, entry_id: EntryId) -> None:
        url = f"{self._selector.require_endpoint()}/movies/{entry_id}"
        try:
            response = await self._client.delete(url, headers=self._auth_headers())
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Deleting entry failed: {exc}") from exc
        if response.status_code == 404:
            logger.info("Entry %s was already absent from the backend", entry_id)
            return
        if response.status_code >= 400:
            raise TransportError(
                f"Deleting entry failed with status {response.status_code}",
                status_code=response.status_code,
            )

    async def _read_local(self) -> list[CatalogEntry]:
        payload = await self._store.get_json(CATALOG_SLOT)
        if payload is None:
            return []
        if not isinstance(payload, list):
            logger.warning("Stored catalog is not a list; ignoring it")
            return []
        return parse_entries(payload)

    async def _write_local(self, entries: list[CatalogEntry]) -> None:
        await self._store.set_json(
            CATALOG_SLOT, [entry.to_payload() for entry in entries]
        )

    async def _save_local(self, entry: CatalogEntry) -> CatalogEntry:
        entries = await self._read_local()
        if entry.id is None:
            entry = entry.model_copy(update={"id": self._next_local_id(entries)})

        for index, existing in enumerate(entries):
            if existing.matches_id(entry.id):
                entries[index] = entry
                break
        else:
            entries.insert(0, entry)

        await self._write_local(entries)
        return entry

    @staticmethod
    def _next_local_id(entries: list[CatalogEntry]) -> int:
        taken = {str(entry.id) for entry in entries if entry.id is not None}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return candidate

    def _auth_headers(self) -> dict[str, str]:
        token = self._session.token
        if not token:
            raise NotConfiguredError("Sign in before changing the catalog")
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _decode_entry(response: httpx.Response) -> CatalogEntry:
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise DecodeError("Backend returned a non-JSON entry") from exc
        if not isinstance(payload, dict):
            raise DecodeError("Backend returned an unexpected entry structure")
        try:
            return CatalogEntry.model_validate(payload)
        except ValueError as exc:
            raise DecodeError(f"Backend returned an invalid entry: {exc}") from exc
