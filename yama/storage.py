"""Durable string-keyed slots used by the offline store."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .db_models import StorageSlot

logger = logging.getLogger(__name__)

ENDPOINT_SLOT = "yama_api_url"
TOKEN_SLOT = "yama_token"
CATALOG_SLOT = "yama_movies"


class LocalStore:
    """Async key-value facade over the ``storage_slots`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self._session_factory() as session:
            slot = await session.get(StorageSlot, key)
            if slot is None:
                return None
            return slot.value

    async def set(self, key: str, value: str) -> None:
        now = datetime.utcnow()
        async with self._session_factory() as session:
            slot = await session.get(StorageSlot, key)
            if slot is None:
                session.add(
                    StorageSlot(key=key, value=value, created_at=now, updated_at=now)
                )
            else:
                slot.value = value
                slot.updated_at = now
            await session.commit()

    async def remove(self, key: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(StorageSlot).where(StorageSlot.key == key))
            await session.commit()

    async def get_json(self, key: str) -> Any | None:
        """Return the decoded slot value, or ``None`` when absent or corrupt."""

        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable value stored under %s", key)
            return None

    async def set_json(self, key: str, value: Any) -> None:
        await self.set(key, json.dumps(value))
