"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import AsyncIterator

import pytest

# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``yama``
# sits at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from yama.database import Database  # noqa: E402
from yama.storage import LocalStore  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture
async def store(tmp_path: Path, anyio_backend: str) -> AsyncIterator[LocalStore]:
    """A durable store backed by a throwaway SQLite file."""

    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'yama.db'}")
    await database.create_all()
    try:
        yield LocalStore(database.session_factory)
    finally:
        await database.dispose()


class MemoryStore(LocalStore):
    """In-process stand-in for the durable store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.slots: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.slots.get(key)

    async def set(self, key: str, value: str) -> None:
        self.slots[key] = value

    async def remove(self, key: str) -> None:
        self.slots.pop(key, None)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()
