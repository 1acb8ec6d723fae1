"""High level orchestration of the in-memory catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..backend import BackendSelector
from ..derivations import UserList, entries_by_category, recommend, search_titles
from ..derivations import featured as featured_entry
from ..errors import NotConfiguredError
from ..models import CatalogEntry, EntryId
from ..session import AuthSessionManager
from .gemini import GeminiClient
from .repository import CatalogRepository
from .seeding import bootstrap

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StudioStatus:
    """Connection and session summary shown by the studio."""

    live: bool
    endpoint: str
    authenticated: bool
    entry_count: int

    def to_payload(self) -> dict[str, object]:
        return {
            "mode": "live" if self.live else "simulation",
            "endpoint": self.endpoint or None,
            "authenticated": self.authenticated,
            "entries": self.entry_count,
        }


class CatalogService:
    """Keeps the in-memory catalog consistent with the active backend."""

    def __init__(
        self,
        selector: BackendSelector,
        session: AuthSessionManager,
        repository: CatalogRepository,
        assistant: GeminiClient | None = None,
    ):
        self._selector = selector
        self._session = session
        self._repository = repository
        self._assistant = assistant
        self._entries: list[CatalogEntry] = []
        self._saved = UserList()

    @property
    def entries(self) -> list[CatalogEntry]:
        return list(self._entries)

    @property
    def saved(self) -> UserList:
        return self._saved

    async def start(self) -> None:
        """Load connection and session state, then the initial catalog."""

        await self._selector.load()
        await self._session.load()
        self._entries = await bootstrap(self._repository, self._selector)

    async def reload(self) -> list[CatalogEntry]:
        self._entries = await bootstrap(self._repository, self._selector)
        return self.entries

    def status(self) -> StudioStatus:
        return StudioStatus(
            live=self._selector.is_live(),
            endpoint=self._selector.base_endpoint(),
            authenticated=self._session.is_authenticated,
            entry_count=len(self._entries),
        )

    async def configure_endpoint(self, endpoint: str | None) -> StudioStatus:
        self._require_session()
        await self._selector.configure(endpoint)
        await self.reload()
        return self.status()

    async def login(self, email: str, password: str) -> str:
        return await self._session.login(email, password)

    async def logout(self) -> None:
        await self._session.logout()

    async def save(self, entry: CatalogEntry) -> CatalogEntry:
        """Persist ``entry`` and merge the canonical record into the catalog."""

        self._require_session()
        saved = await self._repository.save(entry)
        self._merge(saved)
        logger.info("Saved entry %s (%s)", saved.id, saved.title)
        return saved

    async def delete(self, entry_id: EntryId) -> None:
        self._require_session()
        await self._repository.remove(entry_id)
        logger.info("Deleted entry %s", entry_id)
        self._entries = [entry for entry in self._entries if not entry.matches_id(entry_id)]
        self._saved.discard(entry_id)

    def new_entry(self) -> CatalogEntry:
        """Return the blank entry the editor starts from."""

        return CatalogEntry.draft()

    def get(self, entry_id: EntryId) -> CatalogEntry | None:
        for entry in self._entries:
            if entry.matches_id(entry_id):
                return entry
        return None

    def search(self, query: str) -> list[CatalogEntry]:
        return search_titles(self._entries, query)

    def recommendations(self) -> list[CatalogEntry]:
        return recommend(self._entries, self._saved)

    def rows(self) -> dict[str, list[CatalogEntry]]:
        return entries_by_category(self._entries)

    def featured(self) -> CatalogEntry | None:
        return featured_entry(self._entries)

    def toggle_saved(self, entry_id: EntryId) -> bool:
        entry = self.get(entry_id)
        if entry is None:
            raise KeyError(f"Entry {entry_id} not found")
        return self._saved.toggle(entry)

    async def suggest_synopsis(self, entry: CatalogEntry) -> str | None:
        if self._assistant is None:
            return None
        return await self._assistant.suggest_synopsis(entry)

    def _merge(self, saved: CatalogEntry) -> None:
        for index, existing in enumerate(self._entries):
            if existing.matches_id(saved.id):
                self._entries[index] = saved
                break
        else:
            self._entries.insert(0, saved)
        self._saved.refresh(saved)

    def _require_session(self) -> None:
        if not self._session.is_authenticated:
            raise NotConfiguredError("Sign in to the studio before editing the catalog")
