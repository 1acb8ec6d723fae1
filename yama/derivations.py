"""Read models computed from the catalog and the viewer's saved list."""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from .models import CatalogEntry, EntryId

TOP_RATED_LIMIT = 10
TOP_RATED_MARKER = "9"


class UserList:
    """Titles the viewer saved, in the order they were added."""

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries: dict[str, CatalogEntry] = {}
        for entry in entries:
            self.add(entry)

    def __contains__(self, entry_id: object) -> bool:
        if isinstance(entry_id, CatalogEntry):
            entry_id = entry_id.id
        if entry_id is None:
            return False
        return str(entry_id) in self._entries

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, entry: CatalogEntry) -> None:
        if entry.id is None:
            raise ValueError("Only entries with an id can be saved to the list")
        self._entries.setdefault(str(entry.id), entry)

    def discard(self, entry_id: EntryId) -> None:
        self._entries.pop(str(entry_id), None)

    def toggle(self, entry: CatalogEntry) -> bool:
        """Add or remove ``entry``; return whether it is now saved."""

        if entry in self:
            self.discard(entry.id)  # type: ignore[arg-type]
            return False
        self.add(entry)
        return True

    def refresh(self, entry: CatalogEntry) -> None:
        """Swap in a newer copy of an already saved entry."""

        if entry.id is not None and str(entry.id) in self._entries:
            self._entries[str(entry.id)] = entry


def search_titles(entries: Sequence[CatalogEntry], query: str) -> list[CatalogEntry]:
    """Return entries whose title contains ``query``, ignoring case."""

    needle = (query or "").lower()
    if not needle:
        return list(entries)
    return [
        entry
        for entry in entries
        if entry.title is not None and needle in entry.title.lower()
    ]


def recommend(
    entries: Sequence[CatalogEntry], user_list: UserList
) -> list[CatalogEntry]:
    """Return the "Recommended For You" row.

    With nothing saved, the row falls back to titles whose free-text rating
    contains a 9. Otherwise it lists unsaved titles sharing the first genre
    word of anything saved.
    """

    if len(user_list) == 0:
        top_rated = [
            entry
            for entry in entries
            if entry.rating is not None and TOP_RATED_MARKER in entry.rating
        ]
        return top_rated[:TOP_RATED_LIMIT]

    families = {saved.genre_family() for saved in user_list}
    return [
        entry
        for entry in entries
        if entry not in user_list and entry.genre_family() in families
    ]


def entries_by_category(
    entries: Sequence[CatalogEntry],
) -> dict[str, list[CatalogEntry]]:
    grouped: dict[str, list[CatalogEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.category or "Uncategorized", []).append(entry)
    return grouped


def featured(entries: Sequence[CatalogEntry]) -> CatalogEntry | None:
    return entries[0] if entries else None
