"""Pydantic models describing catalog entries and write targets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ContentType = Literal["movie", "series"]
EntryId = Union[int, str]

# Ids up to this length are client-generated, so saving such an entry creates
# a remote record. Longer ids were issued by the backend and are updated.
CLIENT_ID_MAX_LENGTH = 10


class CatalogEntry(BaseModel):
    """A single title available for browsing."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: EntryId | None = None
    type: ContentType = "movie"
    title: str | None = None
    description: str | None = None
    genre: str | None = None
    rating: str | None = None
    duration: str | None = None
    year: int | None = None
    category: str | None = None
    image: str | None = None
    hero_image: str | None = Field(default=None, alias="heroImage")
    status: str | None = None
    stream_id: str | None = Field(default=None, alias="streamId")
    seasons: list[Any] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("rating", "duration", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> object:
        """Free-text fields occasionally arrive as bare numbers."""

        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("year", mode="before")
    @classmethod
    def _parse_year(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            try:
                return int(text)
            except ValueError:
                return None
        return value

    @field_validator("seasons", mode="before")
    @classmethod
    def _default_seasons(cls, value: object) -> object:
        return [] if value is None else value

    @model_validator(mode="after")
    def _default_hero_image(self) -> "CatalogEntry":
        if not self.hero_image and self.image:
            self.hero_image = self.image
        return self

    @classmethod
    def draft(cls, **overrides: Any) -> "CatalogEntry":
        """Return a blank entry pre-filled the way the studio editor starts."""

        values: dict[str, Any] = {
            "type": "movie",
            "title": "",
            "description": "",
            "rating": "New",
            "year": datetime.utcnow().year,
            "duration": "",
            "genre": "",
            "image": "",
            "heroImage": "",
            "category": "New Releases",
            "status": "ready",
            "views": "0",
            "streamId": "",
            "seasons": [],
        }
        values.update(overrides)
        return cls.model_validate(values)

    @property
    def has_stream(self) -> bool:
        """Whether a playback identifier has been configured."""

        return bool(self.stream_id and self.stream_id.strip())

    def genre_family(self) -> str | None:
        """Return the first space-delimited token of the genre."""

        if self.genre is None:
            return None
        return self.genre.split(" ")[0]

    def matches_id(self, entry_id: EntryId | None) -> bool:
        if self.id is None or entry_id is None:
            return False
        return str(self.id) == str(entry_id)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body exchanged with the backend and the store."""

        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True, slots=True)
class NewEntry:
    """An entry the backend has not issued an identifier for yet."""

    entry: CatalogEntry


@dataclass(frozen=True, slots=True)
class ExistingEntry:
    """An entry carrying a backend-issued identifier."""

    id: str
    entry: CatalogEntry


EntryTarget = Union[NewEntry, ExistingEntry]


def classify_entry(entry: CatalogEntry) -> EntryTarget:
    """Decide whether saving ``entry`` creates or replaces a remote record."""

    if entry.id is not None and len(str(entry.id)) > CLIENT_ID_MAX_LENGTH:
        return ExistingEntry(id=str(entry.id), entry=entry)
    return NewEntry(entry=entry)


def parse_entries(payload: object) -> list[CatalogEntry]:
    """Decode a list payload, skipping records that fail validation."""

    if not isinstance(payload, list):
        return []
    entries: list[CatalogEntry] = []
    for raw in payload:
        if not isinstance(raw, dict):
            continue
        try:
            entries.append(CatalogEntry.model_validate(raw))
        except ValueError:
            continue
    return entries
