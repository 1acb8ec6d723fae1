"""Built-in sample catalog used to populate an empty offline store."""

from __future__ import annotations

import logging
from typing import Any

from ..backend import BackendSelector
from ..models import CatalogEntry
from .repository import CatalogRepository

logger = logging.getLogger(__name__)


SAMPLE_CATALOG: tuple[dict[str, Any], ...] = (
    {
        "id": 1,
        "type": "movie",
        "title": "Neon Horizon",
        "description": "A courier races across a flooded megacity to deliver the last uncorrupted memory drive.",
        "genre": "Sci-Fi Thriller",
        "rating": "9.1",
        "duration": "2h 14m",
        "year": 2024,
        "category": "Trending Now",
        "status": "ready",
        "views": "0",
        "image": "https://images.unsplash.com/photo-1534447677768-be436bb09401?auto=format&fit=crop&q=80&w=800",
        "heroImage": "https://images.unsplash.com/photo-1534447677768-be436bb09401?auto=format&fit=crop&q=80&w=2000",
        "streamId": "",
        "seasons": [],
    },
    {
        "id": 2,
        "type": "series",
        "title": "The Quiet Shore",
        "description": "Three sisters return to their coastal hometown and uncover what their father buried there.",
        "genre": "Drama Mystery",
        "rating": "8.7",
        "duration": "2 Seasons",
        "year": 2023,
        "category": "Trending Now",
        "status": "ready",
        "views": "0",
        "image": "https://images.unsplash.com/photo-1507525428034-b723cf961d3e?auto=format&fit=crop&q=80&w=800",
        "heroImage": "",
        "streamId": "",
        "seasons": [
            {"number": 1, "episodes": 8},
            {"number": 2, "episodes": 6},
        ],
    },
    {
        "id": 3,
        "type": "movie",
        "title": "Iron Meridian",
        "description": "A disgraced pilot is handed one final mission above a frozen front line.",
        "genre": "Action War",
        "rating": "7.9",
        "duration": "1h 58m",
        "year": 2022,
        "category": "Action & Adventure",
        "status": "ready",
        "views": "0",
        "image": "https://images.unsplash.com/photo-1500530855697-b586d89ba3ee?auto=format&fit=crop&q=80&w=800",
        "heroImage": "",
        "streamId": "",
        "seasons": [],
    },
    {
        "id": 4,
        "type": "series",
        "title": "Orbit Station",
        "description": "The crew of a failing research station argues over who gets the last seat home.",
        "genre": "Sci-Fi Drama",
        "rating": "9.4",
        "duration": "1 Season",
        "year": 2025,
        "category": "New Releases",
        "status": "ready",
        "views": "0",
        "image": "https://images.unsplash.com/photo-1446776811953-b23d57bd21aa?auto=format&fit=crop&q=80&w=800",
        "heroImage": "",
        "streamId": "",
        "seasons": [{"number": 1, "episodes": 10}],
    },
    {
        "id": 5,
        "type": "movie",
        "title": "Paper Lanterns",
        "description": "Two strangers keep missing each other at the same night market for a decade.",
        "genre": "Romance Drama",
        "rating": "8.2",
        "duration": "1h 46m",
        "year": 2021,
        "category": "New Releases",
        "status": "ready",
        "views": "0",
        "image": "https://images.unsplash.com/photo-1513151233558-d860c5398176?auto=format&fit=crop&q=80&w=800",
        "heroImage": "",
        "streamId": "",
        "seasons": [],
    },
    {
        "id": 6,
        "type": "movie",
        "title": "Last Light Protocol",
        "description": "An AI safety auditor discovers the system she certified has been rewriting her reports.",
        "genre": "Sci-Fi Mystery",
        "rating": "8.9",
        "duration": "2h 02m",
        "year": 2025,
        "category": "Action & Adventure",
        "status": "ready",
        "views": "0",
        "image": "https://images.unsplash.com/photo-1518770660439-4636190af475?auto=format&fit=crop&q=80&w=800",
        "heroImage": "",
        "streamId": "",
        "seasons": [],
    },
)


def sample_catalog() -> list[CatalogEntry]:
    return [CatalogEntry.model_validate(raw) for raw in SAMPLE_CATALOG]


async def bootstrap(
    repository: CatalogRepository, selector: BackendSelector
) -> list[CatalogEntry]:
    """Return the initial catalog, seeding the offline store when it is empty."""

    entries = await repository.list_all()
    if entries or selector.is_live():
        return entries

    seeded = sample_catalog()
    await repository.replace_all(seeded)
    logger.info("Seeded offline store with %d sample titles", len(seeded))
    return seeded
