"""Integration helpers for the Gemini text-generation API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..models import CatalogEntry

logger = logging.getLogger(__name__)

SYNOPSIS_PROMPT_TEMPLATE = (
    'Write a captivating, 2-sentence plot summary for a movie titled "{title}" '
    'with genre "{genre}". Style: Premium streaming service.'
)


class GeminiClient:
    """Client for Gemini's ``generateContent`` endpoint.

    Every failure is logged and reported as ``None``; callers treat that as
    "no suggestion available".
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    async def generate_text(self, prompt: str) -> str | None:
        api_key = self._settings.gemini_api_key
        if not api_key:
            logger.info("Gemini API key missing, skipping text generation")
            return None

        url = (
            f"{str(self._settings.gemini_api_url).rstrip('/')}"
            f"/models/{self._settings.gemini_model}:generateContent"
        )
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            response = await self._client.post(
                url,
                params={"key": api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Gemini request failed: %s", exc)
            return None
        if response.status_code >= 400:
            logger.warning(
                "Gemini request failed with status %s: %s",
                response.status_code,
                response.text,
            )
            return None
        try:
            data = response.json()
        except ValueError:
            logger.warning("Unexpected non-JSON Gemini response")
            return None
        return self._extract_text(data)

    async def suggest_synopsis(self, entry: CatalogEntry) -> str | None:
        """Suggest a two-sentence description for ``entry``."""

        title = (entry.title or "").strip()
        if not title:
            return None
        prompt = SYNOPSIS_PROMPT_TEMPLATE.format(title=title, genre=entry.genre or "")
        text = await self.generate_text(prompt)
        if text is None:
            return None
        return text.strip() or None

    @staticmethod
    def _extract_text(data: Any) -> str | None:
        if not isinstance(data, dict):
            return None
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return None
        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
            return None
        text = parts[0].get("text")
        if isinstance(text, str) and text:
            return text
        return None
