"""Integration helpers for the OpenRouter API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from ..config import Settings
from ..moods import get_mood
from ..utils import candidate_records, extract_json_payload

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are Moodflix, an AI film curator that recommends real, released movies. "
    "You always respond with a single JSON array that matches the documented schema "
    "and never include commentary outside JSON."
)

MOVIE_SCHEMA = """{
  "movie_id": "unique_string",
  "title": "string",
  "overview": "string",
  "genres": ["string"],
  "vote_average": 8.5,
  "poster_path": "/path.jpg",
  "release_year": 2023,
  "match_score": 0.95,
  "reasoning": "string"
}"""

MOOD_REQUEST_TEMPLATE = """
Recommend {count} movies for a person feeling {mood}.
Vibes: {keywords}.

Schema requirements:
- "poster_path" MUST be a valid TMDB relative path starting with / (e.g. /q6y0Go1tsGEsmtFryDOJo3dEmqu.jpg).
- "release_year" MUST be the actual 4-digit integer release year of the movie.
- "vote_average" MUST be the actual IMDB/TMDB rating as a float (0-10).
- "match_score" is a float (0-1) representing how well it fits the mood.
- Exclude already watched: {excluded}.

Each item follows this structure:
{schema}

Return ONLY a JSON array.
"""

SEARCH_REQUEST_TEMPLATE = """
Perform a semantic search for movies based on: "{query}".
Return {count} high-quality movie results as a JSON array.

Each item follows this structure:
{schema}

- "vote_average" must be a number 0-10.
- "poster_path" must be a valid TMDB path starting with /.
- "release_year" must be an integer year.
- "match_score" must be a number 0-1 describing how well it fits the search.

Do not return anything but the JSON array.
"""


class OpenRouterClient:
    """Recommendation source backed by OpenRouter chat completions.

    Every failure (missing key, HTTP error, transport error, unparseable reply)
    is logged and reported as an empty candidate list.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    async def recommend_for_mood(
        self,
        mood: str,
        *,
        exclude_titles: Sequence[str] = (),
    ) -> list[dict[str, Any]]:
        """Return raw candidate records for ``mood``."""

        prompt = self._build_mood_prompt(mood, exclude_titles=exclude_titles)
        return await self._fetch_candidates(prompt, temperature=0.9)

    async def search(self, query: str) -> list[dict[str, Any]]:
        """Return raw candidate records for a free-text ``query``."""

        prompt = self._build_search_prompt(query)
        return await self._fetch_candidates(prompt, temperature=0.7)

    def _build_mood_prompt(
        self, mood: str, *, exclude_titles: Sequence[str] = ()
    ) -> str:
        definition = get_mood(mood)
        excluded = [title.strip() for title in exclude_titles if title and title.strip()]
        return MOOD_REQUEST_TEMPLATE.format(
            count=self._settings.recommendation_count,
            mood=definition.key,
            keywords=", ".join(definition.keywords),
            excluded=", ".join(excluded) if excluded else "none",
            schema=MOVIE_SCHEMA,
        )

    def _build_search_prompt(self, query: str) -> str:
        return SEARCH_REQUEST_TEMPLATE.format(
            query=query.strip(),
            count=self._settings.recommendation_count,
            schema=MOVIE_SCHEMA,
        )

    def _estimate_token_budget(self) -> int:
        estimated = 800 + self._settings.recommendation_count * 180
        return max(2_000, min(12_000, estimated))

    async def _fetch_candidates(
        self, prompt: str, *, temperature: float
    ) -> list[dict[str, Any]]:
        try:
            content = await self._complete(prompt, temperature=temperature)
            return candidate_records(extract_json_payload(content))
        except httpx.HTTPError as exc:
            logger.warning("Recommendation request failed: %s", exc)
        except (RuntimeError, ValueError) as exc:
            logger.warning("Recommendation response unusable: %s", exc)
        return []

    async def _complete(self, prompt: str, *, temperature: float) -> str:
        api_key = self._settings.openrouter_api_key
        if not api_key:
            raise RuntimeError("OpenRouter API key is required to fetch recommendations")

        payload = {
            "model": self._settings.openrouter_model,
            "temperature": temperature,
            "max_output_tokens": self._estimate_token_budget(),
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "X-Title": self._settings.app_name,
        }

        response = await self._client.post("/chat/completions", json=payload, headers=headers)
        if response.status_code >= 400:
            raise RuntimeError(
                f"OpenRouter returned {response.status_code}: {response.text}"
            )

        data = response.json()
        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices:
            raise RuntimeError("Model returned no choices")
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            raise RuntimeError("Model response missing message")
        content = message.get("content")
        if not isinstance(content, str):
            raise RuntimeError("Model response missing content")
        return content
