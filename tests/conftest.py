"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


from app.config import Settings  # noqa: E402
from app.models import Movie  # noqa: E402


def make_candidate(movie_id: str | None = "m1", **overrides: Any) -> dict[str, Any]:
    """Return a well-formed raw candidate record as the model would send it."""

    record: dict[str, Any] = {
        "movie_id": movie_id,
        "title": f"Movie {movie_id}",
        "overview": "A film.",
        "genres": ["Drama"],
        "vote_average": 7.0,
        "poster_path": "/poster.jpg",
        "release_year": 2020,
        "match_score": 0.5,
    }
    record.update(overrides)
    return record


def make_movie(movie_id: str = "m1", **overrides: Any) -> Movie:
    return Movie.from_candidate(make_candidate(movie_id, **overrides))


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, OPENROUTER_API_KEY="test-key")


@pytest.fixture
def movie_factory() -> Callable[..., Movie]:
    return make_movie


@pytest.fixture
def candidate_factory() -> Callable[..., dict[str, Any]]:
    return make_candidate
