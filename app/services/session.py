"""High level orchestration of the catalog and the user's collections."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any, Protocol

from pydantic import BaseModel, Field

from ..config import Settings
from ..library import Library
from ..models import Movie, UserData, UserProfile, normalize_candidates
from ..moods import MOOD_KEYS
from ..storage import UserDataStore
from ..views import (
    ResultFilters,
    SortOption,
    available_genres,
    project_results,
    sort_history,
    sort_watchlist,
)

logger = logging.getLogger(__name__)


class RecommendationSource(Protocol):
    """Turns a mood or a free-text query into raw candidate records."""

    async def recommend_for_mood(
        self, mood: str, *, exclude_titles: Sequence[str] = ()
    ) -> list[dict[str, Any]]: ...

    async def search(self, query: str) -> list[dict[str, Any]]: ...


class ResultsView(BaseModel):
    """Filtered and sorted projection of the current catalog."""

    mood: str | None = None
    query: str | None = None
    filters: ResultFilters
    genres: list[str]
    movies: list[Movie]
    total: int
    watchlist_ids: list[str] = Field(default_factory=list)
    history_ids: list[str] = Field(default_factory=list)


class LibraryView(BaseModel):
    """Sorted projection of the watchlist and history."""

    sort_by: SortOption
    watchlist: list[Movie]
    history: list[Movie]


class MoodflixService:
    """Owns the user state and the ephemeral catalog.

    All mutations of ``UserData`` run one at a time under a single lock and are
    flushed to the store before the call returns. Fetching a catalog does not
    hold the lock, so the previous catalog stays readable while a request is in
    flight.
    """

    def __init__(
        self,
        settings: Settings,
        source: RecommendationSource,
        store: UserDataStore,
    ):
        self._settings = settings
        self._source = source
        self._store = store
        self._library = Library(UserData.default())
        self._catalog: list[Movie] = []
        self._mood: str | None = None
        self._query: str | None = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        """Load the persisted state, falling back to the default aggregate."""

        data = await self._store.load_or_default()
        self._library = Library(data)
        logger.info(
            "Loaded user state with %s watchlist and %s history entries",
            len(data.watchlist),
            len(data.history),
        )

    @property
    def data(self) -> UserData:
        return self._library.data

    @property
    def library(self) -> Library:
        return self._library

    @property
    def catalog(self) -> list[Movie]:
        return list(self._catalog)

    @property
    def mood(self) -> str | None:
        return self._mood

    @property
    def query(self) -> str | None:
        return self._query

    # Profiles -------------------------------------------------------------

    @asynccontextmanager
    async def _mutation(self) -> AsyncIterator[Library]:
        """Serialize a change to ``UserData`` and persist it.

        When the change or the save raises, the in-memory state is restored to
        what it was before, so memory never runs ahead of the store.
        """

        async with self._lock:
            snapshot = self.data.model_copy(deep=True)
            try:
                yield self._library
                await self._store.save(self.data)
            except Exception:
                self._library = Library(snapshot)
                raise

    async def login_as_guest(self) -> UserProfile | None:
        """Activate the first profile of the roster."""

        async with self._mutation() as library:
            profiles = library.data.profiles
            library.data.user = profiles[0] if profiles else None
        return self.data.user

    async def select_profile(self, profile_id: str) -> UserProfile:
        async with self._mutation() as library:
            profile = library.data.find_profile(profile_id)
            if profile is None:
                raise LookupError(f"Unknown profile: {profile_id}")
            library.data.user = profile
        logger.info("Switched to profile %s", profile.name)
        return profile

    async def logout(self) -> None:
        async with self._mutation() as library:
            library.data.user = None

    # Catalog --------------------------------------------------------------

    async def recommend_for_mood(self, mood: str) -> list[Movie]:
        """Replace the catalog with recommendations for ``mood``."""

        if mood not in MOOD_KEYS:
            raise ValueError(f"Unknown mood: {mood}")
        watched_titles = [movie.title for movie in self.data.history if movie.title]
        try:
            raw = await self._source.recommend_for_mood(
                mood, exclude_titles=watched_titles
            )
        except Exception:
            logger.exception("Recommendation source failed for mood %s", mood)
            raw = []
        self._replace_catalog(raw, mood=mood, query=None)
        return self.catalog

    async def search(self, query: str) -> list[Movie]:
        """Replace the catalog with results for ``query``; blank queries are ignored."""

        cleaned = query.strip()
        if not cleaned:
            return self.catalog
        try:
            raw = await self._source.search(cleaned)
        except Exception:
            logger.exception("Recommendation source failed for query %r", cleaned)
            raw = []
        self._replace_catalog(raw, mood=None, query=cleaned)
        return self.catalog

    def _replace_catalog(
        self,
        raw: Sequence[object],
        *,
        mood: str | None,
        query: str | None,
    ) -> None:
        self._catalog = normalize_candidates(
            raw,
            image_base_url=self._settings.image_base,
            poster_size=self._settings.poster_size,
        )
        self._mood = mood
        self._query = query
        logger.info(
            "Catalog replaced with %s movies (mood=%s, query=%r)",
            len(self._catalog),
            mood,
            query,
        )

    def resolve_movie(self, movie_id: str) -> Movie | None:
        """Find ``movie_id`` in the catalog, then in the user's collections."""

        for movie in self._catalog:
            if movie.movie_id == movie_id:
                return movie
        return self._library.find(movie_id)

    # Collections ----------------------------------------------------------

    async def toggle_watchlist(self, movie: Movie) -> bool:
        async with self._mutation() as library:
            added = library.toggle_watchlist(movie)
        return added

    async def toggle_watched(self, movie: Movie) -> bool:
        async with self._mutation() as library:
            watched = library.toggle_watched(movie)
        return watched

    async def clear_history(self) -> None:
        async with self._mutation() as library:
            library.clear_history()

    async def remove_from_watchlist(self, movie_id: str) -> bool:
        async with self._mutation() as library:
            removed = library.remove_from_watchlist(movie_id)
        return removed

    # Views ----------------------------------------------------------------

    def results(self, filters: ResultFilters | None = None) -> ResultsView:
        filters = filters or ResultFilters()
        catalog = self._catalog
        return ResultsView(
            mood=self._mood,
            query=self._query,
            filters=filters,
            genres=available_genres(catalog),
            movies=project_results(catalog, self.data.history, filters),
            total=len(catalog),
            watchlist_ids=self._library.watchlist_ids(),
            history_ids=self._library.history_ids(),
        )

    def library_view(self, sort_by: SortOption = "match") -> LibraryView:
        return LibraryView(
            sort_by=sort_by,
            watchlist=sort_watchlist(self.data.watchlist, sort_by),
            history=sort_history(self.data.history, sort_by),
        )
