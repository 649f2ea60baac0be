"""Derived, deterministic views over the catalog and the user collections."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Callable, Literal

from pydantic import BaseModel

from .models import Movie

ALL_GENRES = "All"

SortOption = Literal["match", "rating", "year"]

SORT_KEYS: dict[str, Callable[[Movie], float]] = {
    "match": lambda movie: movie.match_score,
    "rating": lambda movie: movie.vote_average,
    "year": lambda movie: movie.release_year,
}


class ResultFilters(BaseModel):
    """Selection state applied to the current catalog."""

    genre: str = ALL_GENRES
    sort_by: SortOption = "match"
    hide_watched: bool = False


def available_genres(catalog: Iterable[Movie]) -> list[str]:
    """Return the sorted genre set of ``catalog`` behind the "All" sentinel."""

    genres = {genre for movie in catalog for genre in movie.genres}
    return [ALL_GENRES, *sorted(genres)]


def sort_movies(movies: Iterable[Movie], sort_by: SortOption) -> list[Movie]:
    """Sort descending by ``sort_by``; ties keep their relative order."""

    key = SORT_KEYS[sort_by]
    return sorted(movies, key=lambda movie: -key(movie))


def project_results(
    catalog: Sequence[Movie],
    history: Iterable[Movie],
    filters: ResultFilters,
) -> list[Movie]:
    """Apply the genre filter, then hide-watched, then sort."""

    results: Iterable[Movie] = catalog
    if filters.genre != ALL_GENRES:
        results = [movie for movie in results if filters.genre in movie.genres]
    if filters.hide_watched:
        watched = {movie.movie_id for movie in history}
        results = [movie for movie in results if movie.movie_id not in watched]
    return sort_movies(results, filters.sort_by)


def sort_watchlist(watchlist: Iterable[Movie], sort_by: SortOption) -> list[Movie]:
    return sort_movies(watchlist, sort_by)


def sort_history(history: Iterable[Movie], sort_by: SortOption) -> list[Movie]:
    """Sort the history; every entry scores 1.0, so "match" keeps history order."""

    if sort_by == "match":
        return list(history)
    return sort_movies(history, sort_by)
