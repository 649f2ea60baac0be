"""Watchlist and history membership transitions."""

from __future__ import annotations

from .models import Movie, UserData

WATCHED_MATCH_SCORE = 1.0


class Library:
    """Owns the watchlist/history collections of a ``UserData`` aggregate.

    Every transition keeps ``movie_id`` unique within each collection and keeps
    the most recent addition first. Operating on an unknown id is a no-op.
    """

    def __init__(self, data: UserData):
        self._data = data

    @property
    def data(self) -> UserData:
        return self._data

    def is_watchlisted(self, movie_id: str) -> bool:
        return any(movie.movie_id == movie_id for movie in self._data.watchlist)

    def is_watched(self, movie_id: str) -> bool:
        return any(movie.movie_id == movie_id for movie in self._data.history)

    def watchlist_ids(self) -> list[str]:
        return [movie.movie_id for movie in self._data.watchlist]

    def history_ids(self) -> list[str]:
        return [movie.movie_id for movie in self._data.history]

    def find(self, movie_id: str) -> Movie | None:
        """Return the stored copy of ``movie_id`` from either collection."""

        for movie in (*self._data.watchlist, *self._data.history):
            if movie.movie_id == movie_id:
                return movie
        return None

    def toggle_watchlist(self, movie: Movie) -> bool:
        """Add or remove ``movie`` from the watchlist; return new membership."""

        if self.is_watchlisted(movie.movie_id):
            self._data.watchlist = _without(self._data.watchlist, movie.movie_id)
            return False
        self._data.watchlist = [movie, *self._data.watchlist]
        return True

    def toggle_watched(self, movie: Movie) -> bool:
        """Mark ``movie`` as seen, or un-mark it when already in history.

        Marking removes the movie from the watchlist and stores a copy with a
        confirmed match score. Un-marking does not restore the watchlist entry.
        """

        if self.is_watched(movie.movie_id):
            self._data.history = _without(self._data.history, movie.movie_id)
            return False
        self._data.watchlist = _without(self._data.watchlist, movie.movie_id)
        self._data.history = [
            movie.with_match_score(WATCHED_MATCH_SCORE),
            *self._data.history,
        ]
        return True

    def clear_history(self) -> None:
        self._data.history = []

    def remove_from_watchlist(self, movie_id: str) -> bool:
        """Remove ``movie_id`` from the watchlist; return whether it was present."""

        remaining = _without(self._data.watchlist, movie_id)
        removed = len(remaining) != len(self._data.watchlist)
        self._data.watchlist = remaining
        return removed


def _without(movies: list[Movie], movie_id: str) -> list[Movie]:
    return [movie for movie in movies if movie.movie_id != movie_id]
