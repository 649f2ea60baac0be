"""Watchlist and history transition tests."""

from __future__ import annotations

from app.library import Library
from app.models import UserData


def _ids(movies) -> list[str]:
    return [movie.movie_id for movie in movies]


def test_toggle_watchlist_twice_restores_membership(movie_factory) -> None:
    library = Library(UserData.default())
    existing = movie_factory("keep")
    library.toggle_watchlist(existing)
    before = _ids(library.data.watchlist)

    movie = movie_factory("m1")
    assert library.toggle_watchlist(movie) is True
    assert library.toggle_watchlist(movie) is False

    assert _ids(library.data.watchlist) == before


def test_toggle_watchlist_prepends_the_passed_copy(movie_factory) -> None:
    library = Library(UserData.default())
    library.toggle_watchlist(movie_factory("a"))
    library.toggle_watchlist(movie_factory("b", match_score=0.42))

    assert _ids(library.data.watchlist) == ["b", "a"]
    assert library.data.watchlist[0].match_score == 0.42


def test_toggle_watched_moves_movie_into_history(movie_factory) -> None:
    library = Library(UserData.default())
    movie = movie_factory("m1", match_score=0.3)
    library.toggle_watchlist(movie)

    assert library.toggle_watched(movie) is True

    assert not library.is_watchlisted("m1")
    assert library.is_watched("m1")
    assert library.data.history[0].match_score == 1.0


def test_toggle_watched_without_watchlist_entry(movie_factory) -> None:
    library = Library(UserData.default())

    library.toggle_watched(movie_factory("m1", match_score=0.1))

    assert _ids(library.data.history) == ["m1"]
    assert library.data.history[0].match_score == 1.0
    assert library.data.watchlist == []


def test_unmarking_watched_does_not_restore_watchlist(movie_factory) -> None:
    library = Library(UserData.default())
    movie = movie_factory("m1")
    library.toggle_watchlist(movie)
    library.toggle_watched(movie)

    assert library.toggle_watched(movie) is False

    assert library.data.history == []
    assert library.data.watchlist == []


def test_collections_never_hold_duplicates(movie_factory) -> None:
    library = Library(UserData.default())
    movies = [movie_factory(movie_id) for movie_id in ("a", "b", "c")]
    operations = [
        library.toggle_watchlist,
        library.toggle_watched,
        library.toggle_watchlist,
        library.toggle_watchlist,
        library.toggle_watched,
        library.toggle_watched,
    ]

    for step, operation in enumerate(operations * 3):
        operation(movies[step % len(movies)])
        watchlist = _ids(library.data.watchlist)
        history = _ids(library.data.history)
        assert len(watchlist) == len(set(watchlist))
        assert len(history) == len(set(history))


def test_clear_history_leaves_watchlist_untouched(movie_factory) -> None:
    library = Library(UserData.default())
    for index in range(5):
        library.toggle_watched(movie_factory(f"h{index}"))
    library.toggle_watchlist(movie_factory("queued"))

    library.clear_history()

    assert library.data.history == []
    assert _ids(library.data.watchlist) == ["queued"]


def test_remove_from_watchlist_unknown_id_is_noop(movie_factory) -> None:
    library = Library(UserData.default())
    library.toggle_watchlist(movie_factory("a"))

    assert library.remove_from_watchlist("missing") is False
    assert library.remove_from_watchlist("a") is True
    assert library.data.watchlist == []


def test_find_prefers_stored_copy(movie_factory) -> None:
    library = Library(UserData.default())
    library.toggle_watched(movie_factory("a", match_score=0.2))

    assert library.find("a").match_score == 1.0
    assert library.find("zzz") is None
