from app.models import Movie, normalize_candidates
from app.views import (
    ALL_GENRES,
    ResultFilters,
    available_genres,
    project_results,
    sort_history,
    sort_movies,
    sort_watchlist,
)


def _ids(movies: list[Movie]) -> list[str]:
    return [movie.movie_id for movie in movies]


def test_available_genres_sorted_behind_sentinel(movie_factory):
    catalog = [
        movie_factory("a", genres=["Thriller", "Action"]),
        movie_factory("b", genres=["Comedy", "Action"]),
        movie_factory("c", genres=[]),
    ]

    assert available_genres(catalog) == [ALL_GENRES, "Action", "Comedy", "Thriller"]
    assert available_genres([]) == [ALL_GENRES]


def test_match_sort_is_stable(movie_factory):
    movies = [
        movie_factory("1", match_score=0.9),
        movie_factory("2", match_score=0.9),
        movie_factory("3", match_score=0.5),
    ]

    assert _ids(sort_movies(movies, "match")) == ["1", "2", "3"]


def test_rating_and_year_sorts_are_descending(movie_factory):
    movies = [
        movie_factory("old", vote_average=9.0, release_year=1972),
        movie_factory("new", vote_average=6.5, release_year=2024),
        movie_factory("mid", vote_average=7.5, release_year=1999),
    ]

    assert _ids(sort_movies(movies, "rating")) == ["old", "mid", "new"]
    assert _ids(sort_movies(movies, "year")) == ["new", "mid", "old"]


def test_excited_batch_filtered_by_thriller(candidate_factory):
    raw = []
    for index in range(18):
        genres = ["Action", "Thriller"] if index % 3 == 0 else ["Action", "Adventure"]
        raw.append(candidate_factory(f"x{index}", genres=genres))
    catalog = normalize_candidates(raw)

    results = project_results(catalog, [], ResultFilters(genre="Thriller"))

    assert len(results) == 6
    assert all("Thriller" in movie.genres for movie in results)


def test_hide_watched_applies_after_genre_filter(movie_factory):
    catalog = [
        movie_factory("a", genres=["Drama"], match_score=0.2),
        movie_factory("b", genres=["Drama"], match_score=0.8),
        movie_factory("c", genres=["Comedy"], match_score=0.9),
    ]
    history = [movie_factory("b").with_match_score(1.0)]

    results = project_results(
        catalog, history, ResultFilters(genre="Drama", hide_watched=True)
    )

    assert _ids(results) == ["a"]


def test_all_sentinel_skips_genre_filter(movie_factory):
    catalog = [
        movie_factory("a", genres=[], match_score=0.1),
        movie_factory("b", genres=["Drama"], match_score=0.7),
    ]

    assert _ids(project_results(catalog, [], ResultFilters())) == ["b", "a"]


def test_projection_does_not_mutate_catalog(movie_factory):
    catalog = [movie_factory("a", match_score=0.1), movie_factory("b", match_score=0.9)]

    project_results(catalog, [], ResultFilters(sort_by="match"))

    assert _ids(catalog) == ["a", "b"]


def test_library_sorts(movie_factory):
    watchlist = [
        movie_factory("w1", match_score=0.4, release_year=2001),
        movie_factory("w2", match_score=0.8, release_year=1995),
    ]
    history = [
        movie_factory("h1", vote_average=5.0).with_match_score(1.0),
        movie_factory("h2", vote_average=8.0).with_match_score(1.0),
    ]

    assert _ids(sort_watchlist(watchlist, "match")) == ["w2", "w1"]
    assert _ids(sort_watchlist(watchlist, "year")) == ["w1", "w2"]
    assert _ids(sort_history(history, "match")) == ["h1", "h2"]
    assert _ids(sort_history(history, "rating")) == ["h2", "h1"]
