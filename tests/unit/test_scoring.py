"""Unit tests for normalized scores and catalog ordering."""

import pytest

from conftest import make_movie

from cinevo.schemas.movie import ImdbRating, Ratings, RottenTomatoesRating
from cinevo.services.scoring import normalize_score, sort_movies


def ratings(rt: int | None = None, mc: int | None = None, imdb: float | None = None) -> Ratings:
    return Ratings(
        rotten_tomatoes=RottenTomatoesRating(critics=rt) if rt is not None else None,
        metacritic=mc,
        imdb=ImdbRating(score=imdb, votes=1000) if imdb is not None else None,
    )


class TestNormalizeScore:
    def test_none_without_ratings(self) -> None:
        assert normalize_score(Ratings()) is None

    def test_mean_of_all_three(self) -> None:
        # (80 + 70 + 75) / 3
        assert normalize_score(ratings(rt=80, mc=70, imdb=7.5)) == pytest.approx(75.0)

    def test_imdb_scaled_by_ten(self) -> None:
        assert normalize_score(ratings(imdb=8.2)) == pytest.approx(82.0)

    def test_mean_of_available_only(self) -> None:
        assert normalize_score(ratings(rt=90, mc=60)) == pytest.approx(75.0)

    def test_zero_scores_count(self) -> None:
        assert normalize_score(ratings(rt=0)) == 0

    @pytest.mark.parametrize(
        "rt, mc, imdb",
        [(0, 0, 0.0), (100, 100, 10.0), (55, None, 3.3), (None, 12, None)],
    )
    def test_within_range(self, rt: int | None, mc: int | None, imdb: float | None) -> None:
        score = normalize_score(ratings(rt=rt, mc=mc, imdb=imdb))
        assert score is not None
        assert 0 <= score <= 100


class TestSortMovies:
    def test_newest_year_first(self) -> None:
        movies = [make_movie("old", year=1999), make_movie("new", year=2025), make_movie("mid", year=2010)]
        assert [m.slug for m in sort_movies(movies)] == ["new", "mid", "old"]

    def test_higher_score_first_within_year(self) -> None:
        movies = [
            make_movie("low", year=2025, ratings=ratings(rt=40)),
            make_movie("high", year=2025, ratings=ratings(rt=90)),
        ]
        assert [m.slug for m in sort_movies(movies)] == ["high", "low"]

    def test_unknown_year_and_score_sort_last(self) -> None:
        movies = [
            make_movie("unknown"),
            make_movie("unscored", year=2025),
            make_movie("scored", year=2025, ratings=ratings(imdb=6.0)),
        ]
        assert [m.slug for m in sort_movies(movies)] == ["scored", "unscored", "unknown"]

    def test_stable_for_ties(self) -> None:
        movies = [make_movie(f"m{i}", year=2025, ratings=ratings(mc=70)) for i in range(4)]
        assert [m.slug for m in sort_movies(movies)] == ["m0", "m1", "m2", "m3"]

    def test_does_not_mutate_input(self) -> None:
        movies = [make_movie("a", year=2000), make_movie("b", year=2020)]
        sort_movies(movies)
        assert [m.slug for m in movies] == ["a", "b"]


class TestScoreExamples:
    def test_single_rotten_tomatoes_score(self) -> None:
        assert normalize_score(ratings(rt=80)) == 80

    def test_metacritic_and_imdb(self) -> None:
        assert normalize_score(
            Ratings(metacritic=60, imdb=ImdbRating(score=8, votes=0))
        ) == pytest.approx(70)

    def test_sort_example(self) -> None:
        movies = [
            make_movie("a", year=2020, ratings=ratings(rt=50)),
            make_movie("b", year=2023, ratings=ratings(rt=10)),
            make_movie("c", year=2023, ratings=ratings(rt=90)),
        ]
        assert [m.slug for m in sort_movies(movies)] == ["c", "b", "a"]
