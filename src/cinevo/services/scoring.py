"""Normalized scores and the catalog sort order."""

from cinevo.schemas.movie import MovieDetail, Ratings


def normalize_score(ratings: Ratings) -> float | None:
    """
    Combine the available ratings into one 0-100 score.

    Rotten Tomatoes and Metacritic are already on a 0-100 scale; IMDb's
    0-10 score is multiplied by ten. The result is the plain mean of
    whichever are present, or None when none are.
    """
    scores: list[float] = []

    if ratings.rotten_tomatoes is not None:
        scores.append(ratings.rotten_tomatoes.critics)
    if ratings.metacritic is not None:
        scores.append(ratings.metacritic)
    if ratings.imdb is not None:
        scores.append(ratings.imdb.score * 10)

    if not scores:
        return None
    return sum(scores) / len(scores)


def sort_movies(movies: list[MovieDetail]) -> list[MovieDetail]:
    """
    Sort by year (newest first), then by normalized score (highest first).

    Unknown years count as 0 and unknown scores as -1, so they sort last.
    The sort is stable.
    """

    def sort_key(movie: MovieDetail) -> tuple[int, float]:
        score = normalize_score(movie.ratings)
        return (-(movie.year or 0), -(score if score is not None else -1))

    return sorted(movies, key=sort_key)
