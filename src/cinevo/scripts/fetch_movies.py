"""Run the movie pipeline once and print the result."""

import argparse
import asyncio
import json
import logging
import sys

from cinevo.cache import build_caches
from cinevo.config import settings
from cinevo.database import init_db
from cinevo.schemas.movie import MovieDetail
from cinevo.scrapers import FetchError
from cinevo.services.pipeline import MoviePipeline
from cinevo.services.scoring import normalize_score

logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def fetch_movies(bypass_cache: bool = False) -> list[MovieDetail]:
    """Run the pipeline to completion, printing a line per emission."""
    if settings.cache_backend == "sql":
        await init_db()

    movies: list[MovieDetail] = []
    async for movies in MoviePipeline(build_caches()).load(bypass_cache=bypass_cache):
        print(f"... {len(movies)} movies", file=sys.stderr)
    return movies


def print_summary(movies: list[MovieDetail]) -> None:
    print(f"{'Title':<45} {'Year':>4} {'Score':>5} {'Shows':>5}")
    for movie in movies:
        score = normalize_score(movie.ratings)
        score_text = f"{score:.0f}" if score is not None else "-"
        year_text = str(movie.year) if movie.year else "-"
        print(f"{movie.title[:45]:<45} {year_text:>4} {score_text:>5} {len(movie.showtimes):>5}")
    print()
    print(f"{len(movies)} movies, {sum(len(m.showtimes) for m in movies)} showtimes")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Fetch English-language showtimes in Barcelona with ratings and trailers."
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Clear the HTML, rating and movie caches before fetching",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the movies as JSON instead of a summary table",
    )
    args = parser.parse_args()

    try:
        movies = asyncio.run(fetch_movies(bypass_cache=args.no_cache))
    except FetchError as e:
        logger.error(f"Could not load movies: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps([movie.model_dump(mode="json") for movie in movies], indent=2))
    else:
        print_summary(movies)


if __name__ == "__main__":
    main()
