"""Cinema API endpoints."""

from fastapi import APIRouter, Depends

from cinevo.api.dependencies import get_catalog
from cinevo.schemas.movie import Cinema
from cinevo.services.catalog import MovieCatalog

router = APIRouter()


@router.get("/cinemas", response_model=list[Cinema])
async def get_cinemas(catalog: MovieCatalog = Depends(get_catalog)) -> list[Cinema]:
    """
    Get the cinemas showing at least one catalog movie.

    Returns:
        Distinct cinemas sorted by name
    """
    cinemas: dict[str, Cinema] = {}
    for movie in catalog.movies:
        for showtime in movie.showtimes:
            cinemas.setdefault(showtime.cinema.id, showtime.cinema)
    return sorted(cinemas.values(), key=lambda cinema: cinema.name.lower())
