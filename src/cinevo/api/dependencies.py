"""Shared FastAPI dependencies."""

from fastapi import Request

from cinevo.services.catalog import MovieCatalog


def get_catalog(request: Request) -> MovieCatalog:
    """Return the catalog the application lifespan attached to app state."""
    return request.app.state.catalog
