"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cinevo.api.routes import cinemas, health, movies
from cinevo.cache import build_caches
from cinevo.config import settings
from cinevo.database import init_db
from cinevo.services.catalog import MovieCatalog
from cinevo.services.pipeline import MoviePipeline
from cinevo.tasks.refresh_job import run_refresh

logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: prepare the caches and the catalog they feed
    if settings.cache_backend == "sql":
        await init_db()

    caches = build_caches()
    catalog = MovieCatalog(lambda: MoviePipeline(caches))
    app.state.catalog = catalog

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        run_refresh,
        trigger=IntervalTrigger(hours=settings.refresh_interval_hours),
        args=[catalog],
        id="catalog_refresh",
        name="Periodic catalog refresh",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started, catalog refresh every {settings.refresh_interval_hours}h")

    # Fire a one-off startup load in the background
    catalog.start()
    logger.info("Startup catalog load triggered in background")

    yield

    # Shutdown: stop the scheduler and any load still running
    scheduler.shutdown(wait=False)
    await catalog.close()
    logger.info("Scheduler shut down")


# Create FastAPI app
app = FastAPI(
    title="Cinevo API",
    description="English-language movie showtimes in Barcelona, with ratings and trailers",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:5174",
    ],  # Frontend development server
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(movies.router, prefix="/api", tags=["movies"])
app.include_router(cinemas.router, prefix="/api", tags=["cinemas"])
