"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Listings site
    site_base_url: str = "https://englishcinemabarcelona.com"
    listing_path_suffix: str = "/in-english-in-barcelona"
    overview_path: str = "/7-day-overview"
    booking_goto_path: str = "/goto"
    site_timezone: str = "Europe/Madrid"

    # Relay prefix prepended to every HTML fetch (empty disables it)
    cors_relay_prefix: str = "https://corsproxy.io/?"

    # OMDb API
    omdb_api_key: str = ""
    omdb_base_url: str = "https://www.omdbapi.com/"

    # TMDb API
    tmdb_api_key: str = ""
    tmdb_language: str = "en-US"

    # Scraping settings
    scrape_timeout: int = 30
    scrape_max_retries: int = 3
    scrape_backoff_base: float = 1.0
    pipeline_batch_size: int = 3

    # Caches
    cache_backend: str = "file"  # "memory", "file" or "sql"
    cache_dir: str = ".cache"
    database_url: str = "sqlite+aiosqlite:///./cinevo.db"
    html_cache_ttl_hours: float = 8
    movies_cache_ttl_hours: float = 8

    # Background refresh
    refresh_interval_hours: float = 8

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"


# Global settings instance
settings = Settings()
