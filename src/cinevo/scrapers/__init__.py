"""Fetching and parsing for the listings site."""

from cinevo.scrapers.base import BasePageParser, movie_url, overview_url
from cinevo.scrapers.detail import DetailParser, parse_detail
from cinevo.scrapers.fetcher import FetchError, HtmlFetcher
from cinevo.scrapers.listings import ListingsParser, parse_listings
from cinevo.scrapers.overview import OverviewParser, ShowtimesByMovie, parse_overview

__all__ = [
    "BasePageParser",
    "DetailParser",
    "FetchError",
    "HtmlFetcher",
    "ListingsParser",
    "OverviewParser",
    "ShowtimesByMovie",
    "movie_url",
    "overview_url",
    "parse_detail",
    "parse_listings",
    "parse_overview",
]
