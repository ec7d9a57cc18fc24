"""Intermediate data models for the page parsers."""

from dataclasses import dataclass


@dataclass
class ShowtimeLink:
    """
    A booking link as found on a page, before a date and cinema are attached.

    Booking links look like ``/r/{cinema-slug}/{movie-slug}/{showtime-id}``;
    the link text holds the clock time and, on detail pages, the cinema name.
    """

    href: str  # Raw href as it appears in the page
    time: str  # Zero-padded "HH:MM"
    cinema_slug: str
    showtime_id: str | None = None  # Trailing numeric path segment
    text: str = ""  # Visible link text
    tooltip: str = ""  # title attribute, e.g. "11:45 at Yelmo Icaria"
