"""Presentation helpers for showtimes and durations."""

from collections import defaultdict
from datetime import date, timedelta

from cinevo.schemas.movie import Cinema, Showtime


def time_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes after midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_duration(minutes: int) -> str:
    """Format a running time as "H:MM", e.g. 135 → "2:15"."""
    return f"{minutes // 60}:{minutes % 60:02d}"


def format_date_label(day: date, today: date) -> str:
    """Return "Today", "Tomorrow" or a short label like "Wed, Dec 17"."""
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return f"{day:%a}, {day:%b} {day.day}"


def group_showtimes_by_cinema(showtimes: list[Showtime]) -> list[tuple[Cinema, list[Showtime]]]:
    """
    Group showtimes by cinema.

    Groups are ordered by cinema name and the times within each group
    by clock time.
    """
    by_cinema: dict[str, list[Showtime]] = defaultdict(list)
    for showtime in showtimes:
        by_cinema[showtime.cinema.id].append(showtime)

    groups = [
        (times[0].cinema, sorted(times, key=lambda s: s.time))
        for times in by_cinema.values()
    ]
    groups.sort(key=lambda group: group[0].name.lower())
    return groups
