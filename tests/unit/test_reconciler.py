"""Unit tests for merging detail-page and overview showtimes."""

from datetime import date

from conftest import make_showtime

from cinevo.services.reconciler import merge_showtimes

DAY = date(2025, 12, 17)


class TestMergeShowtimes:
    def test_union_without_duplicates(self) -> None:
        detail = [make_showtime(time="18:00"), make_showtime(time="21:15", showtime_id="102")]
        overview = [make_showtime(time="18:00"), make_showtime(time="16:00", showtime_id="100")]
        merged = merge_showtimes(detail, overview)
        assert [s.time for s in merged] == ["16:00", "18:00", "21:15"]

    def test_overview_wins_on_collision(self) -> None:
        detail = [make_showtime(time="18:00", booking_url="https://example.com/detail")]
        overview = [make_showtime(time="18:00", booking_url="https://example.com/overview")]
        merged = merge_showtimes(detail, overview)
        assert len(merged) == 1
        assert merged[0].booking_url == "https://example.com/overview"

    def test_sorted_by_date_then_time(self) -> None:
        detail = [
            make_showtime(day=date(2025, 12, 18), time="09:30"),
            make_showtime(day=DAY, time="21:15"),
        ]
        overview = [make_showtime(day=DAY, time="18:00", cinema_slug="cines-verdi", cinema_name="Cines Verdi")]
        merged = merge_showtimes(detail, overview)
        assert [(s.date, s.time) for s in merged] == [
            (DAY, "18:00"),
            (DAY, "21:15"),
            (date(2025, 12, 18), "09:30"),
        ]

    def test_same_time_at_different_cinemas_kept(self) -> None:
        detail = [make_showtime(time="18:00")]
        overview = [make_showtime(time="18:00", cinema_slug="cines-verdi", cinema_name="Cines Verdi")]
        assert len(merge_showtimes(detail, overview)) == 2

    def test_detail_cinema_repointed_at_overview_cinema(self) -> None:
        detail = [make_showtime(time="21:15", cinema_name="Yelmo Icaria VOSE")]
        overview = [make_showtime(time="18:00", cinema_name="Yelmo Icaria")]
        merged = merge_showtimes(detail, overview)
        assert {s.cinema.name for s in merged} == {"Yelmo Icaria"}

    def test_empty_overview_returns_detail(self) -> None:
        detail = [make_showtime(time="21:15"), make_showtime(time="18:00", showtime_id="100")]
        merged = merge_showtimes(detail, [])
        assert [s.time for s in merged] == ["18:00", "21:15"]

    def test_both_empty(self) -> None:
        assert merge_showtimes([], []) == []

    def test_every_key_unique(self) -> None:
        detail = [make_showtime(time=t) for t in ("18:00", "20:00", "22:00")]
        overview = [make_showtime(time=t) for t in ("18:00", "20:00")]
        merged = merge_showtimes(detail, overview)
        keys = [s.key for s in merged]
        assert len(keys) == len(set(keys)) == 3

    def test_detail_and_overview_scenario(self) -> None:
        cinema_a = {"cinema_slug": "cinema-a", "cinema_name": "Cinema A", "movie_slug": "dune-two"}
        cinema_b = {"cinema_slug": "cinema-b", "cinema_name": "Cinema B", "movie_slug": "dune-two"}
        detail = [
            make_showtime(day=date(2024, 1, 10), time="19:00", booking_url="https://example.com/detail/a", **cinema_a)
        ]
        overview = [
            make_showtime(day=date(2024, 1, 11), time="21:30", showtime_id="2", **cinema_b),
            make_showtime(day=date(2024, 1, 10), time="19:00", booking_url="https://example.com/overview/a", **cinema_a),
        ]
        merged = merge_showtimes(detail, overview)
        assert [(s.cinema.slug, s.date, s.time) for s in merged] == [
            ("cinema-a", date(2024, 1, 10), "19:00"),
            ("cinema-b", date(2024, 1, 11), "21:30"),
        ]
        assert merged[0].booking_url == "https://example.com/overview/a"
