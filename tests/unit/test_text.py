"""Unit tests for text utilities."""

from cinevo.utils.text import collapse_whitespace, first_non_empty, title_case_slug


class TestCollapseWhitespace:
    def test_collapses_runs(self) -> None:
        assert collapse_whitespace("Yelmo \n\t  Icaria") == "Yelmo Icaria"

    def test_strips_ends(self) -> None:
        assert collapse_whitespace("  18:00  ") == "18:00"

    def test_empty(self) -> None:
        assert collapse_whitespace("") == ""


class TestTitleCaseSlug:
    def test_hyphenated_slug(self) -> None:
        assert title_case_slug("yelmo-icaria") == "Yelmo Icaria"

    def test_keeps_digits(self) -> None:
        assert title_case_slug("cinesa-diagonal-mar-3d") == "Cinesa Diagonal Mar 3d"

    def test_ignores_repeated_hyphens(self) -> None:
        assert title_case_slug("cines--verdi-") == "Cines Verdi"


class TestFirstNonEmpty:
    def test_first_non_empty_wins(self) -> None:
        strategies = (lambda s: "", lambda s: s.upper(), lambda s: "unused")
        assert first_non_empty(strategies, "abc") == "ABC"

    def test_all_empty(self) -> None:
        assert first_non_empty((lambda s: "", lambda s: ""), "abc") == ""

    def test_no_strategies(self) -> None:
        assert first_non_empty((), "abc") == ""

    def test_later_strategies_not_evaluated(self) -> None:
        calls: list[str] = []

        def first(subject: str) -> str:
            calls.append("first")
            return subject

        def second(subject: str) -> str:
            calls.append("second")
            return "x"

        assert first_non_empty((first, second), "hit") == "hit"
        assert calls == ["first"]
