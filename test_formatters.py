"""
Unit tests for search result formatting.
"""

from library_docs import (
    NO_RESULTS_MESSAGE,
    SEARCH_RESULTS_PREAMBLE,
    SearchMatch,
    SearchOutcome,
    format_search_response,
    format_search_results,
)


def make_match(**overrides) -> SearchMatch:
    data = {
        "id": "/nixos/nix",
        "title": "Nix",
        "description": "The Nix package manager",
    }
    data.update(overrides)
    return SearchMatch(**data)


class TestFormatSearchResults:
    """Rendering of individual matches and match lists."""

    def test_empty_results(self):
        assert format_search_results([]) == "No documentation libraries found matching your query."
        assert NO_RESULTS_MESSAGE == "No documentation libraries found matching your query."

    def test_required_fields_only(self):
        result = format_search_results([make_match()])

        assert result == (
            "- Title: Nix\n"
            "- Context7-compatible library ID: /nixos/nix\n"
            "- Description: The Nix package manager"
        )

    def test_all_fields(self):
        match = make_match(total_snippets=1241, trust_score=9.0, versions=["2.18.0", "2.17.0"])

        result = format_search_results([match])

        assert result == (
            "- Title: Nix\n"
            "- Context7-compatible library ID: /nixos/nix\n"
            "- Description: The Nix package manager\n"
            "- Code Snippets: 1241\n"
            "- Trust Score: 9.0\n"
            "- Versions: 2.18.0, 2.17.0"
        )

    def test_snippet_sentinel_is_hidden(self):
        result = format_search_results([make_match(total_snippets=-1, trust_score=7.5)])

        assert "Code Snippets" not in result
        assert "- Trust Score: 7.5" in result

    def test_zero_snippets_are_shown(self):
        result = format_search_results([make_match(total_snippets=0)])

        assert "- Code Snippets: 0" in result

    def test_negative_trust_score_is_hidden(self):
        result = format_search_results([make_match(total_snippets=10, trust_score=-1.0)])

        assert "Trust Score" not in result
        assert "- Code Snippets: 10" in result

    def test_zero_trust_score_is_shown(self):
        result = format_search_results([make_match(trust_score=0.0)])

        assert "- Trust Score: 0.0" in result

    def test_trust_score_one_decimal(self):
        result = format_search_results([make_match(trust_score=8.46)])

        assert "- Trust Score: 8.5" in result

    def test_empty_versions_are_hidden(self):
        result = format_search_results([make_match(versions=[])])

        assert "Versions" not in result

    def test_multiple_results_keep_order(self):
        matches = [
            make_match(id="/b/second", title="Second"),
            make_match(id="/a/first", title="First"),
        ]

        result = format_search_results(matches)
        blocks = result.split("\n----------\n")

        assert len(blocks) == 2
        assert blocks[0].startswith("- Title: Second")
        assert blocks[1].startswith("- Title: First")


class TestFormatSearchResponse:
    """Preamble wrapping for the resolve-library-id tool."""

    def test_preamble_precedes_results(self):
        outcome = SearchOutcome(matches=[make_match()])

        result = format_search_response(outcome)

        assert result.startswith("Available Libraries (top matches):")
        assert result == SEARCH_RESULTS_PREAMBLE + format_search_results(outcome.matches)

    def test_preamble_with_no_results(self):
        result = format_search_response(SearchOutcome())

        assert result.endswith(NO_RESULTS_MESSAGE)
