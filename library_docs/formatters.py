"""
Response formatting for library search results.

Converts search matches into the plain-text listing returned by the
resolve-library-id tool.
"""

from typing import List, Sequence

from .models import SearchMatch, SearchOutcome


NO_RESULTS_MESSAGE = "No documentation libraries found matching your query."

RESULT_SEPARATOR = "\n----------\n"

SEARCH_RESULTS_PREAMBLE = """Available Libraries (top matches):

Each result includes:
- Library ID: Context7-compatible identifier (format: /org/project)
- Name: Library or package name
- Description: Short summary
- Code Snippets: Number of available code examples
- Trust Score: Authority indicator
- Versions: List of versions if available. Use one of those versions if the user provides a version in their query. The format of the version is /org/project/version.

For best results, select libraries based on name match, trust score, snippet coverage, and relevance to your use case.

----------

"""


def format_search_results(matches: Sequence[SearchMatch]) -> str:
    """
    Render search matches as newline-separated blocks.

    Sentinel values (``total_snippets == -1``, negative trust scores) and
    empty version lists are left out.

    Args:
        matches: Libraries in the order returned by the API

    Returns:
        Formatted listing, or a fixed message when there are no matches
    """
    if not matches:
        return NO_RESULTS_MESSAGE

    return RESULT_SEPARATOR.join(_format_match(match) for match in matches)


def format_search_response(outcome: SearchOutcome) -> str:
    """Wrap formatted matches in the explanatory preamble."""
    return SEARCH_RESULTS_PREAMBLE + format_search_results(outcome.matches)


def _format_match(match: SearchMatch) -> str:
    lines: List[str] = [
        f"- Title: {match.title}",
        f"- Context7-compatible library ID: {match.id}",
        f"- Description: {match.description}",
    ]

    if match.total_snippets is not None and match.total_snippets != -1:
        lines.append(f"- Code Snippets: {match.total_snippets}")

    if match.trust_score is not None and match.trust_score >= 0.0:
        lines.append(f"- Trust Score: {match.trust_score:.1f}")

    if match.versions:
        lines.append(f"- Versions: {', '.join(match.versions)}")

    return "\n".join(lines)
