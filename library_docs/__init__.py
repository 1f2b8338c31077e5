"""
Library Docs - Context7 search and documentation retrieval.

Public API for the two upstream calls behind the MCP tools: resolving a
library name to a Context7-compatible ID and fetching its documentation.
"""

from .client import Context7Client, create_ssl_context
from .formatters import (
    NO_RESULTS_MESSAGE,
    SEARCH_RESULTS_PREAMBLE,
    format_search_response,
    format_search_results,
)
from .models import (
    CONTEXT7_API_BASE_URL,
    DEFAULT_TOKENS,
    MINIMUM_TOKENS,
    ClientConfig,
    DocumentationRequest,
    MalformedResponseError,
    SearchMatch,
    SearchOutcome,
)

__version__ = "0.2.2"

__all__ = [
    'Context7Client',
    'create_ssl_context',
    'format_search_results',
    'format_search_response',
    'NO_RESULTS_MESSAGE',
    'SEARCH_RESULTS_PREAMBLE',
    'CONTEXT7_API_BASE_URL',
    'DEFAULT_TOKENS',
    'MINIMUM_TOKENS',
    'ClientConfig',
    'DocumentationRequest',
    'MalformedResponseError',
    'SearchMatch',
    'SearchOutcome',
    '__version__',
]
