"""
Types and constants for the library-docs module.

Wire models are pydantic so that upstream JSON is validated on ingestion.
Request/config types are plain dataclasses: they are built from arguments
that were already validated at the MCP boundary (server.py).
"""

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Constants
# ============================================================================

CONTEXT7_API_BASE_URL = "https://context7.com/api"

DEFAULT_TOKENS = 5000
MINIMUM_TOKENS = 1000

DEFAULT_TIMEOUT = 30.0  # seconds

SOURCE_HEADER = ("X-Context7-Source", "mcp-server")

# Fetch bodies that mean "nothing here" rather than documentation
NO_CONTENT_BODIES = ("", "No content available", "No context data available")

RATE_LIMITED_MESSAGE = "Rate limited due to too many requests. Please try again later."
UNAUTHORIZED_MESSAGE = "Unauthorized. Please check your API key."
LIBRARY_NOT_FOUND_MESSAGE = (
    "The library you are trying to access does not exist. "
    "Please try with a different library ID."
)


# ============================================================================
# Wire Models
# ============================================================================

class SearchMatch(BaseModel):
    """
    A single library from Context7 search results.

    Attributes:
        id: Library ID in format "/org/project" or "/org/project/version"
        title: Display name of the library
        description: Short description
        total_snippets: Number of code snippets, -1 when not applicable
        trust_score: Source reputation, negative when not applicable
        versions: Available version tags
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    description: str
    total_snippets: Optional[int] = Field(default=None, alias="totalSnippets")
    # Upstream sends either an int or a float; always held as float
    trust_score: Optional[float] = Field(default=None, alias="trustScore")
    versions: Optional[List[str]] = None


class SearchResponse(BaseModel):
    """Body of a successful ``GET /v1/search``."""
    model_config = ConfigDict(frozen=True)

    results: List[SearchMatch]
    error: Optional[str] = None


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class ClientConfig:
    """
    Connection settings for the Context7 API.

    Built once at startup and shared read-only by every tool call.

    Attributes:
        api_key: Optional bearer token (higher rate limits, private libraries)
        base_url: API root, without the ``/v1`` suffix
        insecure: Skip TLS certificate and hostname verification
    """
    api_key: Optional[str] = None
    base_url: str = CONTEXT7_API_BASE_URL
    insecure: bool = False


@dataclass
class SearchOutcome:
    """
    Result of a library search.

    ``error`` is only ever set together with an empty ``matches`` list.
    """
    matches: List[SearchMatch] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def failure(cls, message: str) -> "SearchOutcome":
        return cls(matches=[], error=message)


@dataclass(frozen=True)
class DocumentationRequest:
    """
    Parameters for a documentation fetch.

    Attributes:
        library_id: Library ID, with or without the leading slash
        tokens: Requested token budget (defaults to 5000, minimum 1000)
        topic: Optional focus area, e.g. "hooks" or "routing"
    """
    library_id: str
    tokens: Optional[int] = None
    topic: Optional[str] = None

    @property
    def normalized_library_id(self) -> str:
        """Library ID with exactly one leading slash removed."""
        if self.library_id.startswith("/"):
            return self.library_id[1:]
        return self.library_id

    @property
    def resolved_tokens(self) -> int:
        """Token budget after applying the default and the lower bound."""
        tokens = DEFAULT_TOKENS if self.tokens is None else self.tokens
        return max(tokens, MINIMUM_TOKENS)


# ============================================================================
# Custom Exceptions
# ============================================================================

class MalformedResponseError(Exception):
    """
    Raised when a successful search response body cannot be parsed.

    Attributes:
        cause: The underlying decode or validation error
    """
    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Invalid search response from Context7: {cause}")
