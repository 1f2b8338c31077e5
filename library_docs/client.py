"""
Context7 API client with httpx.

Handles communication with the Context7 API, including:
- Library search
- Documentation retrieval

Requests go through a synchronous httpx.Client that is shared for the
lifetime of the process. Each call runs in a worker thread via
asyncio.to_thread() so the event loop is never blocked.
"""

import asyncio
import logging
import ssl
from typing import Dict, Optional

import httpx
from pydantic import ValidationError

from .models import (
    DEFAULT_TIMEOUT,
    LIBRARY_NOT_FOUND_MESSAGE,
    NO_CONTENT_BODIES,
    RATE_LIMITED_MESSAGE,
    SOURCE_HEADER,
    UNAUTHORIZED_MESSAGE,
    ClientConfig,
    DocumentationRequest,
    MalformedResponseError,
    SearchOutcome,
    SearchResponse,
)

logger = logging.getLogger("c67-mcp.client")


def create_ssl_context(insecure: bool = False) -> ssl.SSLContext:
    """
    Build the TLS trust policy for outbound requests.

    Args:
        insecure: If True, accept any certificate for any hostname. Only
                  meant for trusted intercepting proxies.

    Returns:
        SSL context to hand to the HTTP transport
    """
    if insecure:
        logger.warning("TLS certificate verification is disabled")
    return httpx.create_ssl_context(verify=not insecure)


class Context7Client:
    """
    Client for the Context7 API.

    Issues exactly one request per call and never retries. Recognized
    upstream failures are turned into user-facing text rather than raised.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize Context7 client.

        Args:
            config: Connection settings. Defaults to the public API, no key.
            transport: Optional httpx transport override, mainly for tests.
                       When omitted, httpx builds its default transport,
                       plus any proxy from HTTPS_PROXY/HTTP_PROXY, with
                       the TLS policy from ``config.insecure``.
        """
        self._config = config or ClientConfig()
        self._headers: Dict[str, str] = {}

        if self._config.api_key:
            self._headers["Authorization"] = f"Bearer {self._config.api_key}"

        self._http = httpx.Client(
            verify=create_ssl_context(self._config.insecure),
            transport=transport,
            timeout=DEFAULT_TIMEOUT,
            follow_redirects=True,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    def close(self) -> None:
        """Release the underlying connection pool."""
        self._http.close()

    def __enter__(self) -> "Context7Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    async def search(self, query: str) -> SearchOutcome:
        """
        Search for libraries matching a query.

        Args:
            query: Library name to search for (e.g., "react", "nix")

        Returns:
            SearchOutcome with matches, or an error message when the API
            rejected the request or could not be reached

        Raises:
            MalformedResponseError: If a successful response is not valid JSON
                                    in the expected shape
        """
        return await asyncio.to_thread(self._search_sync, query)

    async def fetch_documentation(self, request: DocumentationRequest) -> Optional[str]:
        """
        Fetch documentation text for a library.

        Args:
            request: Library ID, token budget and optional topic

        Returns:
            Documentation text, an explanatory message for failed requests,
            or None when the library has no content
        """
        return await asyncio.to_thread(self._fetch_sync, request)

    def _search_sync(self, query: str) -> SearchOutcome:
        url = f"{self._config.base_url}/v1/search"
        logger.debug("Searching libraries: query=%r", query)

        try:
            response = self._http.get(url, params={"query": query}, headers=self._headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429:
                logger.warning("Search rate limited (HTTP 429): query=%r", query)
                return SearchOutcome.failure(RATE_LIMITED_MESSAGE)
            if status == 401:
                logger.warning("Search unauthorized (HTTP 401): check the API key")
                return SearchOutcome.failure(UNAUTHORIZED_MESSAGE)
            logger.error("Search failed: %s", e)
            return SearchOutcome.failure(f"Failed to search libraries: {e}")
        except httpx.HTTPError as e:
            logger.error("Search failed: %s", e)
            return SearchOutcome.failure(f"Failed to search libraries: {e}")

        try:
            data = SearchResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise MalformedResponseError(e) from e

        logger.debug("Search returned %d libraries", len(data.results))
        return SearchOutcome(matches=list(data.results), error=data.error)

    def _fetch_sync(self, request: DocumentationRequest) -> Optional[str]:
        url = f"{self._config.base_url}/v1/{request.normalized_library_id}"

        params = {
            "tokens": str(request.resolved_tokens),
            "type": "txt",
        }
        if request.topic is not None:
            params["topic"] = request.topic

        header_name, header_value = SOURCE_HEADER
        headers = {**self._headers, header_name: header_value}

        logger.debug("Fetching documentation: url=%s params=%s", url, params)

        try:
            response = self._http.get(url, params=params, headers=headers)
            response.raise_for_status()
            text = response.text
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429:
                logger.warning("Fetch rate limited (HTTP 429): %s", request.library_id)
                return RATE_LIMITED_MESSAGE
            if status == 404:
                logger.warning("Library not found (HTTP 404): %s", request.library_id)
                return LIBRARY_NOT_FOUND_MESSAGE
            if status == 401:
                logger.warning("Fetch unauthorized (HTTP 401): check the API key")
                return UNAUTHORIZED_MESSAGE
            logger.error("Fetch failed: %s", e)
            return f"Failed to fetch documentation: {e}"
        except httpx.HTTPError as e:
            logger.error("Fetch failed: %s", e)
            return f"Failed to fetch documentation: {e}"

        if text in NO_CONTENT_BODIES:
            logger.info("No content available for %s", request.library_id)
            return None
        return text
