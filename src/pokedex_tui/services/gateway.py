"""Cached fetch gateway.

Performs HTTP GETs and persists every successful response body into a
Store keyed by the request URL. A cached entry is served on every later
request for the same URL without touching the network.
"""

import logging

import httpx

from pokedex_tui.config import settings
from pokedex_tui.errors import FetchError
from pokedex_tui.protocols import Store

logger = logging.getLogger(__name__)


def cache_key(url: str) -> str:
    """Derive a filesystem-safe cache key from a URL.

    The scheme is dropped and path/query separators are folded to ``_``:
    ``https://pokeapi.co/api/v2/pokemon/1`` -> ``pokeapi.co_api_v2_pokemon_1``.

    Collision-freedom only holds for the fixed PokéAPI endpoint set; URLs
    that differ only in ``/`` versus ``_`` or ``?`` map to the same key.
    """
    return (
        url.replace("https://", "")
        .replace("http://", "")
        .replace("/", "_")
        .replace("?", "_")
    )


class CachedFetchGateway:
    """Cache-or-fetch HTTP gateway.

    Stateless beyond the store and the HTTP client, so it is safe for any
    number of concurrent callers. Two simultaneous first-time requests for
    one URL may both hit the network; both then write identical bytes.

    Example:
        ```python
        gateway = CachedFetchGateway.create(store=FileSystemStore.create())
        body = await gateway.fetch_text("https://pokeapi.co/api/v2/pokemon/25")
        ```
    """

    def __init__(
        self,
        store: Store,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            store: Response cache backend (required).
            client: HTTP client. If None, one is created lazily.
            timeout: Request timeout in seconds. Defaults to settings.
        """
        self._store = store
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout or settings.request_timeout

    @classmethod
    def create(
        cls,
        store: Store,
        timeout: float | None = None,
    ) -> "CachedFetchGateway":
        """Factory method to create CachedFetchGateway with defaults."""
        return cls(store=store, timeout=timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def fetch_text(self, url: str) -> bytes:
        """Fetch a JSON (text) payload, from cache when possible.

        Args:
            url: Absolute URL

        Returns:
            The raw response body

        Raises:
            FetchError: If the request fails or returns a non-2xx status
        """
        return await self._fetch(url)

    async def fetch_binary(self, url: str) -> bytes:
        """Fetch a binary payload (sprite), from cache when possible.

        Raises:
            FetchError: If the request fails or returns a non-2xx status
        """
        return await self._fetch(url)

    async def _fetch(self, url: str) -> bytes:
        key = cache_key(url)
        cached = self._store.get(key)
        if cached is not None:
            return cached

        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or type(e).__name__) from e
        except httpx.InvalidURL as e:
            # Not an HTTPError subclass; URLs from payloads can be malformed
            raise FetchError(url, str(e) or "invalid URL") from e

        body = response.content
        try:
            self._store.put(key, body)
        except Exception as e:
            # Caching is best-effort; the fetched body is still valid
            logger.debug("Could not cache %s: %s", url, e)
        return body

    async def close(self) -> None:
        """Close the HTTP client if this gateway created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def store(self) -> Store:
        """Get the underlying store (for testing)."""
        return self._store
