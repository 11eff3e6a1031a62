"""Redis implementation of Store.

Lets several local processes share one response cache. Entries are
plain string keys under a namespace prefix and never expire.
"""

import redis

from pokedex_tui.config import get_redis_client, settings


class RedisStore:
    """Redis-backed response cache.

    This class satisfies the Store protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize the Redis store.

        Args:
            redis_client: Redis client instance. If None, creates default.
            namespace: Key prefix. Defaults to settings.cache_namespace.
        """
        self._client = redis_client or get_redis_client()
        self._namespace = namespace or settings.cache_namespace

    @classmethod
    def create(cls, namespace: str | None = None) -> "RedisStore":
        """Factory method to create RedisStore with defaults."""
        return cls(namespace=namespace)

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> bytes | None:
        """Read a payload; connection errors count as a miss."""
        try:
            value = self._client.get(self._key(key))
        except redis.RedisError:
            return None
        if value is None:
            return None
        return bytes(value)  # type: ignore[arg-type]

    def put(self, key: str, data: bytes) -> None:
        """Write a payload.

        Raises:
            redis.RedisError: If the write fails
        """
        self._client.set(self._key(key), data)

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
