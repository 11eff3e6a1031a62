"""Response store protocol.

Defines the write-once key-value capability the fetch gateway caches
into. The key is derived from the request URL; the value is the raw
response body.

Implementations can include:
- Filesystem (default, one file per key)
- In-memory dict (tests, throwaway sessions)
- Redis
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Store(Protocol):
    """Protocol for response cache backends.

    Entries are never expired or invalidated; once a key is written its
    content is authoritative for the rest of the process.

    Example:
        ```python
        from pokedex_tui.protocols import Store

        store: Store = FileSystemStore(Path("~/.cache/pokedex-tui/api"))
        store: Store = MemoryStore()
        ```
    """

    def get(self, key: str) -> bytes | None:
        """Read a stored payload.

        Args:
            key: The normalized cache key

        Returns:
            The stored bytes, or None when absent
        """
        ...

    def put(self, key: str, data: bytes) -> None:
        """Write a payload, replacing any previous content for the key.

        Args:
            key: The normalized cache key
            data: Raw response body

        Raises:
            OSError: (or backend equivalent) if the write fails
        """
        ...
