"""Repository layer for data access.

This layer abstracts local persistence (filesystem, Redis, memory)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations
- Unit testing with in-memory implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from pokedex_tui.config import Settings, get_redis_client, settings
from pokedex_tui.protocols import RosterStore, Store

from .filesystem_store import FileSystemStore
from .memory_store import MemoryStore
from .redis_store import RedisStore
from .roster_repository import JsonRosterRepository


def create_store(config: Settings | None = None) -> Store:
    """Build the Store selected by ``POKEDEX_CACHE_BACKEND``."""
    config = config or settings
    if config.cache_backend == "memory":
        return MemoryStore()
    if config.cache_backend == "redis":
        return RedisStore(redis_client=get_redis_client(config), namespace=config.cache_namespace)
    return FileSystemStore(root=config.cache_dir)


__all__ = [
    "Store",
    "RosterStore",
    "FileSystemStore",
    "MemoryStore",
    "RedisStore",
    "JsonRosterRepository",
    "create_store",
]
