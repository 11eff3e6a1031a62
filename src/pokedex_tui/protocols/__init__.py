"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (filesystem -> Redis -> in-memory)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from pokedex_tui.protocols import Store

    store: Store = FileSystemStore(root)  # works
    store: Store = MemoryStore()          # also works
    ```
"""

from .launcher import LoaderLauncher
from .roster_store import RosterStore
from .store import Store

__all__ = [
    "LoaderLauncher",
    "RosterStore",
    "Store",
]
