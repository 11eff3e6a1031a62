"""Load status of an independently loadable resource group."""

from enum import Enum


class LoadStatus(Enum):
    """Lifecycle of one resource group (catalog, detail, type table, moves).

    ``IDLE``/``ERROR`` -> ``LOADING`` on request, ``LOADING`` -> ``LOADED``
    on success, ``LOADING`` -> ``ERROR`` on failure.
    """

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"

    @property
    def is_pending_or_done(self) -> bool:
        """True when a new request for the same key is already satisfied."""
        return self in (LoadStatus.LOADING, LoadStatus.LOADED)
