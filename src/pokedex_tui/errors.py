"""Error taxonomy for the data-acquisition layer."""


class PokedexError(Exception):
    """Base class for errors raised by this package."""


class FetchError(PokedexError):
    """Network-layer failure: connect, timeout or non-success status."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"GET {url} failed: {reason}")
        self.url = url
        self.reason = reason


class DecodeError(PokedexError):
    """Payload did not match the expected shape (fresh or cached)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Could not decode {url}: {reason}")
        self.url = url
        self.reason = reason


class ChannelClosed(PokedexError):
    """Every producer of an event channel has been dropped."""

    def __init__(self) -> None:
        super().__init__("Event channel closed")
