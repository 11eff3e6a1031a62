"""In-memory implementation of Store."""


class MemoryStore:
    """Dict-backed response cache, lost when the process exits.

    Satisfies the Store protocol. Used by tests and by the ``memory``
    cache backend.
    """

    def __init__(self, entries: dict[str, bytes] | None = None) -> None:
        self._entries: dict[str, bytes] = dict(entries or {})

    def get(self, key: str) -> bytes | None:
        return self._entries.get(key)

    def put(self, key: str, data: bytes) -> None:
        self._entries[key] = bytes(data)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        return list(self._entries)
