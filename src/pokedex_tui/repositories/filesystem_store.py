"""Filesystem implementation of Store.

One file per cache key under a root directory. File contents are the raw
response body, unmodified. This is the default backend.
"""

import logging
import os
import tempfile
from pathlib import Path

from pokedex_tui.config import settings

logger = logging.getLogger(__name__)


class FileSystemStore:
    """Filesystem-backed response cache.

    This class satisfies the Store protocol through structural typing -
    no explicit inheritance needed.

    The root directory is created lazily on the first write. Writes go to
    a temporary sibling file that is then renamed over the target, so a
    concurrent reader never sees a half-written entry.
    """

    def __init__(self, root: Path | None = None) -> None:
        """Initialize the store.

        Args:
            root: Directory holding one file per key. Defaults to settings.cache_dir.
        """
        self._root = Path(root) if root is not None else settings.cache_dir

    @classmethod
    def create(cls, root: Path | None = None) -> "FileSystemStore":
        """Factory method to create FileSystemStore with defaults."""
        return cls(root=root)

    def _path(self, key: str) -> Path:
        return self._root / key

    def get(self, key: str) -> bytes | None:
        """Read the file for ``key``; missing or unreadable files are a miss."""
        try:
            return self._path(key).read_bytes()
        except OSError:
            return None

    def put(self, key: str, data: bytes) -> None:
        """Write ``data`` under ``key``, replacing the previous file.

        Raises:
            OSError: If the directory or file cannot be written
        """
        self._root.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, self._path(key))
        except OSError:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
        logger.debug("Cached %d bytes under %s", len(data), key)

    @property
    def root(self) -> Path:
        """Get the cache root directory."""
        return self._root
