"""Logging setup.

The terminal is owned by the renderer, so log records go to a file
instead of stderr.
"""

import logging
from pathlib import Path

from pokedex_tui.config import Settings, settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(config: Settings | None = None, path: Path | None = None) -> logging.Logger:
    """Attach a file handler to the package logger.

    Calling this more than once replaces the previous handler rather than
    stacking duplicates.

    Args:
        config: Settings to read the level and default path from.
        path: Override for the log file location.

    Returns:
        The configured ``pokedex_tui`` logger
    """
    config = config or settings
    log_path = path or config.log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("pokedex_tui")
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_pokedex_handler", False):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._pokedex_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    return logger
