import os
import sys
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

import redis
from dotenv import load_dotenv

load_dotenv()

APP_NAME = "pokedex-tui"


def default_cache_dir() -> Path:
    """Return the platform cache directory for this application."""
    if sys.platform == "win32":
        base = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA")
        if base:
            return Path(base) / APP_NAME / "cache"
        return Path.home() / "AppData" / "Local" / APP_NAME / "cache"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / APP_NAME
    base = os.getenv("XDG_CACHE_HOME")
    return (Path(base) if base else Path.home() / ".cache") / APP_NAME


def default_data_dir() -> Path:
    """Return the directory holding user-authored data (the team roster).

    The roster lives next to the API cache, matching where earlier
    releases kept ``teams.json``.
    """
    return default_cache_dir()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Remote API
    api_base_url: str = os.getenv("POKEAPI_BASE_URL", "https://pokeapi.co/api/v2")
    request_timeout: float = float(os.getenv("POKEDEX_REQUEST_TIMEOUT", "20.0"))

    # Cache
    cache_backend: str = os.getenv("POKEDEX_CACHE_BACKEND", "filesystem")
    cache_dir: Path = field(
        default_factory=lambda: Path(os.getenv("POKEDEX_CACHE_DIR") or default_cache_dir() / "api")
    )
    cache_namespace: str = os.getenv("POKEDEX_CACHE_NAMESPACE", "pokedex")

    # Redis (only used when cache_backend == "redis")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Loaders
    type_batch_size: int = int(os.getenv("POKEDEX_TYPE_BATCH_SIZE", "30"))
    move_limit: int = int(os.getenv("POKEDEX_MOVE_LIMIT", "50"))

    # User data
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("POKEDEX_DATA_DIR") or default_data_dir())
    )

    # Logging
    log_level: str = os.getenv("POKEDEX_LOG_LEVEL", "INFO")
    log_file: str | None = os.getenv("POKEDEX_LOG_FILE")

    @property
    def teams_path(self) -> Path:
        """Location of the persisted team roster."""
        return self.data_dir / "teams.json"

    @property
    def log_path(self) -> Path:
        """Location of the log file (the terminal belongs to the renderer)."""
        if self.log_file:
            return Path(self.log_file)
        return default_cache_dir() / "pokedex.log"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend not in ("filesystem", "memory", "redis"):
            raise ValueError(
                f"POKEDEX_CACHE_BACKEND must be one of [filesystem, memory, redis], "
                f"got {self.cache_backend!r}"
            )

        if self.type_batch_size < 1:
            raise ValueError("POKEDEX_TYPE_BATCH_SIZE must be at least 1")

        if self.move_limit < 0:
            raise ValueError("POKEDEX_MOVE_LIMIT must not be negative")

        if self.request_timeout <= 0:
            raise ValueError("POKEDEX_REQUEST_TIMEOUT must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create a Redis client instance."""
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        decode_responses=False,
    )
