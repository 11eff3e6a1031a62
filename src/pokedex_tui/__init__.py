"""Pokedex TUI - concurrent data layer for a terminal Pokédex.

This package provides a layered architecture for browsing PokéAPI data
from a terminal without ever blocking the UI on the network:

Layers:
    - protocols: Interface contracts (Store, RosterStore, LoaderLauncher)
    - repositories: Local persistence (filesystem / Redis / memory cache, roster file)
    - services: Cached fetch gateway, typed API accessors, background loaders
    - events: Event types and the ordered channel into the state machine
    - app: The single-owner presentation state machine
    - dto: Pydantic models for remote payloads and the roster file
    - entities: Domain models (internal)

Usage:
    ```python
    from pokedex_tui.runner import build_runtime, run

    runtime = build_runtime()
    await run(runtime.app, runtime.channel, renderer)
    ```
"""

from pokedex_tui.app import App, Modal, Screen
from pokedex_tui.config import get_settings, settings
from pokedex_tui.entities import EntitySummary, LoadStatus, Roster, Team, TeamMember, TeamMove
from pokedex_tui.errors import ChannelClosed, DecodeError, FetchError, PokedexError
from pokedex_tui.events import EventChannel, EventSender
from pokedex_tui.protocols import LoaderLauncher, RosterStore, Store
from pokedex_tui.repositories import FileSystemStore, JsonRosterRepository, MemoryStore, RedisStore
from pokedex_tui.services import BackgroundLoaders, CachedFetchGateway, PokeApiClient

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    # Protocols (interfaces)
    "Store",
    "RosterStore",
    "LoaderLauncher",
    # Services
    "CachedFetchGateway",
    "PokeApiClient",
    "BackgroundLoaders",
    # Repositories
    "FileSystemStore",
    "MemoryStore",
    "RedisStore",
    "JsonRosterRepository",
    # Events
    "EventChannel",
    "EventSender",
    # State machine
    "App",
    "Screen",
    "Modal",
    # Entities
    "EntitySummary",
    "LoadStatus",
    "Roster",
    "Team",
    "TeamMember",
    "TeamMove",
    # Errors
    "PokedexError",
    "FetchError",
    "DecodeError",
    "ChannelClosed",
]
