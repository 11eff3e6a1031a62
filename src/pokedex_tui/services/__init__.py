"""Service layer for data acquisition.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    BackgroundLoaders -> PokeApiClient -> CachedFetchGateway -> Store
    (tasks/events)    -> (typed URLs) -> (cache-or-fetch)  -> (persistence)
"""

from .gateway import CachedFetchGateway, cache_key
from .loaders import TYPE_NAMES, BackgroundLoaders, sort_moves
from .pokeapi_client import PokeApiClient, extract_id_from_url

__all__ = [
    "CachedFetchGateway",
    "cache_key",
    "PokeApiClient",
    "extract_id_from_url",
    "BackgroundLoaders",
    "TYPE_NAMES",
    "sort_moves",
]
