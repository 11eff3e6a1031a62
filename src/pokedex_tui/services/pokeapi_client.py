"""Typed accessors for the PokéAPI resources the application reads.

Each method builds one endpoint URL, fetches it through the cached
gateway and validates the payload into a DTO.
"""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from pokedex_tui.config import settings
from pokedex_tui.dto import MoveDetail, PokemonDetail, PokemonListResponse, TypeInfo
from pokedex_tui.errors import DecodeError
from pokedex_tui.services.gateway import CachedFetchGateway

ModelT = TypeVar("ModelT", bound=BaseModel)

LIST_LIMIT = 10000


def extract_id_from_url(url: str) -> int | None:
    """Return the trailing numeric path segment of a resource URL.

    ``https://pokeapi.co/api/v2/pokemon/25/`` -> ``25``. Returns None when
    the last segment is not an integer.
    """
    segment = url.rstrip("/").rsplit("/", 1)[-1]
    if not segment.isdigit():
        return None
    return int(segment)


class PokeApiClient:
    """URL-building facade over CachedFetchGateway.

    Network failures surface as FetchError (from the gateway); payloads
    that do not match the expected shape surface as DecodeError, whether
    they came from the network or the cache.
    """

    def __init__(self, gateway: CachedFetchGateway, base_url: str | None = None) -> None:
        """Initialize the client.

        Args:
            gateway: Cached fetch gateway (required).
            base_url: API root. Defaults to settings.api_base_url.
        """
        self._gateway = gateway
        self._base_url = (base_url or settings.api_base_url).rstrip("/")

    @classmethod
    def create(cls, gateway: CachedFetchGateway, base_url: str | None = None) -> "PokeApiClient":
        """Factory method to create PokeApiClient with defaults."""
        return cls(gateway=gateway, base_url=base_url)

    def list_url(self) -> str:
        return f"{self._base_url}/pokemon?limit={LIST_LIMIT}"

    def pokemon_url(self, id_or_name: int | str) -> str:
        return f"{self._base_url}/pokemon/{id_or_name}"

    def type_url(self, name: str) -> str:
        return f"{self._base_url}/type/{name}"

    def move_url(self, name: str) -> str:
        return f"{self._base_url}/move/{name}"

    async def _get_model(self, url: str, model: type[ModelT]) -> ModelT:
        body = await self._gateway.fetch_text(url)
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise DecodeError(url, f"{e.error_count()} validation error(s)") from e

    async def list_pokemon(self) -> PokemonListResponse:
        """Fetch the full catalog listing.

        Raises:
            FetchError: On network failure
            DecodeError: On a malformed payload
        """
        return await self._get_model(self.list_url(), PokemonListResponse)

    async def get_pokemon(self, id_or_name: int | str) -> PokemonDetail:
        """Fetch one Pokémon's detail record."""
        return await self._get_model(self.pokemon_url(id_or_name), PokemonDetail)

    async def get_type(self, name: str) -> TypeInfo:
        """Fetch one type's damage-relation record."""
        return await self._get_model(self.type_url(name), TypeInfo)

    async def get_move(self, name: str) -> MoveDetail:
        """Fetch one move's detail record."""
        return await self._get_model(self.move_url(name), MoveDetail)

    async def get_sprite(self, url: str) -> bytes:
        """Fetch a sprite image as raw bytes (no decoding)."""
        return await self._gateway.fetch_binary(url)

    async def close(self) -> None:
        await self._gateway.close()

    @property
    def gateway(self) -> CachedFetchGateway:
        return self._gateway
