"""Background loaders.

Each loader is a detached asyncio task started by the state machine. It
is never awaited by its caller and reports back only through events on
the channel. Superseded loaders are not cancelled; the state machine
discards their late results by identity.

Error policy:
    - A failed *required* fetch (listing, detail, any type record)
      produces exactly one ApiError event.
    - A failed *optional* fetch (per-row types, per-move detail, sprite)
      is dropped; the UI shows less, not an error.
"""

import asyncio
import logging
from collections.abc import Coroutine, Sequence
from typing import Any

from pokedex_tui.config import settings
from pokedex_tui.dto import MoveDetail, PokemonDetail, TypeInfo
from pokedex_tui.entities import EntitySummary
from pokedex_tui.errors import PokedexError
from pokedex_tui.events import (
    ApiError,
    DetailLoaded,
    EventSender,
    ListLoaded,
    MovesLoaded,
    SpriteLoaded,
    TypeTableLoaded,
    TypesUpdated,
)
from pokedex_tui.services.pokeapi_client import PokeApiClient, extract_id_from_url

logger = logging.getLogger(__name__)

TYPE_NAMES: tuple[str, ...] = (
    "normal",
    "fire",
    "water",
    "electric",
    "grass",
    "ice",
    "fighting",
    "poison",
    "ground",
    "flying",
    "psychic",
    "bug",
    "rock",
    "ghost",
    "dragon",
    "dark",
    "steel",
    "fairy",
)


def sort_moves(moves: list[MoveDetail]) -> list[MoveDetail]:
    """Order moves by power descending (missing power counts as 0), then name."""
    return sorted(moves, key=lambda m: (-(m.power or 0), m.name))


def chunked(items: Sequence, size: int) -> list[Sequence]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class BackgroundLoaders:
    """Spawns and runs the four background loaders.

    Satisfies the LoaderLauncher protocol. The ``load_*`` coroutines do
    the work and can be awaited directly in tests; the ``start_*``
    methods wrap them in detached tasks.

    Example:
        ```python
        loaders = BackgroundLoaders(client, channel.sender())
        loaders.start_catalog()          # returns immediately
        event = await channel.recv()     # ListLoaded(...)
        ```
    """

    def __init__(
        self,
        client: PokeApiClient,
        sender: EventSender,
        batch_size: int | None = None,
        move_limit: int | None = None,
        type_names: Sequence[str] = TYPE_NAMES,
    ) -> None:
        """Initialize the loaders.

        Args:
            client: Typed API accessors (required).
            sender: Producer handle of the event channel (required).
            batch_size: Concurrent enrichment fetches per batch. Defaults to settings.
            move_limit: Max moves fetched per detail record. Defaults to settings.
            type_names: Type records fetched by the type table loader.
        """
        self._client = client
        self._tx = sender
        self._batch_size = batch_size or settings.type_batch_size
        self._move_limit = settings.move_limit if move_limit is None else move_limit
        self._type_names = tuple(type_names)
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Task management
    # ------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        # The loop only keeps weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Loader %s crashed: %r", task.get_name(), exc, exc_info=exc)

    async def wait_idle(self) -> None:
        """Wait until every spawned loader has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel outstanding loaders and close the sender (shutdown only)."""
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tx.close()

    @property
    def pending(self) -> int:
        """Number of loaders still running."""
        return len(self._tasks)

    # ------------------------------------------------------------------
    # LoaderLauncher
    # ------------------------------------------------------------------

    def start_catalog(self) -> None:
        self._spawn(self.load_catalog(), "catalog")

    def start_detail(self, pokemon_id: int) -> None:
        self._spawn(self.load_detail(pokemon_id), f"detail-{pokemon_id}")

    def start_type_table(self) -> None:
        self._spawn(self.load_type_table(), "type-table")

    def start_moves(self, detail: PokemonDetail) -> None:
        self._spawn(self.load_moves(detail), f"moves-{detail.id}")

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------

    async def load_catalog(self) -> None:
        """Load the listing, then enrich its rows with types in batches.

        Emits ListLoaded first so the list renders immediately, then one
        TypesUpdated per batch that produced at least one result.
        """
        try:
            listing = await self._client.list_pokemon()
        except PokedexError as e:
            self._tx.send(ApiError(f"Failed to load Pokémon list: {e}"))
            return

        summaries = []
        for entry in listing.results:
            pokemon_id = extract_id_from_url(entry.url)
            if pokemon_id is None:
                continue
            summaries.append(EntitySummary(id=pokemon_id, name=entry.name))

        # The state machine owns the rows it receives; keep our own ids
        ids = [s.id for s in summaries]
        self._tx.send(ListLoaded(summaries=summaries))
        logger.info("Catalog listed %d entries", len(ids))

        for batch_ids in chunked(ids, self._batch_size):
            results = await asyncio.gather(
                *(self._fetch_types(pokemon_id) for pokemon_id in batch_ids),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    logger.warning("Unexpected enrichment failure: %r", result)
            batch = [r for r in results if isinstance(r, tuple)]
            if batch:
                self._tx.send(TypesUpdated(batch=batch))

    async def _fetch_types(self, pokemon_id: int) -> tuple[int, list[str]] | None:
        try:
            detail = await self._client.get_pokemon(pokemon_id)
        except PokedexError as e:
            logger.debug("Type enrichment for %d failed: %s", pokemon_id, e)
            return None
        return pokemon_id, detail.type_names

    async def load_detail(self, pokemon_id: int) -> None:
        """Load one detail record and, best-effort, its sprite.

        On success emits SpriteLoaded (only if the sprite was fetched)
        followed by DetailLoaded. On failure emits a single ApiError.
        """
        try:
            detail = await self._client.get_pokemon(pokemon_id)
        except PokedexError as e:
            self._tx.send(ApiError(f"Failed to load detail: {e}"))
            return

        sprite_url = detail.sprites.front_default
        if sprite_url:
            try:
                data = await self._client.get_sprite(sprite_url)
            except PokedexError as e:
                logger.debug("Sprite for %d unavailable: %s", pokemon_id, e)
            else:
                self._tx.send(SpriteLoaded(pokemon_id=pokemon_id, data=data))

        self._tx.send(DetailLoaded(detail=detail))

    async def load_type_table(self) -> None:
        """Load every type record in order; all or nothing."""
        infos: list[TypeInfo] = []
        for name in self._type_names:
            try:
                infos.append(await self._client.get_type(name))
            except PokedexError as e:
                self._tx.send(ApiError(f"Failed to load type {name}: {e}"))
                return
        self._tx.send(TypeTableLoaded(types=infos))

    async def load_moves(self, detail: PokemonDetail) -> None:
        """Load up to ``move_limit`` moves of a detail record, sorted."""
        moves: list[MoveDetail] = []
        for name in detail.move_names[: self._move_limit]:
            try:
                moves.append(await self._client.get_move(name))
            except PokedexError as e:
                logger.debug("Move %s unavailable: %s", name, e)
        self._tx.send(MovesLoaded(pokemon_id=detail.id, moves=sort_moves(moves)))
