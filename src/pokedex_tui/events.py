"""Events and the ordered channel that carries them to the state machine.

Every external input (key presses, loader results) becomes an immutable
event sent through one EventChannel. The state machine is the only
consumer and the only owner of presentation state, so no locks are
needed around that state.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from pokedex_tui.dto import MoveDetail, PokemonDetail, TypeInfo
from pokedex_tui.entities import EntitySummary
from pokedex_tui.errors import ChannelClosed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPressed:
    """A decoded key press.

    ``key`` is either a single printable character (``"q"``, ``"/"``) or a
    named key: ``up``, ``down``, ``left``, ``right``, ``enter``, ``esc``,
    ``tab``, ``backtab``, ``backspace``, ``delete``.
    """

    key: str
    ctrl: bool = False

    @property
    def char(self) -> str | None:
        """The printable character, or None for named keys and ctrl chords."""
        if self.ctrl:
            return None
        return self.key if len(self.key) == 1 else None


@dataclass(frozen=True)
class Tick:
    """Periodic redraw request; carries no state change."""


@dataclass(frozen=True)
class ListLoaded:
    """The catalog listing, every summary with empty types."""

    summaries: list[EntitySummary] = field(default_factory=list)


@dataclass(frozen=True)
class TypesUpdated:
    """One enrichment batch of ``(pokemon_id, type_names)`` pairs."""

    batch: list[tuple[int, list[str]]] = field(default_factory=list)


@dataclass(frozen=True)
class DetailLoaded:
    detail: PokemonDetail


@dataclass(frozen=True)
class SpriteLoaded:
    pokemon_id: int
    data: bytes


@dataclass(frozen=True)
class TypeTableLoaded:
    types: list[TypeInfo] = field(default_factory=list)


@dataclass(frozen=True)
class MovesLoaded:
    pokemon_id: int
    moves: list[MoveDetail] = field(default_factory=list)


@dataclass(frozen=True)
class ApiError:
    """A required fetch failed; shown as a dismissible banner."""

    message: str


AppEvent = (
    KeyPressed
    | Tick
    | ListLoaded
    | TypesUpdated
    | DetailLoaded
    | SpriteLoaded
    | TypeTableLoaded
    | MovesLoaded
    | ApiError
)

_CLOSED = object()


class EventSender:
    """Producer handle of an EventChannel.

    ``send`` never blocks. It may be called from the event loop's thread
    or from any other thread (e.g. a blocking key reader). Use ``clone``
    for additional producers; the channel reports closure once every
    sender has been closed.
    """

    def __init__(self, channel: "EventChannel") -> None:
        self._channel = channel
        self._closed = False

    def send(self, event: AppEvent) -> bool:
        """Enqueue an event.

        Returns:
            False if this sender was already closed, True otherwise
        """
        if self._closed:
            logger.debug("Dropping %s sent on a closed sender", type(event).__name__)
            return False
        self._channel._put(event)
        return True

    def clone(self) -> "EventSender":
        """Create another producer for the same channel."""
        return self._channel.sender()

    def close(self) -> None:
        """Drop this producer. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._channel._release()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "EventSender":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class EventChannel:
    """Unbounded multi-producer, single-consumer event queue.

    Events from one producer are received in send order. Events from
    different producers may interleave arbitrarily.

    Example:
        ```python
        channel = EventChannel()
        tx = channel.sender()
        tx.send(KeyPressed("q"))
        event = await channel.recv()
        ```
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._open_senders = 0
        self._ever_had_sender = False

    def sender(self) -> EventSender:
        """Create a new producer handle."""
        self._bind_loop()
        self._open_senders += 1
        self._ever_had_sender = True
        return EventSender(self)

    def _bind_loop(self) -> None:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                pass

    def _on_loop_thread(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def _put(self, item: object) -> None:
        if self._loop is None or self._on_loop_thread():
            self._queue.put_nowait(item)
        else:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)

    def _release(self) -> None:
        # The sender count is only mutated on the loop thread
        if self._loop is None or self._on_loop_thread():
            self._release_now()
        else:
            self._loop.call_soon_threadsafe(self._release_now)

    def _release_now(self) -> None:
        self._open_senders -= 1
        if self._open_senders <= 0:
            # Wake a receiver blocked on an empty queue
            self._put(_CLOSED)

    @property
    def is_closed(self) -> bool:
        """True once every sender has been closed."""
        return self._ever_had_sender and self._open_senders <= 0

    async def recv(self) -> AppEvent:
        """Wait for the next event.

        Returns:
            The next event in delivery order

        Raises:
            ChannelClosed: If every sender is closed and no events remain
        """
        self._bind_loop()
        while True:
            if self.is_closed and self._queue.empty():
                raise ChannelClosed()
            item = await self._queue.get()
            if item is _CLOSED:
                continue
            return item  # type: ignore[return-value]

    def try_recv(self) -> AppEvent | None:
        """Return the next queued event without waiting, or None."""
        while True:
            try:
                item = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return None
            if item is not _CLOSED:
                return item  # type: ignore[return-value]
