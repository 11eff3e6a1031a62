"""Event loop driver and dependency wiring.

Rendering and key decoding are supplied by the caller: a FrameRenderer
draws the App after every event, and the key reader pushes KeyPressed
events through its own EventSender.
"""

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pokedex_tui.app import App
from pokedex_tui.config import Settings, settings
from pokedex_tui.errors import ChannelClosed
from pokedex_tui.events import EventChannel
from pokedex_tui.logging_config import configure_logging
from pokedex_tui.repositories import JsonRosterRepository, create_store
from pokedex_tui.services import BackgroundLoaders, CachedFetchGateway, PokeApiClient

logger = logging.getLogger(__name__)


@runtime_checkable
class FrameRenderer(Protocol):
    """Pure view: draws one frame from the current App state."""

    def draw(self, app: App) -> None: ...


@dataclass
class Runtime:
    """Everything ``build_runtime`` wires together."""

    app: App
    channel: EventChannel
    loaders: BackgroundLoaders
    client: PokeApiClient

    async def aclose(self) -> None:
        await self.loaders.aclose()
        await self.client.close()


def build_runtime(config: Settings | None = None) -> Runtime:
    """Wire settings -> store -> gateway -> client -> loaders -> app.

    Must be called from inside a running event loop, since the loaders
    spawn tasks on it.
    """
    config = config or settings
    configure_logging(config)
    store = create_store(config)
    gateway = CachedFetchGateway(store=store, timeout=config.request_timeout)
    client = PokeApiClient(gateway=gateway, base_url=config.api_base_url)
    channel = EventChannel()
    loaders = BackgroundLoaders(
        client=client,
        sender=channel.sender(),
        batch_size=config.type_batch_size,
        move_limit=config.move_limit,
    )
    app = App(launcher=loaders, roster_store=JsonRosterRepository(path=config.teams_path))
    logger.info("Runtime ready (cache backend: %s)", config.cache_backend)
    return Runtime(app=app, channel=channel, loaders=loaders, client=client)


async def run(app: App, channel: EventChannel, renderer: FrameRenderer) -> None:
    """Draw, wait for the next event, apply it; until the app stops.

    The only suspension point is waiting on the channel. Returns when the
    user quits or when every producer has gone away.
    """
    app.start()
    while app.running:
        renderer.draw(app)
        try:
            event = await channel.recv()
        except ChannelClosed:
            logger.info("Event channel closed, stopping")
            return
        app.handle_event(event)
