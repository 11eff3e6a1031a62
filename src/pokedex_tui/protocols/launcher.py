"""Background loader launcher protocol.

The state machine asks for loads through this interface and never awaits
them; results come back as events on the channel.
"""

from typing import Protocol, runtime_checkable

from pokedex_tui.dto import PokemonDetail


@runtime_checkable
class LoaderLauncher(Protocol):
    """Protocol for starting fire-and-forget background loads.

    Example:
        ```python
        launcher: LoaderLauncher = BackgroundLoaders(client, channel.sender())
        launcher: LoaderLauncher = RecordingLauncher()  # in tests
        ```
    """

    def start_catalog(self) -> None:
        """Start the catalog listing load (plus type enrichment)."""
        ...

    def start_detail(self, pokemon_id: int) -> None:
        """Start the detail load (plus sprite) for one entity."""
        ...

    def start_type_table(self) -> None:
        """Start the load of all 18 type records."""
        ...

    def start_moves(self, detail: PokemonDetail) -> None:
        """Start the move table load for a detail record."""
        ...
