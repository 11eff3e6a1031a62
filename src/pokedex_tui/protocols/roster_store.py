"""Team roster persistence protocol."""

from typing import Protocol, runtime_checkable

from pokedex_tui.entities import Roster


@runtime_checkable
class RosterStore(Protocol):
    """Protocol for loading and saving the user's team roster.

    The roster is loaded once at startup and rewritten in full after
    every mutation. ``save`` must not raise.
    """

    def load(self) -> Roster:
        """Load the roster, falling back to ``Roster.default()``."""
        ...

    def save(self, roster: Roster) -> None:
        """Persist the whole roster."""
        ...
