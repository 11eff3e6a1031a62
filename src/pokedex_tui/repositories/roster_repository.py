"""JSON file implementation of RosterStore."""

import logging
from pathlib import Path

from pydantic import ValidationError

from pokedex_tui.config import settings
from pokedex_tui.dto import RosterDocument
from pokedex_tui.entities import Roster

logger = logging.getLogger(__name__)


class JsonRosterRepository:
    """Stores the team roster as a pretty-printed JSON document.

    Satisfies the RosterStore protocol. A missing or corrupt file yields
    the default roster; write failures are logged, not raised.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else settings.teams_path

    @classmethod
    def create(cls, path: Path | None = None) -> "JsonRosterRepository":
        """Factory method to create JsonRosterRepository with defaults."""
        return cls(path=path)

    def load(self) -> Roster:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Roster.default()
        except OSError as e:
            logger.warning("Could not read roster %s: %s", self._path, e)
            return Roster.default()

        try:
            roster = RosterDocument.model_validate_json(raw).to_entity()
        except ValidationError as e:
            logger.warning("Ignoring malformed roster %s: %s", self._path, e)
            return Roster.default()

        # An empty list would leave the team builder with nothing to select
        return roster if roster.teams else Roster.default()

    def save(self, roster: Roster) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                RosterDocument.from_entity(roster).model_dump_json(indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error("Could not save roster to %s: %s", self._path, e)

    @property
    def path(self) -> Path:
        return self._path
