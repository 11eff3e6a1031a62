"""Team roster domain entities."""

from dataclasses import dataclass, field


@dataclass
class TeamMove:
    """A move assigned to a team member."""

    name: str
    move_type: str
    power: int | None = None


@dataclass
class TeamMember:
    """A Pokémon slotted into a team.

    Attributes:
        pokemon_id: National dex id
        pokemon_name: API name (lowercase slug)
        types: Type names in slot order
        moves: Up to MAX_MOVES assigned moves
    """

    MAX_MOVES = 4

    pokemon_id: int
    pokemon_name: str
    types: list[str] = field(default_factory=list)
    moves: list[TeamMove] = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return len(self.moves) >= self.MAX_MOVES


@dataclass
class Team:
    """A named team of up to MAX_MEMBERS members."""

    MAX_MEMBERS = 6

    name: str
    members: list[TeamMember] = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return len(self.members) >= self.MAX_MEMBERS


@dataclass
class Roster:
    """All teams owned by the user."""

    teams: list[Team] = field(default_factory=list)

    @classmethod
    def default(cls) -> "Roster":
        """A roster holding a single empty team."""
        return cls(teams=[Team(name="Team 1")])
