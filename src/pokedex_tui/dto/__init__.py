"""Data Transfer Objects for external data shapes.

These Pydantic models define the remote API payloads and the on-disk
roster document. They are used for validation and serialization only.

Internal state should use entities from the entities package.
"""

from .responses import (
    AbilitySlot,
    DamageRelations,
    MoveDetail,
    MoveEntry,
    NamedResource,
    PokemonDetail,
    PokemonEntry,
    PokemonListResponse,
    PokemonTypeSlot,
    Sprites,
    StatEntry,
    TypeInfo,
)
from .roster import RosterDocument, TeamMemberRecord, TeamMoveRecord, TeamRecord

__all__ = [
    "NamedResource",
    "PokemonEntry",
    "PokemonListResponse",
    "PokemonTypeSlot",
    "StatEntry",
    "AbilitySlot",
    "MoveEntry",
    "Sprites",
    "PokemonDetail",
    "DamageRelations",
    "TypeInfo",
    "MoveDetail",
    "RosterDocument",
    "TeamRecord",
    "TeamMemberRecord",
    "TeamMoveRecord",
]
