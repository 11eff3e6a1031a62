"""Response DTOs for the remote PokéAPI endpoints.

Only the fields the application reads are declared; everything else in
the payload is ignored. Detail records are frozen because they are
replaced wholesale, never patched.
"""

from pydantic import BaseModel, ConfigDict, Field


class NamedResource(BaseModel):
    """A ``{name, url}`` reference to another resource."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str


class PokemonEntry(NamedResource):
    """Entry of the /pokemon listing."""


class PokemonListResponse(BaseModel):
    """Response of GET /pokemon?limit=N."""

    results: list[PokemonEntry] = Field(default_factory=list)


class PokemonTypeSlot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    slot: int
    type_info: NamedResource = Field(..., alias="type")


class StatEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_stat: int
    stat: NamedResource


class AbilitySlot(BaseModel):
    model_config = ConfigDict(frozen=True)

    ability: NamedResource
    is_hidden: bool = False


class MoveEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    move_info: NamedResource = Field(..., alias="move")


class Sprites(BaseModel):
    model_config = ConfigDict(frozen=True)

    front_default: str | None = None


class PokemonDetail(BaseModel):
    """Response of GET /pokemon/{id}."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    height: int = 0
    weight: int = 0
    types: list[PokemonTypeSlot] = Field(default_factory=list)
    stats: list[StatEntry] = Field(default_factory=list)
    abilities: list[AbilitySlot] = Field(default_factory=list)
    moves: list[MoveEntry] = Field(default_factory=list)
    sprites: Sprites = Field(default_factory=Sprites)

    @property
    def type_names(self) -> list[str]:
        """Type names in slot order."""
        return [t.type_info.name for t in sorted(self.types, key=lambda t: t.slot)]

    @property
    def move_names(self) -> list[str]:
        return [m.move_info.name for m in self.moves]


class DamageRelations(BaseModel):
    model_config = ConfigDict(frozen=True)

    double_damage_to: list[NamedResource] = Field(default_factory=list)
    half_damage_to: list[NamedResource] = Field(default_factory=list)
    no_damage_to: list[NamedResource] = Field(default_factory=list)
    double_damage_from: list[NamedResource] = Field(default_factory=list)
    half_damage_from: list[NamedResource] = Field(default_factory=list)
    no_damage_from: list[NamedResource] = Field(default_factory=list)


class TypeInfo(BaseModel):
    """Response of GET /type/{name}."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    damage_relations: DamageRelations


class MoveDetail(BaseModel):
    """Response of GET /move/{name}."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    power: int | None = None
    accuracy: int | None = None
    pp: int | None = None
    move_type: NamedResource = Field(..., alias="type")
    damage_class: NamedResource | None = None
