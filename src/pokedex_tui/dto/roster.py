"""DTOs for the persisted team roster file."""

from pydantic import BaseModel, Field

from pokedex_tui.entities import Roster, Team, TeamMember, TeamMove


class TeamMoveRecord(BaseModel):
    name: str
    move_type: str
    power: int | None = None


class TeamMemberRecord(BaseModel):
    pokemon_id: int
    pokemon_name: str
    types: list[str] = Field(default_factory=list)
    moves: list[TeamMoveRecord] = Field(default_factory=list)


class TeamRecord(BaseModel):
    name: str
    members: list[TeamMemberRecord] = Field(default_factory=list)


class RosterDocument(BaseModel):
    """On-disk shape of ``teams.json``."""

    teams: list[TeamRecord] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, roster: Roster) -> "RosterDocument":
        return cls(
            teams=[
                TeamRecord(
                    name=team.name,
                    members=[
                        TeamMemberRecord(
                            pokemon_id=member.pokemon_id,
                            pokemon_name=member.pokemon_name,
                            types=list(member.types),
                            moves=[
                                TeamMoveRecord(name=m.name, move_type=m.move_type, power=m.power)
                                for m in member.moves
                            ],
                        )
                        for member in team.members
                    ],
                )
                for team in roster.teams
            ]
        )

    def to_entity(self) -> Roster:
        return Roster(
            teams=[
                Team(
                    name=team.name,
                    members=[
                        TeamMember(
                            pokemon_id=member.pokemon_id,
                            pokemon_name=member.pokemon_name,
                            types=list(member.types),
                            moves=[
                                TeamMove(name=m.name, move_type=m.move_type, power=m.power)
                                for m in member.moves
                            ],
                        )
                        for member in team.members
                    ],
                )
                for team in self.teams
            ]
        )
