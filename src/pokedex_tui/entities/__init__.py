"""Domain entities for internal representation.

These are plain dataclasses used by the state machine, the loaders and
the roster repository. They are NOT used to decode remote payloads - use
the pydantic models from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .load_status import LoadStatus
from .summary import EntitySummary
from .team import Roster, Team, TeamMember, TeamMove

__all__ = [
    "EntitySummary",
    "LoadStatus",
    "Roster",
    "Team",
    "TeamMember",
    "TeamMove",
]
