"""Catalog row domain entity."""

from dataclasses import dataclass, field


@dataclass
class EntitySummary:
    """A single row of the catalog listing.

    Unlike the other entities this one is mutable: ``types`` starts empty
    and is filled in once, when the enrichment batch for the row arrives.

    Attributes:
        id: National dex id
        name: API name (lowercase slug)
        types: Type names in slot order, empty until enriched
    """

    id: int
    name: str
    types: list[str] = field(default_factory=list)
