"""Store model."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Store:
    """Destination store, referenced by id only."""

    id: int
    label: str
