"""User model."""
from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """Panel user an order is placed for, referenced by id only."""

    id: int
    label: str
