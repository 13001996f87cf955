"""Entities module with hybrid entity-centric structure.

This module organizes entities by business concept rather than technical layer.
Each entity has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .core.identity import (
    Identity,
    IdentityPatch,
    IdentityRepository,
    IdentityTable,
)

__all__ = [
    "Identity",
    "IdentityTable",
    "IdentityPatch",
    "IdentityRepository",
]
