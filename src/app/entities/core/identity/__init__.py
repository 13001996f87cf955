"""Identity entity module.

This module contains all Identity-related classes organized by responsibility:
- Identity: Domain entity for a person or organization record
- IdentityTable: Database persistence model
- IdentityPatch: Explicit partial update
- IdentityRepository: Data access layer
"""

from .entity import Identity
from .patch import IdentityPatch, build_update_statement
from .repository import IdentityRepository
from .table import IdentityTable

__all__ = [
    "Identity",
    "IdentityTable",
    "IdentityPatch",
    "IdentityRepository",
    "build_update_statement",
]
