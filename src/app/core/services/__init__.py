"""Core services exports."""

# Database Services
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# Identity Store
from .identity_store import create_identity_repository

__all__ = [
    # Database Services
    "DbManageService",
    "DbSessionService",
    # Identity Store
    "create_identity_repository",
]
