"""Wiring for the identity repository."""

from src.app.core.services.database.db_session import DbSessionService
from src.app.entities.core.identity import IdentityRepository
from src.app.runtime.config.config_data import ConfigData
from src.app.runtime.context import get_config


def create_identity_repository(
    db_service: DbSessionService | None = None, config: ConfigData | None = None
) -> IdentityRepository:
    """Build an IdentityRepository bound to the configured database."""
    config = config or get_config()
    db_service = db_service or DbSessionService(config)
    return IdentityRepository(
        db_service.get_session,
        read_timeout=config.database.read_timeout_seconds,
    )
