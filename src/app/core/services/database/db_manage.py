"""Schema management for the identity store."""

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import SQLModel

from src.app.entities.core.identity import IdentityTable


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create the identity table if it does not exist."""
        SQLModel.metadata.create_all(self._engine, tables=[IdentityTable.__table__])
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        """Drop the identity table."""
        SQLModel.metadata.drop_all(self._engine, tables=[IdentityTable.__table__])
        logger.info("Database tables dropped.")
