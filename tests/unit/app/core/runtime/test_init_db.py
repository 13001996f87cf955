"""Unit tests for the database initialization script."""

from unittest.mock import patch

from loguru import logger
from sqlalchemy import inspect

from src.app.core.services.database.db_manage import DbManageService
from src.app.core.services.database.db_session import DbSessionService
from src.app.runtime import init_db as init_db_module


def test_init_db_creates_identity_table(test_config, engine):
    DbManageService(engine).drop_all()
    service = DbSessionService(test_config, engine=engine)

    with (
        patch.object(init_db_module, "DbSessionService", return_value=service),
        patch.object(service, "dispose") as dispose,
    ):
        init_db_module.init_db()
    logger.remove()

    assert inspect(engine).has_table("identity")
    dispose.assert_called_once()
