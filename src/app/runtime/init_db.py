"""Database initialization script."""

from src.app.core.services.database.db_manage import DbManageService
from src.app.core.services.database.db_session import DbSessionService
from src.app.runtime.app_startup import configure_logging


def init_db() -> None:
    """Create all database tables."""
    configure_logging()
    db_service = DbSessionService()
    try:
        DbManageService(db_service.engine).create_all()
    finally:
        db_service.dispose()


if __name__ == "__main__":
    init_db()
