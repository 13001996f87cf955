"""Unit tests for the database services."""

from unittest.mock import patch

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from src.app.core.services import (
    DbManageService,
    DbSessionService,
    create_identity_repository,
)
from src.app.entities.core.identity import Identity, IdentityTable
from src.app.runtime.config.config_data import ConfigData, DatabaseConfig


class TestDbSessionService:
    def test_builds_engine_from_config(self, tmp_path):
        config = ConfigData(
            database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'identity.db'}")
        )

        service = DbSessionService(config)
        try:
            assert service.engine.dialect.name == "sqlite"
            assert service.health_check() is True
        finally:
            service.dispose()

    def test_get_session_returns_bound_session(self, db_service: DbSessionService):
        session = db_service.get_session()
        try:
            assert isinstance(session, Session)
            assert session.get_bind() is db_service.engine
        finally:
            session.close()

    def test_session_scope_commits(self, db_service: DbSessionService):
        with db_service.session_scope() as session:
            session.add(IdentityTable(identity_id="idt_scope", first_name="Kofi"))

        with db_service.session_scope() as session:
            assert session.get(IdentityTable, "idt_scope") is not None

    def test_session_scope_rolls_back_on_error(self, db_service: DbSessionService):
        with pytest.raises(RuntimeError):
            with db_service.session_scope() as session:
                session.add(IdentityTable(identity_id="idt_rollback"))
                session.flush()
                raise RuntimeError("boom")

        with db_service.session_scope() as session:
            assert session.get(IdentityTable, "idt_rollback") is None

    def test_health_check_failure(self, db_service: DbSessionService):
        with patch.object(
            db_service.engine,
            "connect",
            side_effect=OperationalError("SELECT 1", {}, Exception("down")),
        ):
            assert db_service.health_check() is False

    def test_pool_status_keys(self, db_service: DbSessionService):
        assert set(db_service.get_pool_status()) == {
            "size",
            "checked_in",
            "checked_out",
            "overflow",
        }

    def test_sqlite_connect_args(self, test_config: ConfigData, engine):
        service = DbSessionService(test_config, engine=engine)

        assert service._get_connect_args(test_config) == {
            "check_same_thread": False,
            "timeout": 20,
        }

    def test_postgres_connect_args(self, engine):
        config = ConfigData(
            database=DatabaseConfig(url="postgresql://app:pw@db:5432/identity")
        )
        service = DbSessionService(config, engine=engine)

        args = service._get_connect_args(config)
        assert args["application_name"] == "identity-store_development"
        assert args["connect_timeout"] == 30


class TestDbManageService:
    def test_create_and_drop(self, engine):
        manager = DbManageService(engine)

        manager.drop_all()
        assert not inspect(engine).has_table("identity")

        manager.create_all()
        columns = {column["name"] for column in inspect(engine).get_columns("identity")}
        assert columns == {
            "identity_id",
            "identity_type",
            "first_name",
            "last_name",
            "other_names",
            "gender",
            "dob",
            "email_address",
            "phone_number",
            "nationality",
            "organization_name",
            "category",
            "street",
            "country",
            "state",
            "post_code",
            "city",
            "created_at",
            "meta_data",
        }


class TestCreateIdentityRepository:
    def test_wires_session_factory_and_timeout(self, db_service: DbSessionService):
        config = ConfigData(
            database=DatabaseConfig(url="sqlite://", read_timeout_seconds=12.5)
        )

        repository = create_identity_repository(db_service, config)
        created = repository.create(Identity(first_name="Amara"))

        assert repository._read_timeout == 12.5
        assert repository.get_by_id(created.identity_id) == created
