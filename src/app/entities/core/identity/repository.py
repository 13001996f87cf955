"""Identity data-access layer."""

import time
from collections.abc import Callable
from datetime import datetime

from loguru import logger
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from src.app.core.errors import APIError, ErrorCode, new_api_error
from src.app.core.ids import generate_uuid_with_suffix
from src.app.core.metadata import MetadataError, decode_metadata, encode_metadata

from .entity import Identity, as_utc
from .patch import IdentityPatch, build_update_statement
from .table import IdentityTable, utc_now

IDENTITY_ID_TAG = "idt"
DEFAULT_READ_TIMEOUT_SECONDS = 60.0


def _internal_error(message: str, err: BaseException) -> APIError:
    logger.bind(error_type=type(err).__name__).error("{}: {}", message, err)
    return new_api_error(ErrorCode.INTERNAL_SERVER, message, err)


def _not_found(identity_id: str, err: BaseException | None = None) -> APIError:
    return new_api_error(
        ErrorCode.NOT_FOUND, f"Identity with ID '{identity_id}' not found", err
    )


class IdentityRepository:
    """Data-access layer for identities.

    The repository keeps no state besides the injected session factory; every
    operation opens its own session and finishes its own unit of work. All
    failures are raised as :class:`APIError`.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        clock: Callable[[], datetime] = utc_now,
        read_timeout: float = DEFAULT_READ_TIMEOUT_SECONDS,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock
        self._read_timeout = read_timeout

    def create(self, identity: Identity) -> Identity:
        """Insert a new identity with a generated ID and creation time."""
        try:
            meta_data_json = encode_metadata(identity.meta_data)
        except MetadataError as e:
            raise _internal_error("Failed to marshal metadata", e) from e

        created = identity.model_copy(
            update={
                "identity_id": generate_uuid_with_suffix(IDENTITY_ID_TAG),
                "created_at": as_utc(self._clock()),
            },
            deep=True,
        )
        row = IdentityTable(
            **created.model_dump(exclude={"meta_data"}), meta_data=meta_data_json
        )

        with self._session_factory() as session:
            try:
                session.add(row)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise _internal_error("Failed to create identity", e) from e

        logger.debug("Created identity {}", created.identity_id)
        return created

    def get_by_id(self, identity_id: str) -> Identity:
        """Fetch one identity inside a time-bounded read transaction.

        On PostgreSQL the bound is set as the transaction's
        ``statement_timeout``, so the server cancels a read that runs past it.
        Other backends only check the deadline once the read returns: a slow
        read fails afterwards, but a stuck one is not interrupted.
        """
        deadline = time.monotonic() + self._read_timeout

        with self._session_factory() as session:
            try:
                transaction = session.begin()
            except SQLAlchemyError as e:
                raise _internal_error("Failed to begin transaction", e) from e

            try:
                self._apply_statement_timeout(session)
                row = session.get(IdentityTable, identity_id)
                if row is None:
                    raise _not_found(identity_id)
                identity = self._to_entity(row)
                if time.monotonic() > deadline:
                    raise TimeoutError(
                        f"read exceeded {self._read_timeout:g}s deadline"
                    )
            except APIError:
                transaction.rollback()
                raise
            except MetadataError as e:
                transaction.rollback()
                raise _internal_error("Failed to unmarshal metadata", e) from e
            except ValueError as e:
                transaction.rollback()
                raise _internal_error("Failed to retrieve identity", e) from e
            except TimeoutError as e:
                transaction.rollback()
                raise _internal_error("Timed out retrieving identity", e) from e
            except SQLAlchemyError as e:
                transaction.rollback()
                raise _internal_error("Failed to retrieve identity", e) from e

            try:
                transaction.commit()
            except SQLAlchemyError as e:
                transaction.rollback()
                raise _internal_error("Failed to commit transaction", e) from e

        return identity

    def get_all(self) -> list[Identity]:
        """Return every identity, most recently created first."""
        statement = select(IdentityTable).order_by(col(IdentityTable.created_at).desc())

        with self._session_factory() as session:
            try:
                result = session.exec(statement)
            except SQLAlchemyError as e:
                raise _internal_error("Failed to retrieve identities", e) from e

            try:
                rows = result.all()
            except SQLAlchemyError as e:
                raise _internal_error(
                    "Error occurred while iterating over identities", e
                ) from e

            identities = []
            for row in rows:
                try:
                    identities.append(self._to_entity(row))
                except MetadataError as e:
                    raise _internal_error("Failed to unmarshal metadata", e) from e
                except ValueError as e:
                    raise _internal_error("Failed to scan identity data", e) from e

        return identities

    def update(self, identity: Identity | IdentityPatch) -> None:
        """Apply a partial update.

        Accepts an explicit :class:`IdentityPatch`, or an :class:`Identity`
        whose empty fields are left unchanged.
        """
        if isinstance(identity, IdentityPatch):
            patch = identity
        else:
            patch = IdentityPatch.from_identity(identity)

        changes = []
        for column, value in patch.changes():
            if column == "meta_data":
                try:
                    value = encode_metadata(value)
                except MetadataError as e:
                    raise _internal_error("Failed to marshal metadata", e) from e
            changes.append((column, value))

        if not changes:
            raise new_api_error(ErrorCode.BAD_REQUEST, "No fields provided for update")

        statement = build_update_statement(patch.identity_id, changes)

        with self._session_factory() as session:
            try:
                result = session.exec(statement)  # type: ignore[call-overload]
            except SQLAlchemyError as e:
                session.rollback()
                raise _internal_error("Failed to update identity", e) from e

            rows_affected = self._rows_affected(session, result)
            if rows_affected == 0:
                session.rollback()
                raise _not_found(patch.identity_id)

            try:
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise _internal_error("Failed to update identity", e) from e

        logger.debug(
            "Updated identity {} ({})",
            patch.identity_id,
            ", ".join(column for column, _ in changes),
        )

    def delete(self, identity_id: str) -> None:
        """Delete an identity. Deletion is irreversible."""
        statement = delete(IdentityTable).where(
            col(IdentityTable.identity_id) == identity_id
        )

        with self._session_factory() as session:
            try:
                result = session.exec(statement)  # type: ignore[call-overload]
            except SQLAlchemyError as e:
                session.rollback()
                raise _internal_error("Failed to delete identity", e) from e

            rows_affected = self._rows_affected(session, result)
            if rows_affected == 0:
                session.rollback()
                raise _not_found(identity_id)

            try:
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise _internal_error("Failed to delete identity", e) from e

        logger.debug("Deleted identity {}", identity_id)

    @staticmethod
    def _rows_affected(session: Session, result) -> int:
        try:
            return result.rowcount
        except SQLAlchemyError as e:
            session.rollback()
            raise _internal_error("Failed to get rows affected", e) from e

    def _apply_statement_timeout(self, session: Session) -> None:
        """Push the read deadline to the server where the dialect supports it."""
        if session.get_bind().dialect.name == "postgresql":
            timeout_ms = int(self._read_timeout * 1000)
            session.connection().exec_driver_sql(
                f"SET LOCAL statement_timeout = {timeout_ms}"
            )

    @staticmethod
    def _to_entity(row: IdentityTable) -> Identity:
        # Naive timestamps from SQLite are read as UTC by Identity
        values = row.model_dump(exclude={"meta_data"})
        return Identity.model_validate(
            {**values, "meta_data": decode_metadata(row.meta_data)}
        )
