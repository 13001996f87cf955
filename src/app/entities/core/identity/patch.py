"""Partial updates for identities.

An :class:`IdentityPatch` lists the columns to change. A field takes part in
the update when it is not ``None``, so an empty string in a patch clears the
stored value. :meth:`IdentityPatch.from_identity` keeps the looser rule used
when a whole :class:`Identity` is passed as an update: empty strings and an
unset date of birth mean "leave unchanged".
"""

from collections.abc import Iterator, Sequence
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator
from sqlalchemy import TextClause, bindparam, text

from .entity import Identity, as_utc
from .table import IdentityTable

# Columns that may be changed after creation, in canonical order.
UPDATABLE_FIELDS: tuple[str, ...] = (
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
)


class IdentityPatch(BaseModel):
    """Explicit set of changes to apply to one identity."""

    identity_id: str = Field(description="Identity to update")
    identity_type: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    other_names: str | None = None
    gender: str | None = None
    dob: datetime | None = None
    email_address: str | None = None
    phone_number: str | None = None
    nationality: str | None = None
    organization_name: str | None = None
    category: str | None = None
    street: str | None = None
    country: str | None = None
    state: str | None = None
    post_code: str | None = None
    city: str | None = None
    meta_data: dict[str, Any] | None = Field(
        default=None, description="Replaces the stored metadata when set"
    )

    @field_validator("dob")
    @classmethod
    def normalize_to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @classmethod
    def from_identity(cls, identity: Identity) -> "IdentityPatch":
        """Build a patch from a full identity, treating zero values as absent."""
        values: dict[str, Any] = {}
        for name in UPDATABLE_FIELDS:
            value = getattr(identity, name)
            if value is None or value == "":
                continue
            values[name] = value
        return cls(
            identity_id=identity.identity_id,
            meta_data=identity.meta_data,
            **values,
        )

    def changes(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(column, value)`` for every present field, metadata last."""
        for name in UPDATABLE_FIELDS:
            value = getattr(self, name)
            if value is not None:
                yield name, value
        if self.meta_data is not None:
            yield "meta_data", self.meta_data

    def is_empty(self) -> bool:
        return next(self.changes(), None) is None


def build_update_statement(
    identity_id: str, changes: Sequence[tuple[str, Any]]
) -> TextClause:
    """Build ``UPDATE identity SET ... WHERE identity_id = :pN``.

    Placeholders are numbered from 1 in the order of ``changes``; the
    identifier's placeholder comes last. Values must already be in their
    storage form (metadata encoded).
    """
    if not changes:
        raise ValueError("at least one column is required for an update")

    columns = IdentityTable.__table__.c
    set_fields = []
    params = []
    for position, (column, value) in enumerate(changes, start=1):
        name = f"p{position}"
        set_fields.append(f"{column} = :{name}")
        params.append(bindparam(name, value, type_=columns[column].type))

    id_name = f"p{len(changes) + 1}"
    params.append(bindparam(id_name, identity_id, type_=columns["identity_id"].type))

    statement = (
        f"UPDATE {IdentityTable.__tablename__} "
        f"SET {', '.join(set_fields)} "
        f"WHERE identity_id = :{id_name}"
    )
    return text(statement).bindparams(*params)
