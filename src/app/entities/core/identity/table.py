"""Identity database table model."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


def utc_now():
    """Return current UTC datetime."""
    return datetime.now(UTC)


class IdentityTable(SQLModel, table=True):
    """Database persistence model for identities.

    ``meta_data`` holds the JSON-encoded metadata mapping; encoding and
    decoding happen in the repository so failures can be classified.
    """

    __tablename__ = "identity"

    identity_id: str = Field(sa_column=Column(String(64), primary_key=True))
    identity_type: str = Field(default="", sa_column=Column(String(64), nullable=False))
    first_name: str = Field(default="", sa_column=Column(String(255), nullable=False))
    last_name: str = Field(default="", sa_column=Column(String(255), nullable=False))
    other_names: str = Field(default="", sa_column=Column(String(255), nullable=False))
    gender: str = Field(default="", sa_column=Column(String(32), nullable=False))
    dob: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    email_address: str = Field(
        default="", sa_column=Column(String(255), nullable=False)
    )
    phone_number: str = Field(default="", sa_column=Column(String(64), nullable=False))
    nationality: str = Field(default="", sa_column=Column(String(64), nullable=False))
    organization_name: str = Field(
        default="", sa_column=Column(String(255), nullable=False)
    )
    category: str = Field(default="", sa_column=Column(String(255), nullable=False))
    street: str = Field(default="", sa_column=Column(String(255), nullable=False))
    country: str = Field(default="", sa_column=Column(String(64), nullable=False))
    state: str = Field(default="", sa_column=Column(String(64), nullable=False))
    post_code: str = Field(default="", sa_column=Column(String(32), nullable=False))
    city: str = Field(default="", sa_column=Column(String(255), nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    meta_data: str = Field(default="null", sa_column=Column(Text, nullable=False))
