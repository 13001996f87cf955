"""Identity domain entity."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_utc(value: datetime | None) -> datetime | None:
    """Convert to UTC. Naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Identity(BaseModel):
    """Identity entity representing a person or an organization.

    ``identity_id`` and ``created_at`` are assigned by the store on creation;
    values supplied by the caller for them are ignored. Fields are declared
    in the canonical column order of the identity table. Dates are held in
    UTC so they read back unchanged from backends that drop the offset.
    """

    model_config = ConfigDict(validate_assignment=True)

    identity_id: str = Field(default="", description="Store-assigned identifier")
    identity_type: str = Field(
        default="", description="Discriminates individual and organization"
    )

    # Person
    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    other_names: str = Field(default="", description="Middle or other names")
    gender: str = Field(default="", description="Gender")
    dob: datetime | None = Field(default=None, description="Date of birth")

    # Contact
    email_address: str = Field(default="", description="Email address")
    phone_number: str = Field(default="", description="Phone number")
    nationality: str = Field(default="", description="Nationality")

    # Organization
    organization_name: str = Field(default="", description="Organization name")
    category: str = Field(default="", description="Organization category")

    # Address
    street: str = Field(default="", description="Street")
    country: str = Field(default="", description="Country")
    state: str = Field(default="", description="State or region")
    post_code: str = Field(default="", description="Postal code")
    city: str = Field(default="", description="City")

    created_at: datetime | None = Field(
        default=None, description="When the identity was created"
    )
    meta_data: dict[str, Any] | None = Field(
        default=None, description="Caller-defined annotations, opaque to the store"
    )

    @field_validator("dob", "created_at")
    @classmethod
    def normalize_to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)
