"""Unit tests for identity patches and the update statement builder."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from src.app.entities.core.identity import (
    Identity,
    IdentityPatch,
    IdentityTable,
    build_update_statement,
)
from src.app.entities.core.identity.patch import UPDATABLE_FIELDS


class TestIdentityPatch:
    """Test which fields take part in an update."""

    def test_from_identity_skips_empty_strings_and_unset_dob(self):
        identity = Identity(identity_id="idt_1", first_name="C", city="")

        patch = IdentityPatch.from_identity(identity)

        assert list(patch.changes()) == [("first_name", "C")]

    def test_from_identity_includes_metadata_when_present(self):
        identity = Identity(identity_id="idt_1", meta_data={"a": 1})

        assert list(IdentityPatch.from_identity(identity).changes()) == [
            ("meta_data", {"a": 1})
        ]

    def test_from_identity_with_only_id_is_empty(self):
        assert IdentityPatch.from_identity(Identity(identity_id="idt_1")).is_empty()

    def test_from_identity_never_carries_created_at(self):
        identity = Identity(
            identity_id="idt_1", created_at=datetime(2024, 1, 1, tzinfo=UTC)
        )

        assert IdentityPatch.from_identity(identity).is_empty()

    def test_empty_string_in_patch_is_a_change(self):
        patch = IdentityPatch(identity_id="idt_1", other_names="")

        assert list(patch.changes()) == [("other_names", "")]

    def test_changes_follow_canonical_order_with_metadata_last(self):
        dob = datetime(1990, 5, 17, tzinfo=UTC)
        patch = IdentityPatch(
            identity_id="idt_1",
            meta_data={"k": "v"},
            city="Lagos",
            first_name="Ngozi",
            dob=dob,
            identity_type="individual",
        )

        assert list(patch.changes()) == [
            ("identity_type", "individual"),
            ("first_name", "Ngozi"),
            ("dob", dob),
            ("city", "Lagos"),
            ("meta_data", {"k": "v"}),
        ]

    def test_dates_are_normalized_to_utc(self):
        patch = IdentityPatch(
            identity_id="idt_1",
            dob=datetime(2000, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=3))),
        )
        naive = IdentityPatch(identity_id="idt_1", dob=datetime(2000, 1, 1))

        assert patch.dob == datetime(1999, 12, 31, 22, 0, tzinfo=UTC)
        assert patch.dob.tzinfo is UTC
        assert naive.dob == datetime(2000, 1, 1, tzinfo=UTC)

    def test_identity_dates_are_normalized_on_assignment(self):
        identity = Identity(created_at=datetime(2024, 5, 1, 12, 0))
        identity.dob = datetime(1990, 1, 1, tzinfo=timezone(timedelta(hours=-5)))

        assert identity.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        assert identity.dob == datetime(1990, 1, 1, 5, 0, tzinfo=UTC)
        assert identity.dob.tzinfo is UTC

    def test_updatable_fields_exclude_immutable_columns(self):
        assert "identity_id" not in UPDATABLE_FIELDS
        assert "created_at" not in UPDATABLE_FIELDS
        assert set(UPDATABLE_FIELDS) <= set(IdentityTable.__table__.c.keys())


class TestBuildUpdateStatement:
    """Test the generated SQL."""

    def test_placeholders_numbered_with_id_last(self):
        statement = build_update_statement(
            "idt_1", [("first_name", "C"), ("city", "Accra"), ("meta_data", "{}")]
        )

        assert str(statement) == (
            "UPDATE identity SET first_name = :p1, city = :p2, meta_data = :p3 "
            "WHERE identity_id = :p4"
        )
        params = statement.compile().params
        assert params == {
            "p1": "C",
            "p2": "Accra",
            "p3": "{}",
            "p4": "idt_1",
        }

    def test_single_change(self):
        statement = build_update_statement("idt_9", [("gender", "male")])

        assert str(statement) == (
            "UPDATE identity SET gender = :p1 WHERE identity_id = :p2"
        )

    def test_no_changes_rejected(self):
        with pytest.raises(ValueError):
            build_update_statement("idt_1", [])
