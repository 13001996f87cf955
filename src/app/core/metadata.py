"""JSON codec for the open-ended metadata mapping stored with an entity."""

import json
from typing import Any


class MetadataError(ValueError):
    """Raised when metadata cannot be encoded or decoded."""


def encode_metadata(meta_data: dict[str, Any] | None) -> str:
    """Serialize metadata to JSON text. ``None`` becomes ``"null"``."""
    try:
        return json.dumps(meta_data, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise MetadataError(f"metadata is not JSON serializable: {e}") from e


def decode_metadata(raw: str | bytes | None) -> dict[str, Any] | None:
    """Parse stored metadata back into a mapping."""
    if raw is None or raw == "" or raw == b"":
        return None

    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MetadataError(f"stored metadata is not valid JSON: {e}") from e

    if value is not None and not isinstance(value, dict):
        raise MetadataError(
            f"stored metadata must be a JSON object, got {type(value).__name__}"
        )
    return value
