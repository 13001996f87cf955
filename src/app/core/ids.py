"""Identifier generation."""

import uuid


def generate_uuid_with_suffix(module: str) -> str:
    """Return a random identifier tagged with the entity type, e.g. ``idt_<uuid4>``."""
    return f"{module}_{uuid.uuid4()}"
