"""Record identifiers: opaque UUID strings generated by the service."""

import uuid


def new_id() -> str:
    return str(uuid.uuid4())


def is_valid_id(value: object) -> bool:
    """Return True if value is a string holding a well-formed UUID."""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        uuid.UUID(value.strip())
    except ValueError:
        return False
    return True


def normalize_id(value: str) -> str:
    """Return the canonical lowercase hyphenated form of a valid id (raises ValueError otherwise)."""
    return str(uuid.UUID(value.strip()))
