"""Identifier helpers."""

from uuid import UUID


def is_valid_identifier(value) -> bool:
    """Return True when ``value`` is a syntactically valid entity identifier (a UUID string)."""
    if not isinstance(value, str) or not value:
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True
