from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_client_count(value) -> int:
    """Client count must be a non-negative integer (bool is rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Client count must be an integer, got {value!r}")
    if value < 0:
        raise ValidationError(f"Client count cannot be negative: {value}")
    return value


def require_id(value, field_name: str) -> int:
    """Row ids arrive as JSON numbers; strings, floats and bools are rejected."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field_name} must be a positive integer, got {value!r}")
    return value


def require_flag(value, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false, got {value!r}")
    return value
