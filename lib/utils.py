# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from typing import Any, Sequence
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Form Value Utilities
# =============================================================================

def blank_to_none(value: str | None) -> str | None:
    """Trim a form string, returning None when nothing is left."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def drop_none(data: dict[str, Any]) -> dict[str, Any]:
    """Remove keys whose value is None (for partial updates)."""
    return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# Database Error Rewriting
# =============================================================================

# A rewrite rule: (substrings to look for, message to show instead)
ErrorRewrite = tuple[Sequence[str], str]


def describe_database_error(
    error: Exception | str,
    rewrites: Sequence[ErrorRewrite] = (),
    fallback: str = "Something went wrong. Please try again.",
) -> str:
    """
    Turn a raw database error into a message fit for end users.

    Rules are checked in order; the first rule with any substring found in
    the error text wins. Errors that match nothing are echoed back as
    "Error: <message>". Empty errors get the fallback.

    Example:
        describe_database_error(
            exc,
            rewrites=[(("duplicate key",), "That account already exists.")],
        )
    """
    text = str(error).strip()
    if not text:
        return fallback

    for needles, message in rewrites:
        if any(needle in text for needle in needles):
            return message

    return f"Error: {text}"
