# =============================================================================
# core/stores/errors.py - Store Validation Errors
# =============================================================================

from pydantic import ValidationError

from app.exceptions import FormValidationError


def invalid_field(error: ValidationError) -> FormValidationError:
    """Turn the first pydantic error into a 400 naming the field."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or None
    return FormValidationError(f"Invalid value for {field}: {first['msg']}", field=field)
