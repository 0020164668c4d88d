"""User-friendly error messages for configuration validation errors.

Belongs to the Application layer: translates Pydantic machine errors
into short messages the CLI can print next to the offending field.
"""

from __future__ import annotations

from typing import Any

# Maps (field, error_type) → message
_ERROR_MAP: dict[tuple[str, str], str] = {
    ("metadata.rule_set_version", "string_type"): (
        'rule_set_version must be a string such as "1".'
    ),
    ("rules.dry.similarity_threshold", "greater_than"): (
        "similarity_threshold must be greater than 0."
    ),
    ("rules.dry.similarity_threshold", "less_than_equal"): (
        "similarity_threshold must be at most 1.0 (1.0 means exact-substring matching)."
    ),
    ("rules.dry.similarity_threshold", "float_parsing"): (
        "similarity_threshold must be a number between 0 and 1.0."
    ),
    ("severity_overrides", "enum"): "Severity overrides must be 'error' or 'warning'.",
    ("disabled_rules", "list_type"): 'disabled_rules must be a list of rule ids, e.g. ["R7"].',
    ("rules.alternative_flow_trigger.require_existing_step", "bool_parsing"): (
        "require_existing_step must be true or false."
    ),
}


def friendly_error(
    field: str,
    error_type: str,
    fallback: str | None = None,
) -> str:
    """Return a user-friendly error message.

    Args:
        field: Dotted location of the field that failed validation.
        error_type: The Pydantic error type string (e.g., ``value_error``).
        fallback: Fallback message if no mapping exists.

    Returns:
        A user-friendly error string prefixed with the field location.
    """
    message = _ERROR_MAP.get((field, error_type))
    if message is None:
        # severity_overrides.R3 → severity_overrides
        message = _ERROR_MAP.get((field.split(".", 1)[0], error_type))
    if message:
        return f"{field}: {message}"
    if fallback:
        return f"{field}: {fallback}" if field else fallback
    return f"Validation error on field '{field}'."


def format_validation_errors(errors: list[dict[str, Any]]) -> list[str]:
    """Convert a list of Pydantic error dicts to user-friendly messages.

    Args:
        errors: Output of ``ValidationError.errors()``.

    Returns:
        List of user-friendly error strings.
    """
    result: list[str] = []
    for err in errors:
        field = ".".join(str(loc) for loc in err.get("loc", []))
        error_type = err.get("type", "")
        result.append(friendly_error(field, error_type, fallback=err.get("msg")))
    return result
