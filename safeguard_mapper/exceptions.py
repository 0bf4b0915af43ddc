"""
Validation errors raised before any scoring runs.

Every error carries a human-readable message plus actionable guidance so
the API and CLI can report it verbatim instead of a stack trace.
"""

from __future__ import annotations

from typing import Any


class MappingError(Exception):
    """Base class for all request validation failures."""

    code = "mapping_error"

    def __init__(self, message: str, guidance: str = "", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.guidance = guidance
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "code": self.code,
            "guidance": self.guidance,
            "details": self.details,
        }


class InvalidSafeguardFormatError(MappingError, ValueError):
    """Safeguard id does not match the major.minor pattern."""

    code = "invalid_format"

    def __init__(self, safeguard_id: Any, pattern: str):
        super().__init__(
            f"Safeguard ID must be in format \"X.Y\" (e.g., \"1.1\", \"5.1\"), got {safeguard_id!r}",
            guidance=f"Use an identifier matching {pattern}, for example \"1.1\".",
            details={"safeguard_id": safeguard_id, "expected_pattern": pattern, "example": "1.1"},
        )


class SafeguardNotFoundError(MappingError, LookupError):
    """Safeguard id is well-formed but absent from the catalog."""

    code = "not_found"

    def __init__(self, safeguard_id: str, available: list[str]):
        super().__init__(
            f"Safeguard {safeguard_id} not found. Available safeguards: {', '.join(available)}",
            guidance="Use list_available_safeguards to see all available options.",
            details={"safeguard_id": safeguard_id, "available_safeguards": available},
        )


class InvalidCapabilityError(MappingError, ValueError):
    """Claimed capability is not one of the five roles."""

    code = "invalid_enum"

    def __init__(self, value: Any, allowed: list[str]):
        super().__init__(
            f"Invalid claimed capability {value!r}. Must be one of: {', '.join(allowed)}",
            guidance=(
                "full (complete implementation), partial (limited implementation), "
                "facilitates (enables/enhances), governance (policies/processes), "
                "validates (evidence/reporting)"
            ),
            details={"claimed_capability": value, "allowed": allowed},
        )


class TextLengthError(MappingError, ValueError):
    """Supporting text is too short or too long."""

    code = "text_length"

    def __init__(self, length: int, minimum: int, maximum: int):
        if length < minimum:
            message = f"Supporting text is too short ({length} characters, minimum {minimum})"
        else:
            message = f"Supporting text is too long ({length:,} characters, maximum {maximum:,})"
        super().__init__(
            message,
            guidance=f"Provide between {minimum} and {maximum:,} characters describing the tool's capabilities.",
            details={"length": length, "min_length": minimum, "max_length": maximum},
        )


class MissingFieldError(MappingError, ValueError):
    """A required request field is absent or blank."""

    code = "missing_field"

    def __init__(self, field_name: str):
        super().__init__(
            f"Missing required field: {field_name}",
            guidance=f"Provide a non-empty value for '{field_name}'.",
            details={"field": field_name},
        )
