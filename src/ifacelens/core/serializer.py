"""Resolution result serialization and deserialization.

Results are plain pydantic models, so JSON conversion goes through
``model_dump(mode="json")`` and ``model_validate``.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from ifacelens.core.models import ResolutionResult


class SerializationError(Exception):
    """Error during serialization or deserialization."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


def serialize(result: ResolutionResult) -> str:
    """Serialize a resolution result to a JSON string.

    Args:
        result: The resolution result to serialize.

    Returns:
        JSON string representation of the result.

    Raises:
        SerializationError: If serialization fails.
    """
    try:
        return json.dumps(serialize_to_dict(result), indent=2, ensure_ascii=False)
    except Exception as e:
        raise SerializationError(
            message="Failed to serialize resolution result",
            details=str(e),
        ) from e


def serialize_to_dict(result: ResolutionResult) -> dict[str, Any]:
    """Convert a resolution result to a JSON-compatible dictionary."""
    return result.model_dump(mode="json")


def deserialize(json_str: str) -> ResolutionResult:
    """Deserialize a JSON string to a resolution result.

    Raises:
        SerializationError: If the JSON is malformed or does not describe a result.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SerializationError(
            message="Invalid JSON format",
            details=f"Line {e.lineno}, column {e.colno}: {e.msg}",
        ) from e
    return deserialize_from_dict(data)


def deserialize_from_dict(data: dict[str, Any]) -> ResolutionResult:
    """Build a resolution result from a dictionary.

    Raises:
        SerializationError: If validation fails.
    """
    try:
        return ResolutionResult.model_validate(data)
    except ValidationError as e:
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise SerializationError(
            message="Resolution result validation failed",
            details="; ".join(errors),
        ) from e
