"""Common type definitions for the ordertrack library."""

import copy
import math
from typing import Any, TypeAlias, TypeVar

from ordertrack.exceptions import ValidationError

# Opaque JSON-like map carried by preferences and order details
AttributeMap: TypeAlias = dict[str, Any]

# Type variables for Outcome payloads
T = TypeVar("T")
U = TypeVar("U")


def _find_unserializable(value: Any, path: str) -> str | None:
    """Return the path of the first value that would not survive a JSON round-trip."""
    if value is None or isinstance(value, (str, bool, int)):
        return None
    if isinstance(value, float):
        return None if math.isfinite(value) else path
    if isinstance(value, list):
        for index, item in enumerate(value):
            found = _find_unserializable(item, f"{path}[{index}]")
            if found:
                return found
        return None
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                return f"{path}.{key!r}"
            found = _find_unserializable(item, f"{path}.{key}")
            if found:
                return found
        return None
    return path


def ensure_attribute_map(value: AttributeMap | None, field: str) -> AttributeMap:
    """
    Validate an opaque attribute map and return an owned copy.

    The map is only checked for being serializable structured data:
    string keys, and values that are strings, numbers, booleans, None,
    lists or nested string-keyed maps. Its semantic content is never
    inspected.

    Args:
        value: The map supplied by the caller (None means empty)
        field: Field name used in the ValidationError

    Returns:
        A deep copy the caller can no longer mutate

    Raises:
        ValidationError: If the map would not round-trip through JSON
    """
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(field, f"{field.capitalize()} must be a mapping")
    offending = _find_unserializable(value, field)
    if offending:
        raise ValidationError(
            field, f"{field.capitalize()} must be JSON-serializable (offending entry: {offending})"
        )
    return copy.deepcopy(value)


__all__ = [
    "AttributeMap",
    "T",
    "U",
    "ensure_attribute_map",
]
