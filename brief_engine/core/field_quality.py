"""Field quality heuristic.

Pure-logic module: decides whether a brief value is too thin or placeholder
to be useful, and whether a whole brief is complete. Never raises.
"""

from __future__ import annotations

from typing import Any

from brief_engine.core.schemas_brief import INDISPENSABLE_FIELDS, FieldShape, detect_shape

MIN_TEXT_LENGTH = 5
MIN_TEXT_LIST_ITEMS = 2


def is_field_poor(value: Any) -> bool:
    """Return True when a value is empty, thin or placeholder-like."""
    try:
        return _is_poor(value)
    except RecursionError:
        # Pathologically deep values cannot be judged substantive
        return True


def _is_poor(value: Any) -> bool:
    shape = detect_shape(value)

    if shape is FieldShape.EMPTY:
        return True

    if shape is FieldShape.TEXT:
        return len(value.strip()) < MIN_TEXT_LENGTH

    if shape is FieldShape.TEXT_LIST:
        if len(value) < MIN_TEXT_LIST_ITEMS:
            return True
        return any(not isinstance(item, str) or len(item.strip()) < 1 for item in value)

    if shape is FieldShape.OBJECT_LIST:
        # Only string leaves count; a record missing a key is not poor by itself
        return any(
            isinstance(leaf, str) and _is_poor(leaf)
            for item in value
            if isinstance(item, dict)
            for leaf in item.values()
        )

    if shape is FieldShape.RECORD:
        return any(_is_poor(child) for child in value.values())

    return False


def list_poor_fields(document: Any) -> list[str]:
    """Indispensable fields that are poor, in canonical order."""
    if not isinstance(document, dict):
        return list(INDISPENSABLE_FIELDS)
    return [field for field in INDISPENSABLE_FIELDS if is_field_poor(document.get(field))]


def is_brief_complete(document: Any) -> bool:
    """True iff none of the indispensable fields is poor."""
    if not isinstance(document, dict):
        return False
    return not list_poor_fields(document)
