"""Brief merge engine.

Reconciles the canonical brief with a candidate update from the refinement
collaborator. A value from the candidate replaces the original only when it
is strictly better; nothing the original had is ever dropped.
"""

from __future__ import annotations

import copy
from typing import Any

from brief_engine.core.logging import get_logger
from brief_engine.core.schemas_brief import FieldShape, detect_shape

logger = get_logger(__name__)

_LIST_SHAPES = frozenset({FieldShape.TEXT_LIST, FieldShape.OBJECT_LIST})


def _size_family(value: Any, shape: FieldShape) -> str | None:
    """Family whose members are compared by size, or None for scalars."""
    if shape is FieldShape.TEXT:
        return "text"
    if shape in _LIST_SHAPES:
        return "list"
    if shape is FieldShape.RECORD:
        return "record"
    if shape is FieldShape.OTHER and isinstance(value, (list, tuple)):
        # Lists of numbers or nested lists
        return "list"
    return None


def is_better(new_value: Any, old_value: Any) -> bool:
    """
    Decide whether ``new_value`` should replace ``old_value``.

    Longer text, longer lists and records with more keys win. Ties,
    mismatched types and scalar values never replace the original.
    """
    old_shape = detect_shape(old_value)
    new_shape = detect_shape(new_value)

    if old_shape is FieldShape.EMPTY:
        return new_shape is not FieldShape.EMPTY
    if new_shape is FieldShape.EMPTY:
        return False

    family = _size_family(new_value, new_shape)
    if family is None or family != _size_family(old_value, old_shape):
        return False
    return len(new_value) > len(old_value)


def merge_briefs(original: Any, improved: Any) -> Any:
    """
    Merge a candidate update into the original brief.

    Walks the original's keys: nested containers of the same kind merge
    recursively, other values are replaced only when ``is_better``. Keys
    only in the original are kept, keys only in the candidate are appended.
    Inputs are never mutated. Never raises: if either side is too deeply
    nested to walk, the original is returned unchanged.

    Args:
        original: Canonical brief (or nested value)
        improved: Candidate update (or nested value)

    Returns:
        New merged structure, or ``original`` itself when the merge failed
    """
    try:
        return _merge(original, improved)
    except RecursionError:
        logger.warning("Candidate update too deeply nested to merge, keeping original brief")
        return original


def _merge(original: Any, improved: Any) -> Any:
    if original is None or improved is None:
        return copy.deepcopy(original if original is not None else improved)

    if isinstance(original, dict) and isinstance(improved, dict):
        return _merge_records(original, improved)
    if isinstance(original, list) and isinstance(improved, list):
        return _merge_lists(original, improved)

    return copy.deepcopy(improved if is_better(improved, original) else original)


def _merge_value(original: Any, improved: Any) -> Any:
    if _same_container(original, improved):
        return _merge(original, improved)
    if is_better(improved, original):
        return copy.deepcopy(improved)
    return copy.deepcopy(original)


def _merge_records(original: dict, improved: dict) -> dict:
    result: dict[str, Any] = {}
    for key, original_value in original.items():
        if key in improved:
            result[key] = _merge_value(original_value, improved[key])
        else:
            result[key] = copy.deepcopy(original_value)

    for key, improved_value in improved.items():
        if key not in result:
            result[key] = copy.deepcopy(improved_value)

    return result


def _merge_lists(original: list, improved: list) -> list:
    result = [
        _merge_value(item, improved[index]) if index < len(improved) else copy.deepcopy(item)
        for index, item in enumerate(original)
    ]
    result.extend(copy.deepcopy(item) for item in improved[len(original) :])
    return result


def _same_container(a: Any, b: Any) -> bool:
    return (isinstance(a, dict) and isinstance(b, dict)) or (
        isinstance(a, list) and isinstance(b, list)
    )
