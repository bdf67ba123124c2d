"""Brief normalization and minimum-content validation.

Generators and older clients name fields differently (``projectTitle``,
``strategicObjectives``, ``creativeStrategy.messageHierarchy``...).
Normalization moves those values under the canonical keys so the heuristics,
the merge engine and the rule engine all see one vocabulary.
"""

from __future__ import annotations

import copy
import re
from typing import Any

from brief_engine.core.schemas_brief import (
    FIELD_ALIASES,
    BriefValidation,
    FieldShape,
    detect_shape,
)

# Canonical fields holding lists of strings; a plain string is split into items
LIST_FIELDS: tuple[str, ...] = (
    "objectives",
    "requirements",
    "keyMessages",
    "dependencies",
    "assumptions",
    "outOfScope",
)

# (canonical key, container key, nested key) lifted out of generator sections
NESTED_SOURCES: tuple[tuple[str, str, str], ...] = (
    ("keyMessages", "creativeStrategy", "messageHierarchy"),
    ("assumptions", "appendix", "assumptions"),
)

REQUIRED_FIELDS: dict[str, str] = {
    "title": "Project title",
    "summary": "Brief summary",
    "objectives": "Objectives",
}

RECOMMENDED_FIELDS: dict[str, str] = {
    "brandPositioning": "Brand positioning",
    "problemStatement": "Problem statement",
    "keyMessages": "Key messages",
    "targetAudience": "Target audience",
}

_LIST_SEPARATORS = re.compile(r"[,;\n]")


def _is_empty(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return detect_shape(value) is FieldShape.EMPTY


def _split_items(text: str) -> list[str]:
    return [item.strip() for item in _LIST_SEPARATORS.split(text) if item.strip()]


def normalize_brief(document: Any) -> dict[str, Any]:
    """
    Map alias and nested generator fields onto canonical keys.

    An alias value moves to its canonical key only when the canonical key is
    empty; otherwise both are kept. Unknown fields are preserved as-is. The
    input is never mutated.

    Args:
        document: Brief as produced by a generator or an older client

    Returns:
        New brief dict using canonical keys ({} for non-dict input)
    """
    if not isinstance(document, dict):
        return {}

    normalized = copy.deepcopy(document)

    for key, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            if alias not in normalized or _is_empty(normalized[alias]):
                continue
            if _is_empty(normalized.get(key)):
                normalized[key] = normalized.pop(alias)

    for key, container_key, nested_key in NESTED_SOURCES:
        container = normalized.get(container_key)
        if isinstance(container, dict) and _is_empty(normalized.get(key)):
            nested = container.get(nested_key)
            if not _is_empty(nested):
                normalized[key] = copy.deepcopy(nested)

    for key in LIST_FIELDS:
        value = normalized.get(key)
        if isinstance(value, str) and value.strip():
            normalized[key] = _split_items(value)

    return normalized


def validate_brief(document: Any) -> BriefValidation:
    """
    Check that a brief has the minimum content to work with.

    Required fields missing make it invalid; missing recommended fields only
    produce warnings. The document is normalized first, so aliases count.
    """
    normalized = normalize_brief(document)

    missing = [label for key, label in REQUIRED_FIELDS.items() if _is_empty(normalized.get(key))]
    warnings = [
        f"Consider adding: {label}"
        for key, label in RECOMMENDED_FIELDS.items()
        if _is_empty(normalized.get(key))
    ]

    return BriefValidation(is_valid=not missing, missing_fields=missing, warnings=warnings)
