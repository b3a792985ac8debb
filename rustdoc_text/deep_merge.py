"""Overlay of a user configuration onto the defaults."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Lists under these keys extend the defaults; every other list replaces them.
ADDITIVE_KEYS = frozenset({"hidden_auto_traits"})


def extend_unique(base: list[Any], extra: list[Any]) -> list[Any]:
    """Append the entries of `extra` not already in `base`, keeping first-seen order."""
    merged = list(base)
    for value in extra:
        if value not in merged:
            merged.append(value)
    return merged


def deep_merge(
    base: dict[str, Any],
    update: dict[str, Any],
    section: str = "",
) -> dict[str, Any]:
    """Overlay `update` on `base` without mutating either.

    Mappings merge key by key and lists under ADDITIVE_KEYS are extended.
    Anything else is replaced. Keys missing from `base` are kept and logged.
    """
    result = dict(base)
    for key, value in update.items():
        dotted = f"{section}.{key}" if section else str(key)
        current = result.get(key)
        if key not in result:
            logger.warning("Unknown configuration key %s", dotted)
            result[key] = value
        elif isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value, dotted)
        elif key in ADDITIVE_KEYS and isinstance(current, list) and isinstance(value, list):
            result[key] = extend_unique(current, value)
        else:
            result[key] = value
    return result
