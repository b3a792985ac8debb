"""Classification of raw rustdoc items by kind."""

from typing import Any

# Older format versions used different names for the same kinds.
KIND_ALIASES = {
    "import": "use",
    "typedef": "type_alias",
    "method": "function",
    "tymethod": "function",
    "associated_type": "assoc_type",
    "associated_const": "assoc_const",
    "associated_constant": "assoc_const",
}

CONTAINER_KINDS = {"struct", "enum", "union"}


def item_kind(raw: dict[str, Any]) -> tuple[str, Any]:
    """Return the kind of a raw item and its kind-specific payload."""
    inner = raw.get("inner")
    legacy_kind = raw.get("kind")
    if isinstance(legacy_kind, str):
        kind = legacy_kind
        data = inner
    elif isinstance(inner, dict) and len(inner) == 1:
        kind, data = next(iter(inner.items()))
    elif isinstance(inner, str):
        kind, data = inner, {}
    else:
        return "unknown", inner
    kind = KIND_ALIASES.get(kind, kind)
    if data is None:
        data = {}
    return kind, data


def is_container_kind(kind: str | None) -> bool:
    """Check if the kind can own impl blocks (struct, enum, union)."""
    return kind in CONTAINER_KINDS
