"""Mapping of raw rustdoc visibility values onto the item model."""

from typing import Any

from rustdoc_text.item_model import (
    INHERITED,
    PRIVATE,
    PUBLIC,
    Visibility,
    VisibilityLevel,
)


def resolve_visibility(raw: Any, *, inherited: bool = False) -> Visibility:
    """Resolve a raw visibility value.

    `"default"` means no qualifier was written: private at module and field
    scope, inherited inside traits, trait impls and enum variants.
    """
    if raw == "public":
        return PUBLIC
    if raw == "crate":
        return Visibility(VisibilityLevel.RESTRICTED, path="crate")
    if isinstance(raw, dict) and "restricted" in raw:
        path = str((raw["restricted"] or {}).get("path") or "crate")
        return Visibility(VisibilityLevel.RESTRICTED, path=path)
    if inherited:
        return INHERITED
    return PRIVATE


def parse_visibility_level(value: str) -> VisibilityLevel:
    """Parse a configured threshold such as `public` or `restricted`."""
    try:
        return VisibilityLevel[value.strip().upper()]
    except KeyError:
        choices = ", ".join(level.name.lower() for level in VisibilityLevel)
        msg = f"Unknown visibility level {value!r} (expected one of: {choices})"
        raise ValueError(msg) from None
