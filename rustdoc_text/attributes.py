"""Normalization of raw item attributes into `#[...]` text."""

import re
from typing import Any

ATTR_NAME_RE = re.compile(r"^#!?\[\s*([A-Za-z_][\w:]*)")

# Attributes that describe generated code or documentation, never the API.
DROPPED_ATTRS = {"derive", "doc", "automatically_derived", "allow", "warn", "deny"}


def attr_name(text: str) -> str:
    """Return the attribute path of `#[name(...)]`, or "" when unparsable."""
    m = ATTR_NAME_RE.match(text.strip())
    return m.group(1) if m else ""


def _repr_text(raw: dict[str, Any]) -> str:
    parts = []
    kind = str(raw.get("kind") or "rust")
    if kind != "rust":
        parts.append("C" if kind == "c" else kind)
    if raw.get("int"):
        parts.append(str(raw["int"]))
    if raw.get("packed"):
        parts.append(f"packed({raw['packed']})" if raw["packed"] != 1 else "packed")
    if raw.get("align"):
        parts.append(f"align({raw['align']})")
    return f"#[repr({', '.join(parts)})]" if parts else "#[repr(Rust)]"


def attr_text(raw: Any) -> str | None:
    """Render one raw attribute (legacy string or structured form)."""
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        return text if text.startswith("#") else f"#[{text}]"
    if not isinstance(raw, dict) or not raw:
        return None
    key, value = next(iter(raw.items()))
    if key == "other":
        return attr_text(str(value))
    if key == "must_use":
        reason = (value or {}).get("reason") if isinstance(value, dict) else None
        return f'#[must_use = "{reason}"]' if reason else "#[must_use]"
    if key == "repr" and isinstance(value, dict):
        return _repr_text(value)
    if key == "target_feature" and isinstance(value, dict):
        enabled = ",".join(value.get("enable") or [])
        return f'#[target_feature(enable = "{enabled}")]'
    if isinstance(value, str):
        return f'#[{key} = "{value}"]'
    return f"#[{key}]"


def normalize_attrs(raw_attrs: Any) -> list[str]:
    """Return the attribute texts worth showing, in source order."""
    out = []
    for raw in raw_attrs or []:
        text = attr_text(raw)
        if text is None or attr_name(text) in DROPPED_ATTRS:
            continue
        out.append(text)
    return out
