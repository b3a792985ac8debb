"""Read-only index over one rustdoc JSON document."""

import logging
from typing import Any

from rustdoc_text.item_kind import is_container_kind, item_kind

logger = logging.getLogger(__name__)

LOCAL_CRATE_ID = 0


def as_id(v: object) -> str | None:
    """Normalize an identifier (int or string depending on format version)."""
    if v is None or isinstance(v, bool):
        return None
    return str(v)


class CrateIndex:
    """Maps identifiers to raw items, path summaries and defining crates."""

    def __init__(self, doc: dict[str, Any]) -> None:
        """Wrap a parsed rustdoc JSON document."""
        self.items: dict[str, dict[str, Any]] = {
            str(k): v for k, v in (doc.get("index") or {}).items()
        }
        self.paths: dict[str, dict[str, Any]] = {
            str(k): v for k, v in (doc.get("paths") or {}).items()
        }
        self.external_crates: dict[str, dict[str, Any]] = {
            str(k): v for k, v in (doc.get("external_crates") or {}).items()
        }
        self.root_id = as_id(doc.get("root"))
        self.crate_version: str | None = doc.get("crate_version")
        self.format_version: int | None = doc.get("format_version")
        self.includes_private = bool(doc.get("includes_private", False))

    def get(self, item_id: object) -> dict[str, Any] | None:
        """Return the raw item for an identifier, or None when absent."""
        key = as_id(item_id)
        if key is None:
            return None
        return self.items.get(key)

    def summary_path(self, item_id: object) -> str | None:
        """Return the fully qualified `a::b::C` path recorded for an identifier."""
        summary = self.paths.get(as_id(item_id) or "")
        if not summary:
            return None
        segments = summary.get("path") or []
        return "::".join(str(s) for s in segments) or None

    def crate_id_of(self, item_id: object) -> int | None:
        """Return the id of the crate defining an identifier."""
        raw = self.get(item_id)
        if raw is not None and raw.get("crate_id") is not None:
            return int(raw["crate_id"])
        summary = self.paths.get(as_id(item_id) or "")
        if summary and summary.get("crate_id") is not None:
            return int(summary["crate_id"])
        return None

    def is_local(self, item_id: object) -> bool:
        return self.crate_id_of(item_id) == LOCAL_CRATE_ID

    def crate_name_of(self, item_id: object) -> str | None:
        """Return the name of the crate defining an identifier."""
        crate_id = self.crate_id_of(item_id)
        if crate_id is None:
            return None
        if crate_id == LOCAL_CRATE_ID:
            root = self.get(self.root_id)
            return root.get("name") if root else None
        ext = self.external_crates.get(str(crate_id))
        return ext.get("name") if ext else None

    def is_known(self, item_id: object) -> bool:
        """True when the index carries either the item or its path summary."""
        key = as_id(item_id)
        return key is not None and (key in self.items or key in self.paths)

    def is_local_container(self, item_id: object) -> bool:
        """True for structs, enums and unions defined in the documented crate."""
        raw = self.get(item_id)
        if raw is None or not self.is_local(item_id):
            return False
        return is_container_kind(item_kind(raw)[0])

    def iter_items(self, kind: str) -> list[tuple[str, dict[str, Any]]]:
        """Return (id, raw) pairs of one kind, in document order."""
        return [
            (item_id, raw)
            for item_id, raw in self.items.items()
            if item_kind(raw)[0] == kind
        ]
