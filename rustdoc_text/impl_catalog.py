"""Index of impl blocks by the container items they relate to."""

from typing import Any

from rustdoc_text.crate_index import CrateIndex, as_id
from rustdoc_text.item_kind import item_kind


def raw_type_id(raw: Any) -> str | None:
    """Return the identifier a raw type names, looking through references."""
    while isinstance(raw, dict):
        if "resolved_path" in raw:
            return as_id((raw["resolved_path"] or {}).get("id"))
        if "borrowed_ref" in raw:
            raw = (raw["borrowed_ref"] or {}).get("type")
        elif "raw_pointer" in raw:
            raw = (raw["raw_pointer"] or {}).get("type")
        else:
            return None
    return None


def raw_trait_arg_ids(raw_trait: Any) -> list[str]:
    """Return identifiers used as type arguments of a raw trait reference."""
    if not isinstance(raw_trait, dict):
        return []
    args = raw_trait.get("args") or {}
    ab = args.get("angle_bracketed") if isinstance(args, dict) else None
    ids = []
    for arg in (ab or {}).get("args") or []:
        if isinstance(arg, dict) and "type" in arg:
            arg_id = raw_type_id(arg["type"])
            if arg_id and arg_id not in ids:
                ids.append(arg_id)
    return ids


class ImplCatalog:
    """Maps container identifiers to the impls that mention them.

    An impl relates to its implementing type and, for trait impls, to every
    type passed as a generic argument of the trait reference.
    """

    def __init__(self, index: CrateIndex) -> None:
        """Scan the index once, in document order."""
        self.index = index
        self.by_for_type: dict[str, list[str]] = {}
        self.by_trait_arg: dict[str, list[str]] = {}
        for impl_id, raw in index.iter_items("impl"):
            _, data = item_kind(raw)
            for_id = raw_type_id(data.get("for"))
            if for_id:
                self.by_for_type.setdefault(for_id, []).append(impl_id)
            for arg_id in raw_trait_arg_ids(data.get("trait")):
                if arg_id != for_id:
                    self.by_trait_arg.setdefault(arg_id, []).append(impl_id)

    def impls_for(
        self,
        container_id: str,
        declared: list[Any] | None = None,
        *,
        include_trait_args: bool = True,
    ) -> list[str]:
        """Return impl ids for a container: declared first, then discovered."""
        ordered: list[str] = []
        sources = [
            [as_id(i) for i in declared or []],
            self.by_for_type.get(container_id, []),
        ]
        if include_trait_args:
            sources.append(self.by_trait_arg.get(container_id, []))
        for source in sources:
            for impl_id in source:
                if impl_id is not None and impl_id not in ordered:
                    ordered.append(impl_id)
        return ordered

    def is_claimed(self, impl_id: str, *, include_trait_args: bool = True) -> bool:
        """True when a local container will render this impl."""
        raw = self.index.get(impl_id)
        if raw is None:
            return False
        _, data = item_kind(raw)
        candidates = [raw_type_id(data.get("for"))]
        if include_trait_args:
            candidates.extend(raw_trait_arg_ids(data.get("trait")))
        return any(c and self.index.is_local_container(c) for c in candidates)
