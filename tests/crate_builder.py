"""Helpers that assemble raw rustdoc JSON documents for tests."""

from typing import Any

STD_CRATE_ID = 1


def prim(name: str) -> dict[str, Any]:
    return {"primitive": name}


def generic(name: str) -> dict[str, Any]:
    return {"generic": name}


def angle(*types: dict[str, Any], constraints: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Angle-bracketed generic args holding the given types."""
    return {
        "angle_bracketed": {
            "args": [{"type": t} for t in types],
            "constraints": constraints or [],
        }
    }


def path_type(item_id: int | None, path: str, args: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"resolved_path": {"id": item_id, "path": path, "args": args}}


def ref(t: dict[str, Any], *, mutable: bool = False, lifetime: str | None = None) -> dict[str, Any]:
    return {"borrowed_ref": {"lifetime": lifetime, "is_mutable": mutable, "type": t}}


def trait_bound(item_id: int | None, path: str, args: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "trait_bound": {
            "trait": {"id": item_id, "path": path, "args": args},
            "generic_params": [],
            "modifier": "none",
        }
    }


def type_param(name: str, bounds: list[dict[str, Any]] | None = None, *, synthetic: bool = False) -> dict[str, Any]:
    return {
        "name": name,
        "kind": {"type": {"bounds": bounds or [], "default": None, "is_synthetic": synthetic}},
    }


def lifetime_param(name: str, outlives: list[str] | None = None) -> dict[str, Any]:
    return {"name": name, "kind": {"lifetime": {"outlives": outlives or []}}}


def generics(
    params: list[dict[str, Any]] | None = None,
    where: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {"params": params or [], "where_predicates": where or []}


def bound_predicate(t: dict[str, Any], bounds: list[dict[str, Any]]) -> dict[str, Any]:
    return {"bound_predicate": {"type": t, "bounds": bounds, "generic_params": []}}


class CrateBuilder:
    """Accumulates items and produces a rustdoc JSON document.

    Identifiers are integers, as in current rustdoc output; the root module
    always has id 0.
    """

    def __init__(self, name: str = "demo", version: str | None = "0.1.0") -> None:
        self.name = name
        self.version = version
        self.index: dict[str, dict[str, Any]] = {}
        self.paths: dict[str, dict[str, Any]] = {}
        self.next_id = 1

    def add(
        self,
        kind: str,
        payload: Any,
        *,
        name: str | None = None,
        visibility: Any = "public",
        docs: str | None = None,
        deprecation: dict[str, Any] | None = None,
        attrs: list[Any] | None = None,
        path: list[str] | None = None,
    ) -> int:
        """Add a local item and return its id."""
        item_id = self.next_id
        self.next_id += 1
        self.index[str(item_id)] = {
            "id": item_id,
            "crate_id": 0,
            "name": name,
            "span": None,
            "visibility": visibility,
            "docs": docs,
            "links": {},
            "attrs": attrs or [],
            "deprecation": deprecation,
            "inner": {kind: payload},
        }
        if path is not None:
            self.paths[str(item_id)] = {"crate_id": 0, "path": path, "kind": kind}
        return item_id

    def external(self, path: list[str], kind: str = "trait") -> int:
        """Register an item from another crate: a path summary without a body."""
        item_id = self.next_id
        self.next_id += 1
        self.paths[str(item_id)] = {"crate_id": STD_CRATE_ID, "path": path, "kind": kind}
        return item_id

    def field(self, name: str, t: dict[str, Any], *, visibility: Any = "public", docs: str | None = None) -> int:
        return self.add("struct_field", t, name=name, visibility=visibility, docs=docs)

    def struct(
        self,
        name: str,
        fields: list[int] | None = None,
        *,
        impls: list[int] | None = None,
        gen: dict[str, Any] | None = None,
        kind: str = "plain",
        **kwargs: Any,
    ) -> int:
        if kind == "plain":
            struct_kind: Any = {"plain": {"fields": fields or [], "has_stripped_fields": False}}
        elif kind == "tuple":
            struct_kind = {"tuple": fields or []}
        else:
            struct_kind = "unit"
        payload = {"kind": struct_kind, "generics": gen or generics(), "impls": impls or []}
        return self.add("struct", payload, name=name, path=["demo", name], **kwargs)

    def variant(self, name: str, kind: Any = "plain", discriminant: dict[str, Any] | None = None, **kwargs: Any) -> int:
        payload = {"kind": kind, "discriminant": discriminant}
        return self.add("variant", payload, name=name, visibility="default", **kwargs)

    def enum(self, name: str, variants: list[int], *, impls: list[int] | None = None, **kwargs: Any) -> int:
        payload = {"generics": generics(), "variants": variants, "impls": impls or []}
        return self.add("enum", payload, name=name, path=["demo", name], **kwargs)

    def function(
        self,
        name: str,
        inputs: list[tuple[str, dict[str, Any]]] | None = None,
        output: dict[str, Any] | None = None,
        *,
        gen: dict[str, Any] | None = None,
        has_body: bool = True,
        header: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> int:
        payload = {
            "sig": {
                "inputs": [[n, t] for n, t in inputs or []],
                "output": output,
                "is_c_variadic": False,
            },
            "generics": gen or generics(),
            "header": header or {"is_const": False, "is_unsafe": False, "is_async": False, "abi": "Rust"},
            "has_body": has_body,
        }
        return self.add("function", payload, name=name, **kwargs)

    def impl(
        self,
        for_type: dict[str, Any],
        items: list[int] | None = None,
        *,
        trait: dict[str, Any] | None = None,
        gen: dict[str, Any] | None = None,
        synthetic: bool = False,
        blanket: dict[str, Any] | None = None,
    ) -> int:
        payload = {
            "is_unsafe": False,
            "generics": gen or generics(),
            "provided_trait_methods": [],
            "trait": trait,
            "for": for_type,
            "items": items or [],
            "is_negative": False,
            "is_synthetic": synthetic,
            "blanket_impl": blanket,
        }
        return self.add("impl", payload, visibility="default")

    def trait(self, name: str, items: list[int] | None = None, *, gen: dict[str, Any] | None = None, **kwargs: Any) -> int:
        payload = {
            "is_auto": False,
            "is_unsafe": False,
            "is_dyn_compatible": True,
            "items": items or [],
            "generics": gen or generics(),
            "bounds": [],
            "implementations": [],
        }
        return self.add("trait", payload, name=name, path=["demo", name], **kwargs)

    def module(self, name: str, items: list[int], **kwargs: Any) -> int:
        payload = {"is_crate": False, "items": items, "is_stripped": False}
        return self.add("module", payload, name=name, path=["demo", name], **kwargs)

    def build(self, *top_level: int, docs: str | None = None) -> dict[str, Any]:
        """Return the document with a root module listing `top_level`."""
        index = dict(self.index)
        index["0"] = {
            "id": 0,
            "crate_id": 0,
            "name": self.name,
            "visibility": "public",
            "docs": docs,
            "links": {},
            "attrs": [],
            "deprecation": None,
            "inner": {"module": {"is_crate": True, "items": list(top_level), "is_stripped": False}},
        }
        paths = dict(self.paths)
        paths["0"] = {"crate_id": 0, "path": [self.name], "kind": "module"}
        return {
            "root": 0,
            "crate_version": self.version,
            "includes_private": False,
            "index": index,
            "paths": paths,
            "external_crates": {str(STD_CRATE_ID): {"name": "std", "html_root_url": None}},
            "format_version": 39,
        }
