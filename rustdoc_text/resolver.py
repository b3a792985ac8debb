"""Resolution of the raw identifier graph into an owned item tree."""

import logging
from typing import Any

from rustdoc_text.attributes import normalize_attrs
from rustdoc_text.crate_index import CrateIndex, as_id
from rustdoc_text.errors import MalformedInputError
from rustdoc_text.impl_catalog import ImplCatalog
from rustdoc_text.impl_policy import drop_reason, impl_key
from rustdoc_text.item_kind import item_kind
from rustdoc_text.item_model import (
    PUBLIC,
    AssocConst,
    AssocType,
    Constant,
    Deprecation,
    Enum,
    Field,
    Function,
    FunctionHeader,
    ImplRecord,
    Item,
    Macro,
    Module,
    ReExport,
    ResolvedCrate,
    Signature,
    Static,
    Struct,
    Trait,
    TypeAlias,
    Union,
    Unresolved,
    Variant,
)
from rustdoc_text.macro_signature import macro_rules_signature, proc_macro_signature
from rustdoc_text.options import ResolverOptions
from rustdoc_text.resolve_type import TypeResolver, abi_name, const_text
from rustdoc_text.resolve_visibility import resolve_visibility
from rustdoc_text.type_expr import NO_GENERICS

logger = logging.getLogger(__name__)

# Kinds that have no text rendering of their own.
SKIPPED_KINDS = {"primitive", "extern_crate", "extern_type", "trait_alias"}


def parse_deprecation(raw: Any) -> Deprecation | None:
    """Convert a raw `{since, note}` deprecation record."""
    if not isinstance(raw, dict):
        return None
    since = raw.get("since")
    note = raw.get("note")
    return Deprecation(
        since=str(since) if since else None,
        note=str(note) if note else None,
    )


class Resolver:
    """Walks a CrateIndex depth-first and builds a ResolvedCrate.

    One Resolver serves one resolution pass. Its impl cache and module cycle
    guard are discarded with it.
    """

    def __init__(self, index: CrateIndex, options: ResolverOptions | None = None) -> None:
        """Initialize the resolver over a read-only index."""
        self.index = index
        self.options = options or ResolverOptions()
        self.types = TypeResolver(index)
        self.catalog = ImplCatalog(index)
        self._impl_cache: dict[str, ImplRecord | None] = {}
        self._active_modules: set[str] = set()
        self._builders = {
            "module": self._module,
            "struct": self._struct,
            "enum": self._enum,
            "union": self._union,
            "trait": self._trait,
            "function": self._function,
            "type_alias": self._type_alias,
            "constant": self._constant,
            "static": self._static,
            "macro": self._macro,
            "proc_macro": self._proc_macro,
            "use": self._reexport,
            "impl": self._module_impl,
            "assoc_type": self._assoc_type,
            "assoc_const": self._assoc_const,
        }

    def resolve_crate(
        self,
        root_id: object = None,
        crate_name: str | None = None,
        crate_version: str | None = None,
    ) -> ResolvedCrate:
        """Resolve the crate rooted at `root_id` (the index root by default)."""
        root_key = as_id(root_id) if root_id is not None else self.index.root_id
        raw = self.index.get(root_key)
        if raw is None:
            msg = f"Root item {root_key!r} is missing from the index"
            raise MalformedInputError(msg)
        kind, data = item_kind(raw)
        if kind != "module":
            msg = f"Root item {root_key!r} is a {kind}, not a module"
            raise MalformedInputError(msg)

        root = self._module(str(root_key), raw, data)
        if root is None:
            msg = f"Root item {root_key!r} could not be resolved"
            raise MalformedInputError(msg)
        logger.info(
            "Resolved crate %s: %d top-level items, %d impls",
            root.name,
            len(root.children),
            sum(1 for r in self._impl_cache.values() if r is not None),
        )
        name = crate_name or root.name or self.index.crate_name_of(root_key)
        return ResolvedCrate(
            name=name or "unknown",
            version=crate_version or self.index.crate_version,
            docs=root.docs,
            root=root,
        )

    def resolve_item(self, item_id: object, *, inherited: bool = False) -> Item | None:
        """Resolve one child identifier.

        Returns an Unresolved marker when the identifier is absent and None when
        the item has no text rendering.
        """
        key = as_id(item_id)
        raw = self.index.get(key)
        if raw is None:
            display = self.index.summary_path(key) or f"<missing item {key}>"
            logger.debug("Child %s missing from the index (%s)", key, display)
            return Unresolved(
                id=str(key),
                name=display.rsplit("::", 1)[-1],
                visibility=PUBLIC,
                display=display,
            )
        kind, data = item_kind(raw)
        if kind in SKIPPED_KINDS:
            logger.debug("Skipping %s %s (%s)", kind, key, raw.get("name"))
            return None
        builder = self._builders.get(kind)
        if builder is None:
            logger.warning("Unsupported item kind %s for %s", kind, key)
            return None
        return builder(str(key), raw, data, inherited)

    def _children(self, ids: Any, *, inherited: bool = False) -> list[Item]:
        items = (self.resolve_item(i, inherited=inherited) for i in ids or [])
        return [it for it in items if it is not None]

    def _common(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> dict[str, Any]:
        """Fields shared by every item."""
        raw_generics = data.get("generics") if isinstance(data, dict) else None
        return {
            "id": item_id,
            "name": raw.get("name"),
            "visibility": resolve_visibility(raw.get("visibility"), inherited=inherited),
            "docs": raw.get("docs") or "",
            "deprecation": parse_deprecation(raw.get("deprecation")),
            "generics": self.types.generics(raw_generics) if raw_generics else NO_GENERICS,
            "attrs": normalize_attrs(raw.get("attrs")),
        }

    # -----------------------------
    # Modules and re-exports
    # -----------------------------

    def _module(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool = False,
    ) -> Module | None:
        if item_id in self._active_modules:
            logger.warning("Module %s re-entered through a cycle; skipping", item_id)
            return None
        self._active_modules.add(item_id)
        try:
            children = self._children(data.get("items"))
        finally:
            self._active_modules.discard(item_id)
        return Module(
            **self._common(item_id, raw, data, inherited),
            children=children,
        )

    def _reexport(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> ReExport:
        target_id = as_id(data.get("id"))
        target_path = self.index.summary_path(target_id) if target_id else None
        common = self._common(item_id, raw, data, inherited)
        common["name"] = data.get("name") or raw.get("name")
        return ReExport(
            **common,
            source=str(data.get("source") or ""),
            target_path=target_path,
            is_glob=bool(data.get("is_glob", data.get("glob", False))),
        )

    def _module_impl(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> ImplRecord | None:
        """An impl listed directly in a module renders there only when unclaimed."""
        if self.catalog.is_claimed(
            item_id, include_trait_args=self.options.associate_trait_args
        ):
            logger.debug("Impl %s renders under its container", item_id)
            return None
        return self._impl(item_id)

    # -----------------------------
    # Containers
    # -----------------------------

    def _fields(self, ids: Any, *, inherited: bool = False) -> list[Field]:
        """Resolve field ids; stripped (null) tuple fields are skipped."""
        fields = []
        for field_id in ids or []:
            if field_id is None:
                continue
            raw = self.index.get(field_id)
            if raw is None:
                logger.debug("Field %s missing from the index", field_id)
                continue
            kind, data = item_kind(raw)
            if kind != "struct_field":
                logger.warning("Expected a field for %s, found %s", field_id, kind)
                continue
            fields.append(
                Field(
                    **self._common(str(field_id), raw, None, inherited),
                    type=self.types.resolve(data),
                )
            )
        return fields

    def _container_impls(self, item_id: str, data: dict[str, Any]) -> list[ImplRecord]:
        """Associate, filter and deduplicate the impls of one container."""
        impl_ids = self.catalog.impls_for(
            item_id,
            data.get("impls"),
            include_trait_args=self.options.associate_trait_args,
        )
        impls: list[ImplRecord] = []
        seen: set[tuple[object, ...]] = set()
        for impl_id in impl_ids:
            record = self._impl(impl_id)
            if record is None:
                continue
            if not record.is_inherent:
                key = impl_key(record)
                if key in seen:
                    logger.debug("Duplicate impl %s under %s", impl_id, item_id)
                    continue
                seen.add(key)
            impls.append(record)
        return impls

    def _struct(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> Struct:
        kind_raw = data.get("kind")
        if isinstance(kind_raw, dict) and "tuple" in kind_raw:
            kind, field_ids = "tuple", kind_raw["tuple"]
        elif isinstance(kind_raw, dict) and "plain" in kind_raw:
            kind, field_ids = "plain", (kind_raw["plain"] or {}).get("fields")
        elif kind_raw == "unit":
            kind, field_ids = "unit", []
        else:
            kind = str(data.get("struct_type") or "plain")
            field_ids = data.get("fields")
        return Struct(
            **self._common(item_id, raw, data, inherited),
            kind=kind,
            fields=self._fields(field_ids),
            impls=self._container_impls(item_id, data),
        )

    def _union(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> Union:
        return Union(
            **self._common(item_id, raw, data, inherited),
            fields=self._fields(data.get("fields")),
            impls=self._container_impls(item_id, data),
        )

    def _variant(self, variant_id: Any) -> Variant | None:
        raw = self.index.get(variant_id)
        if raw is None:
            logger.debug("Variant %s missing from the index", variant_id)
            return None
        _, data = item_kind(raw)
        if not isinstance(data, dict):
            data = {"kind": data}
        kind_raw = data.get("kind") or data.get("variant_kind") or "plain"
        kind, fields = "plain", []
        if isinstance(kind_raw, dict) and "tuple" in kind_raw:
            kind = "tuple"
            fields = self._fields(kind_raw["tuple"], inherited=True)
        elif isinstance(kind_raw, dict) and "struct" in kind_raw:
            kind = "struct"
            fields = self._fields((kind_raw["struct"] or {}).get("fields"), inherited=True)
        discriminant = data.get("discriminant")
        return Variant(
            **self._common(str(variant_id), raw, data, True),
            kind=kind,
            fields=fields,
            discriminant=const_text(discriminant) if discriminant else None,
        )

    def _enum(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> Enum:
        variants = [v for v in map(self._variant, data.get("variants") or []) if v]
        return Enum(
            **self._common(item_id, raw, data, inherited),
            variants=variants,
            impls=self._container_impls(item_id, data),
        )

    def _trait(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> Trait:
        return Trait(
            **self._common(item_id, raw, data, inherited),
            items=self._children(data.get("items"), inherited=True),
            bounds=list(self.types.bounds(data.get("bounds"))),
            is_auto=bool(data.get("is_auto", False)),
            is_unsafe=bool(data.get("is_unsafe", False)),
        )

    # -----------------------------
    # Impls
    # -----------------------------

    def _impl(self, impl_id: str) -> ImplRecord | None:
        """Build an impl once per pass; None when missing or filtered out."""
        if impl_id in self._impl_cache:
            return self._impl_cache[impl_id]
        record = None
        raw = self.index.get(impl_id)
        if raw is None:
            logger.debug("Impl %s missing from the index", impl_id)
        else:
            kind, data = item_kind(raw)
            if kind != "impl":
                logger.warning("Expected an impl for %s, found %s", impl_id, kind)
            else:
                record = self._build_impl(impl_id, raw, data)
                reason = drop_reason(record, self.options)
                if reason:
                    logger.debug("Dropping impl %s: %s", impl_id, reason)
                    record = None
        self._impl_cache[impl_id] = record
        return record

    def _build_impl(self, impl_id: str, raw: dict[str, Any], data: Any) -> ImplRecord:
        trait_raw = data.get("trait")
        blanket_raw = data.get("blanket_impl")
        common = self._common(impl_id, raw, data, True)
        common["name"] = None
        return ImplRecord(
            **common,
            for_type=self.types.resolve(data.get("for")),
            trait=self.types.resolve_path(trait_raw) if trait_raw else None,
            items=self._children(data.get("items"), inherited=trait_raw is not None),
            is_synthetic=bool(data.get("is_synthetic", data.get("synthetic", False))),
            is_negative=bool(data.get("is_negative", data.get("negative", False))),
            is_unsafe=bool(data.get("is_unsafe", False)),
            blanket=self.types.resolve(blanket_raw) if blanket_raw else None,
        )

    # -----------------------------
    # Leaf items
    # -----------------------------

    def _function(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> Function:
        sig = data.get("sig") or data.get("decl") or {}
        header_raw = data.get("header") or {}
        if isinstance(header_raw, list):
            header = FunctionHeader(
                is_const="const" in header_raw,
                is_async="async" in header_raw,
                is_unsafe="unsafe" in header_raw,
                abi=abi_name(data.get("abi")),
            )
        else:
            header = FunctionHeader(
                is_const=bool(header_raw.get("is_const", header_raw.get("const_"))),
                is_async=bool(header_raw.get("is_async", header_raw.get("async_"))),
                is_unsafe=bool(header_raw.get("is_unsafe", header_raw.get("unsafe_"))),
                abi=abi_name(header_raw.get("abi")),
            )
        return Function(
            **self._common(item_id, raw, data, inherited),
            signature=Signature(
                inputs=self.types.inputs(sig),
                output=self.types.output(sig),
                is_c_variadic=bool(sig.get("is_c_variadic", sig.get("c_variadic"))),
            ),
            header=header,
        )

    def _type_alias(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> TypeAlias:
        return TypeAlias(
            **self._common(item_id, raw, data, inherited),
            type=self.types.resolve(data.get("type")),
        )

    def _constant(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> Constant:
        if "const" in data:
            expr = const_text(data["const"])
        else:
            expr = data.get("expr")
        return Constant(
            **self._common(item_id, raw, data, inherited),
            type=self.types.resolve(data.get("type")),
            expr=expr,
        )

    def _static(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> Static:
        return Static(
            **self._common(item_id, raw, data, inherited),
            type=self.types.resolve(data.get("type")),
            is_mutable=bool(data.get("is_mutable", data.get("mutable", False))),
            is_unsafe=bool(data.get("is_unsafe", False)),
            expr=data.get("expr"),
        )

    def _macro(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> Macro:
        name = str(raw.get("name") or "")
        source = data if isinstance(data, str) else ""
        return Macro(
            **self._common(item_id, raw, None, inherited),
            signature=macro_rules_signature(name, source),
            kind="decl",
        )

    def _proc_macro(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> Macro:
        kind, signature = proc_macro_signature(str(raw.get("name") or ""), data)
        return Macro(
            **self._common(item_id, raw, None, inherited),
            signature=signature,
            kind=kind,
        )

    def _assoc_type(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> AssocType:
        value = data.get("type", data.get("default"))
        return AssocType(
            **self._common(item_id, raw, data, inherited),
            bounds=list(self.types.bounds(data.get("bounds"))),
            type=self.types.resolve(value) if value is not None else None,
        )

    def _assoc_const(
        self,
        item_id: str,
        raw: dict[str, Any],
        data: Any,
        inherited: bool,
    ) -> AssocConst:
        value = data.get("value", data.get("default"))
        return AssocConst(
            **self._common(item_id, raw, data, inherited),
            type=self.types.resolve(data.get("type")),
            value=str(value) if value is not None else None,
        )
