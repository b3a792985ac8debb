"""Resolution of raw rustdoc type JSON into type expressions."""

import logging
from typing import Any

from rustdoc_text.crate_index import CrateIndex, as_id
from rustdoc_text.type_expr import (
    NO_GENERICS,
    Array,
    AssocConstraint,
    Bound,
    ConstArg,
    DynTrait,
    ExternalType,
    FunctionPointer,
    Generic,
    GenericArg,
    GenericArgs,
    GenericParam,
    Generics,
    ImplTrait,
    Infer,
    Lifetime,
    LifetimeBound,
    PathType,
    Primitive,
    QualifiedPath,
    RawPointer,
    Reference,
    Slice,
    TraitBound,
    Tuple,
    TypeExpr,
    UseBound,
    WherePredicate,
)

logger = logging.getLogger(__name__)

UNKNOWN_PATH = "{unknown}"


def abi_name(raw: Any) -> str | None:
    """Return the ABI string for a function header, None for the Rust ABI."""
    if raw is None or raw == "Rust":
        return None
    if isinstance(raw, str):
        return raw
    if isinstance(raw, dict) and raw:
        key, value = next(iter(raw.items()))
        if key == "Other" and isinstance(value, str):
            return value.strip('"')
        return key
    return None


def const_text(raw: Any) -> str:
    """Return the source text of a raw constant (`{expr, value, ...}`)."""
    if isinstance(raw, dict):
        return str(raw.get("expr") or raw.get("value") or "_")
    if raw is None:
        return "_"
    return str(raw)


class TypeResolver:
    """Turns raw type JSON into TypeExpr trees.

    Referenced identifiers are resolved to a display path only; the referenced
    item itself is never expanded here.
    """

    def __init__(self, index: CrateIndex) -> None:
        """Initialize the resolver over a read-only index."""
        self.index = index

    def resolve(self, raw: Any) -> TypeExpr:
        """Resolve one raw type."""
        if raw is None:
            return Tuple(())
        if raw == "infer":
            return Infer()
        if not isinstance(raw, dict) or not raw:
            logger.warning("Unrecognized type expression: %r", raw)
            return ExternalType(UNKNOWN_PATH)

        if "primitive" in raw:
            name = str(raw["primitive"])
            return Primitive("!" if name == "never" else name)
        if "generic" in raw:
            return Generic(str(raw["generic"]))
        if "resolved_path" in raw:
            return self.resolve_path(raw["resolved_path"])
        if "borrowed_ref" in raw:
            ref = raw["borrowed_ref"]
            return Reference(
                inner=self.resolve(ref.get("type")),
                lifetime=ref.get("lifetime"),
                mutable=bool(ref.get("is_mutable", ref.get("mutable", False))),
            )
        if "raw_pointer" in raw:
            ptr = raw["raw_pointer"]
            return RawPointer(
                inner=self.resolve(ptr.get("type")),
                mutable=bool(ptr.get("is_mutable", ptr.get("mutable", False))),
            )
        if "tuple" in raw:
            return Tuple(tuple(self.resolve(t) for t in raw["tuple"] or []))
        if "slice" in raw:
            return Slice(self.resolve(raw["slice"]))
        if "array" in raw:
            arr = raw["array"]
            return Array(self.resolve(arr.get("type")), str(arr.get("len", "_")))
        if "dyn_trait" in raw:
            return self._dyn_trait(raw["dyn_trait"])
        if "impl_trait" in raw:
            return ImplTrait(self.bounds(raw["impl_trait"]))
        if "function_pointer" in raw:
            return self._function_pointer(raw["function_pointer"])
        if "qualified_path" in raw:
            qp = raw["qualified_path"]
            trait_raw = qp.get("trait")
            return QualifiedPath(
                self_type=self.resolve(qp.get("self_type")),
                name=str(qp.get("name") or ""),
                trait=self.resolve_path(trait_raw) if trait_raw else None,
                args=self.generic_args(qp.get("args")),
            )
        if "pat" in raw:
            return self.resolve((raw["pat"] or {}).get("type"))
        if "infer" in raw:
            return Infer()

        logger.warning("Unrecognized type expression kind: %s", next(iter(raw)))
        return ExternalType(UNKNOWN_PATH)

    def resolve_path(self, raw: dict[str, Any]) -> PathType | ExternalType:
        """Resolve a path reference to a known item or an opaque external leaf."""
        item_id = as_id(raw.get("id"))
        display = str(raw.get("path") or raw.get("name") or "")
        args = self.generic_args(raw.get("args"))
        if not self.index.is_known(item_id):
            logger.debug("Unresolved type reference %s (%s)", item_id, display)
            return ExternalType(display or UNKNOWN_PATH, args)
        if not display:
            display = self.index.summary_path(item_id) or UNKNOWN_PATH
        return PathType(display, item_id, args)

    def generic_args(self, raw: Any) -> GenericArgs | None:
        """Resolve angle-bracketed or parenthesized generic arguments."""
        if not isinstance(raw, dict):
            return None
        if "angle_bracketed" in raw:
            ab = raw["angle_bracketed"] or {}
            args = tuple(self._generic_arg(a) for a in ab.get("args") or [])
            constraints = tuple(
                self._constraint(c)
                for c in (ab.get("constraints") or ab.get("bindings") or [])
            )
            if not args and not constraints:
                return None
            return GenericArgs(args=args, constraints=constraints)
        if "parenthesized" in raw:
            p = raw["parenthesized"] or {}
            output = p.get("output")
            return GenericArgs(
                parenthesized=True,
                inputs=tuple(self.resolve(t) for t in p.get("inputs") or []),
                output=self.resolve(output) if output is not None else None,
            )
        return None

    def _generic_arg(self, raw: Any) -> GenericArg:
        if raw == "infer":
            return Infer()
        if isinstance(raw, dict):
            if "lifetime" in raw:
                return Lifetime(str(raw["lifetime"]))
            if "type" in raw:
                return self.resolve(raw["type"])
            if "const" in raw:
                return ConstArg(const_text(raw["const"]))
        logger.warning("Unrecognized generic argument: %r", raw)
        return ExternalType(UNKNOWN_PATH)

    def _constraint(self, raw: dict[str, Any]) -> AssocConstraint:
        name = str(raw.get("name") or "")
        args = self.generic_args(raw.get("args"))
        binding = raw.get("binding") or {}
        if "equality" in binding:
            return AssocConstraint(name, args, equality=self._term(binding["equality"]))
        if "constraint" in binding:
            return AssocConstraint(name, args, bounds=self.bounds(binding["constraint"]))
        return AssocConstraint(name, args)

    def _term(self, raw: Any) -> TypeExpr | ConstArg:
        if isinstance(raw, dict):
            if "type" in raw:
                return self.resolve(raw["type"])
            if "constant" in raw:
                return ConstArg(const_text(raw["constant"]))
        # Older formats put the type directly under `equality`.
        return self.resolve(raw)

    def bounds(self, raw: Any) -> tuple[Bound, ...]:
        """Resolve a list of generic bounds, preserving source order."""
        out: list[Bound] = []
        for b in raw or []:
            if not isinstance(b, dict):
                continue
            if "trait_bound" in b:
                tb = b["trait_bound"]
                out.append(
                    TraitBound(
                        trait=self.resolve_path(tb.get("trait") or {}),
                        generic_params=self.generic_params(tb.get("generic_params")),
                        modifier=str(tb.get("modifier") or "none"),
                    )
                )
            elif "outlives" in b:
                out.append(LifetimeBound(str(b["outlives"])))
            elif "use" in b:
                out.append(UseBound(tuple(_use_arg(a) for a in b["use"] or [])))
        return tuple(out)

    def generic_params(self, raw: Any) -> tuple[GenericParam, ...]:
        """Resolve generic parameter definitions."""
        params = []
        for p in raw or []:
            name = str(p.get("name") or "")
            kind = p.get("kind") or {}
            if "lifetime" in kind:
                outlives = (kind["lifetime"] or {}).get("outlives") or []
                params.append(
                    GenericParam(
                        name,
                        "lifetime",
                        bounds=tuple(LifetimeBound(str(o)) for o in outlives),
                    )
                )
            elif "type" in kind:
                tk = kind["type"] or {}
                default = tk.get("default")
                params.append(
                    GenericParam(
                        name,
                        "type",
                        bounds=self.bounds(tk.get("bounds")),
                        default=self.resolve(default) if default is not None else None,
                        is_synthetic=bool(tk.get("is_synthetic", tk.get("synthetic"))),
                    )
                )
            elif "const" in kind:
                ck = kind["const"] or {}
                params.append(
                    GenericParam(
                        name,
                        "const",
                        const_type=self.resolve(ck.get("type")),
                        default=ck.get("default"),
                    )
                )
        return tuple(params)

    def generics(self, raw: Any) -> Generics:
        """Resolve an item's generic parameters and where clause."""
        if not isinstance(raw, dict):
            return NO_GENERICS
        params = self.generic_params(raw.get("params"))
        predicates = tuple(
            p
            for p in (self._where_predicate(w) for w in raw.get("where_predicates") or [])
            if p is not None
        )
        if not params and not predicates:
            return NO_GENERICS
        return Generics(params, predicates)

    def _where_predicate(self, raw: dict[str, Any]) -> WherePredicate | None:
        if "bound_predicate" in raw:
            bp = raw["bound_predicate"]
            return WherePredicate(
                "bound",
                self.resolve(bp.get("type")),
                bounds=self.bounds(bp.get("bounds")),
                generic_params=self.generic_params(bp.get("generic_params")),
            )
        for key in ("lifetime_predicate", "region_predicate"):
            if key in raw:
                lp = raw[key]
                outlives = lp.get("outlives") or lp.get("bounds") or []
                bounds = tuple(
                    LifetimeBound(str(o if isinstance(o, str) else o.get("outlives")))
                    for o in outlives
                )
                return WherePredicate("lifetime", Lifetime(str(lp.get("lifetime"))), bounds)
        if "eq_predicate" in raw:
            ep = raw["eq_predicate"]
            return WherePredicate("eq", self.resolve(ep.get("lhs")), rhs=self._term(ep.get("rhs")))
        logger.warning("Unrecognized where predicate: %r", raw)
        return None

    def inputs(self, raw_sig: dict[str, Any]) -> list[tuple[str, TypeExpr]]:
        """Resolve `(name, type)` pairs of a function signature."""
        out = []
        for pair in raw_sig.get("inputs") or []:
            if isinstance(pair, (list, tuple)) and len(pair) == 2:
                out.append((str(pair[0]), self.resolve(pair[1])))
        return out

    def output(self, raw_sig: dict[str, Any]) -> TypeExpr | None:
        """Resolve the declared return type, None when nothing was declared."""
        raw = raw_sig.get("output")
        if raw is None or raw == "default_return":
            return None
        if isinstance(raw, dict) and "return" in raw:
            raw = raw["return"]
        return self.resolve(raw)

    def _dyn_trait(self, raw: dict[str, Any]) -> DynTrait:
        traits = []
        for poly in raw.get("traits") or []:
            traits.append(
                TraitBound(
                    trait=self.resolve_path(poly.get("trait") or {}),
                    generic_params=self.generic_params(poly.get("generic_params")),
                )
            )
        return DynTrait(tuple(traits), raw.get("lifetime"))

    def _function_pointer(self, raw: dict[str, Any]) -> FunctionPointer:
        sig = raw.get("sig") or raw.get("decl") or {}
        header = raw.get("header") or {}
        if isinstance(header, list):
            is_unsafe = "unsafe" in header
            abi = abi_name(raw.get("abi"))
        else:
            is_unsafe = bool(header.get("is_unsafe", header.get("unsafe_")))
            abi = abi_name(header.get("abi"))
        return FunctionPointer(
            inputs=tuple(self.inputs(sig)),
            output=self.output(sig),
            generic_params=self.generic_params(raw.get("generic_params")),
            is_unsafe=is_unsafe,
            abi=abi,
            is_c_variadic=bool(sig.get("is_c_variadic", sig.get("c_variadic"))),
        )


def _use_arg(raw: Any) -> str:
    if isinstance(raw, dict) and raw:
        return str(next(iter(raw.values())))
    return str(raw)
