"""Rendering of type expressions, generics and visibility to Rust-like text."""

import logging

from rustdoc_text.item_model import Visibility, VisibilityLevel
from rustdoc_text.normalize_std_path import normalize_std_path
from rustdoc_text.type_expr import (
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
    UseBound,
    WherePredicate,
)

logger = logging.getLogger(__name__)

PLACEHOLDER = "<?>"


def lifetime_text(name: str) -> str:
    """Return a lifetime with exactly one leading apostrophe."""
    return name if name.startswith("'") else f"'{name}"


def is_unit(t: object) -> bool:
    return t is None or (isinstance(t, Tuple) and t.is_unit())


def render_visibility(vis: Visibility) -> str:
    """Return the qualifier prefix (`pub `, `pub(crate) `, ...) for an item."""
    if vis.inherited or vis.level == VisibilityLevel.PRIVATE:
        return ""
    if vis.level == VisibilityLevel.PUBLIC:
        return "pub "
    path = (vis.path or "crate").lstrip(":")
    if path in ("crate", "super", "self"):
        return f"pub({path}) "
    return f"pub(in {path}) "


class TypeRenderer:
    """Formats TypeExpr trees. Stateless; one instance may be shared."""

    def render(self, t: object) -> str:
        """Render one type expression."""
        if isinstance(t, Primitive):
            return t.name
        if isinstance(t, Generic):
            return t.name
        if isinstance(t, (PathType, ExternalType)):
            return normalize_std_path(t.path) + self.args(t.args)
        if isinstance(t, Reference):
            lifetime = f"{lifetime_text(t.lifetime)} " if t.lifetime else ""
            mutable = "mut " if t.mutable else ""
            return f"&{lifetime}{mutable}{self.render(t.inner)}"
        if isinstance(t, RawPointer):
            return f"*{'mut' if t.mutable else 'const'} {self.render(t.inner)}"
        if isinstance(t, Tuple):
            if len(t.elements) == 1:
                return f"({self.render(t.elements[0])},)"
            return f"({', '.join(self.render(e) for e in t.elements)})"
        if isinstance(t, Slice):
            return f"[{self.render(t.inner)}]"
        if isinstance(t, Array):
            return f"[{self.render(t.inner)}; {t.length}]"
        if isinstance(t, DynTrait):
            parts = [self.bound(b) for b in t.traits]
            if t.lifetime:
                parts.append(lifetime_text(t.lifetime))
            return "dyn " + " + ".join(parts)
        if isinstance(t, ImplTrait):
            return "impl " + self.bounds(t.bounds)
        if isinstance(t, FunctionPointer):
            return self._function_pointer(t)
        if isinstance(t, QualifiedPath):
            return self._qualified_path(t)
        if isinstance(t, Infer):
            return "_"
        logger.warning("Cannot render type expression %r", t)
        return PLACEHOLDER

    def generic_arg(self, a: GenericArg) -> str:
        if isinstance(a, Lifetime):
            return lifetime_text(a.name)
        if isinstance(a, ConstArg):
            return a.expr
        return self.render(a)

    def args(self, args: GenericArgs | None) -> str:
        """Render `<A, B, Item = C>` or the `(A, B) -> C` sugar."""
        if args is None or args.is_empty():
            return ""
        if args.parenthesized:
            out = f"({', '.join(self.render(t) for t in args.inputs)})"
            if not is_unit(args.output):
                out += f" -> {self.render(args.output)}"
            return out
        parts = [self.generic_arg(a) for a in args.args]
        parts.extend(self._constraint(c) for c in args.constraints)
        return f"<{', '.join(parts)}>"

    def _constraint(self, c: AssocConstraint) -> str:
        head = c.name + self.args(c.args)
        if c.equality is not None:
            return f"{head} = {self.generic_arg(c.equality)}"
        if c.bounds:
            return f"{head}: {self.bounds(c.bounds)}"
        return head

    def bound(self, b: Bound) -> str:
        if isinstance(b, TraitBound):
            prefix = self.binder(b.generic_params)
            if b.modifier == "maybe":
                prefix += "?"
            elif b.modifier == "maybe_const":
                prefix += "~const "
            return prefix + self.render(b.trait)
        if isinstance(b, LifetimeBound):
            return lifetime_text(b.lifetime)
        if isinstance(b, UseBound):
            return f"use<{', '.join(b.args)}>"
        logger.warning("Cannot render bound %r", b)
        return PLACEHOLDER

    def bounds(self, bounds: tuple[Bound, ...] | list[Bound]) -> str:
        """Join bounds with ` + ` in source order."""
        return " + ".join(self.bound(b) for b in bounds)

    def binder(self, params: tuple[GenericParam, ...]) -> str:
        """Render a higher-ranked `for<'a> ` binder, or nothing."""
        if not params:
            return ""
        return f"for<{', '.join(self.param(p) for p in params)}> "

    def param(self, p: GenericParam) -> str:
        """Render one generic parameter declaration."""
        if p.kind == "lifetime":
            out = lifetime_text(p.name)
            if p.bounds:
                out += f": {self.bounds(p.bounds)}"
            return out
        if p.kind == "const":
            out = f"const {p.name}: {self.render(p.const_type)}"
            if p.default is not None:
                out += f" = {p.default}"
            return out
        out = p.name
        if p.bounds:
            out += f": {self.bounds(p.bounds)}"
        if p.default is not None:
            out += f" = {self.render(p.default)}"
        return out

    def params(self, generics: Generics) -> str:
        """Render `<...>` after an item name; empty when nothing is declared."""
        visible = generics.visible_params()
        if not visible:
            return ""
        return f"<{', '.join(self.param(p) for p in visible)}>"

    def where_clause(self, generics: Generics) -> str:
        """Render a trailing ` where ...` clause; empty when there is none."""
        if not generics.where_predicates:
            return ""
        preds = [self._predicate(p) for p in generics.where_predicates]
        return " where " + ", ".join(preds)

    def _predicate(self, p: WherePredicate) -> str:
        if p.kind == "lifetime":
            subject = self.generic_arg(p.subject)
            return f"{subject}: {self.bounds(p.bounds)}"
        if p.kind == "eq":
            return f"{self.render(p.subject)} = {self.generic_arg(p.rhs)}"
        return f"{self.binder(p.generic_params)}{self.render(p.subject)}: {self.bounds(p.bounds)}"

    def _function_pointer(self, fp: FunctionPointer) -> str:
        out = self.binder(fp.generic_params)
        if fp.is_unsafe:
            out += "unsafe "
        if fp.abi:
            out += f'extern "{fp.abi}" '
        inputs = [
            self.render(t) if name in ("", "_") else f"{name}: {self.render(t)}"
            for name, t in fp.inputs
        ]
        if fp.is_c_variadic:
            inputs.append("...")
        out += f"fn({', '.join(inputs)})"
        if not is_unit(fp.output):
            out += f" -> {self.render(fp.output)}"
        return out

    def _qualified_path(self, qp: QualifiedPath) -> str:
        name = qp.name + self.args(qp.args)
        if qp.self_type == Generic("Self"):
            return f"Self::{name}"
        self_text = self.render(qp.self_type)
        if qp.trait is None or not qp.trait.path:
            return f"{self_text}::{name}"
        return f"<{self_text} as {self.render(qp.trait)}>::{name}"
