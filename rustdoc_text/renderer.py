"""Rendering of a resolved crate into indented ASCII text lines."""

import logging
from typing import TextIO

from rustdoc_text.ascii_safe import ascii_safe
from rustdoc_text.attributes import attr_name
from rustdoc_text.item_model import (
    AssocConst,
    AssocType,
    Constant,
    Enum,
    Field,
    Function,
    ImplRecord,
    Item,
    Macro,
    Module,
    ReExport,
    ResolvedCrate,
    Static,
    Struct,
    Trait,
    TypeAlias,
    Union,
    Unresolved,
    Variant,
)
from rustdoc_text.normalize_std_path import normalize_std_path
from rustdoc_text.options import RenderConfiguration
from rustdoc_text.render_docs import deprecation_line, render_docs
from rustdoc_text.render_types import (
    PLACEHOLDER,
    TypeRenderer,
    is_unit,
    lifetime_text,
    render_visibility,
)
from rustdoc_text.type_expr import Generic, Reference, TypeExpr

logger = logging.getLogger(__name__)

SELF = Generic("Self")


def write_lines(lines: list[str], stream: TextIO) -> None:
    """Write rendered lines to a text sink, one per line."""
    for line in lines:
        stream.write(line + "\n")


class Renderer:
    """Renders resolved items depth-first.

    The only state carried between calls is the depth, passed explicitly, so
    `render_item` can be applied to any node of the tree.
    """

    def __init__(self, config: RenderConfiguration | None = None) -> None:
        """Initialize the renderer with its configuration."""
        self.config = config or RenderConfiguration()
        self.types = TypeRenderer()

    def render_crate(self, crate: ResolvedCrate) -> list[str]:
        """Render the crate header followed by the root module's children."""
        lines = [f"# Crate: {crate.name}", ""]
        if crate.version:
            lines += [f"Version: {crate.version}", ""]
        docs = crate.docs.replace("\r\n", "\n").rstrip()
        if docs:
            lines += docs.split("\n") + [""]
        lines.extend(self._module_body(crate.root, 1, ()))
        return self._finish(lines)

    def render_item(
        self,
        item: Item,
        depth: int = 0,
        module_path: tuple[str, ...] = (),
    ) -> list[str]:
        """Render one item and its subtree; empty when it is filtered out."""
        return self._finish(self._item(item, depth, module_path))

    def is_visible(self, item: Item) -> bool:
        """True when the item meets the minimum visibility."""
        vis = item.visibility
        return vis.inherited or vis.level >= self.config.min_visibility

    def _finish(self, lines: list[str]) -> list[str]:
        out = [line.rstrip() for line in lines]
        if self.config.ascii_only:
            out = [ascii_safe(line) for line in out]
        while out and not out[-1]:
            out.pop()
        return out

    def _pad(self, depth: int) -> str:
        return " " * (self.config.indent * depth)

    # -----------------------------
    # Layout helpers
    # -----------------------------

    def _preamble(self, item: Item, pad: str) -> list[str]:
        """Deprecation marker, docs and shown attributes above a heading."""
        lines = []
        if item.deprecation is not None:
            lines.append(pad + deprecation_line(item.deprecation))
        lines.extend(render_docs(item.docs, pad, self.config.width))
        lines.extend(
            pad + attr for attr in item.attrs if attr_name(attr) in self.config.attributes
        )
        return lines

    def _leaf(self, item: Item, depth: int, text: str) -> list[str]:
        pad = self._pad(depth)
        return [*self._preamble(item, pad), pad + text]

    def _block(self, item: Item, depth: int, heading: str, body: list[str]) -> list[str]:
        """A container: `heading {`, body, `}`; or `heading {}` when empty."""
        pad = self._pad(depth)
        lines = self._preamble(item, pad)
        if not body:
            lines.append(f"{pad}{heading} {{}}")
            return lines
        lines.append(f"{pad}{heading} {{")
        lines.extend(body)
        lines.append(f"{pad}}}")
        return lines

    def _members(self, items: list[Item], depth: int) -> list[str]:
        lines = []
        for member in items:
            lines.extend(self._item(member, depth, ()))
        return lines

    # -----------------------------
    # Dispatch
    # -----------------------------

    def _item(self, item: Item, depth: int, module_path: tuple[str, ...]) -> list[str]:
        if not self.is_visible(item):
            return []
        if isinstance(item, Module):
            return self._module(item, depth, module_path)
        if isinstance(item, Struct):
            return self._struct(item, depth)
        if isinstance(item, Enum):
            return self._enum(item, depth)
        if isinstance(item, Union):
            return self._union(item, depth)
        if isinstance(item, Trait):
            return self._trait(item, depth)
        if isinstance(item, ImplRecord):
            return self._impl(item, depth)
        if isinstance(item, Function):
            return self._leaf(item, depth, self.function_signature(item))
        if isinstance(item, Field):
            return self._leaf(item, depth, self._field_line(item))
        if isinstance(item, Variant):
            return self._leaf(item, depth, self._variant_line(item))
        if isinstance(item, AssocType):
            return self._leaf(item, depth, self._assoc_type_line(item))
        if isinstance(item, AssocConst):
            return self._leaf(item, depth, self._assoc_const_line(item))
        if isinstance(item, TypeAlias):
            return self._leaf(item, depth, self._type_alias_line(item))
        if isinstance(item, Constant):
            return self._leaf(item, depth, self._constant_line(item))
        if isinstance(item, Static):
            return self._leaf(item, depth, self._static_line(item))
        if isinstance(item, Macro):
            return self._leaf(item, depth, item.signature)
        if isinstance(item, ReExport):
            return self._leaf(item, depth, self._reexport_line(item))
        if isinstance(item, Unresolved):
            return self._leaf(item, depth, f"{item.display} (unresolved)")
        logger.warning("No rendering for item %s (%s)", item.id, type(item).__name__)
        return [self._pad(depth) + PLACEHOLDER]

    # -----------------------------
    # Modules
    # -----------------------------

    def _module_selected(self, path: tuple[str, ...]) -> bool:
        """True for the filtered module, its ancestors and its descendants."""
        selected = self.config.module_filter
        if selected is None:
            return True
        n = min(len(path), len(selected))
        return path[:n] == selected[:n]

    def _inside_filter(self, path: tuple[str, ...]) -> bool:
        """True when items directly in `path` fall inside the filtered module."""
        selected = self.config.module_filter
        return selected is None or path[: len(selected)] == selected

    def _module_body(self, module: Module, depth: int, path: tuple[str, ...]) -> list[str]:
        """Render module children, separated by one blank line."""
        blocks = []
        for child in module.children:
            if isinstance(child, Module):
                if not self._module_selected((*path, child.name or "")):
                    continue
            elif not self._inside_filter(path):
                continue
            block = self._item(child, depth, path)
            if block:
                blocks.append(block)
        lines: list[str] = []
        for i, block in enumerate(blocks):
            if i:
                lines.append("")
            lines.extend(block)
        return lines

    def _module(self, module: Module, depth: int, path: tuple[str, ...]) -> list[str]:
        body = self._module_body(module, depth + 1, (*path, module.name or ""))
        heading = f"{render_visibility(module.visibility)}mod {module.name}"
        return self._block(module, depth, heading, body)

    # -----------------------------
    # Types with bodies
    # -----------------------------

    def _field_line(self, f: Field) -> str:
        return f"{render_visibility(f.visibility)}{f.name}: {self.types.render(f.type)},"

    def _fields(self, fields: list[Field], depth: int) -> list[str]:
        if not self.config.show_fields:
            return []
        lines = []
        for f in fields:
            lines.extend(self._item(f, depth, ()))
        return lines

    def _impl_members(self, impls: list[ImplRecord], depth: int) -> list[str]:
        """Inherent members inline, constrained inherent impls and trait impls nested."""
        lines = []
        for record in impls:
            if not record.is_inherent:
                continue
            if record.generics.has_constraints():
                lines.extend(self._impl(record, depth))
            else:
                lines.extend(self._members(record.items, depth))
        for record in impls:
            if not record.is_inherent:
                lines.extend(self._impl(record, depth))
        return lines

    def _heading(self, keyword: str, item: Item) -> str:
        return (
            f"{render_visibility(item.visibility)}{keyword} {item.name}"
            f"{self.types.params(item.generics)}"
        )

    def _struct(self, s: Struct, depth: int) -> list[str]:
        heading = self._heading("struct", s)
        body = []
        if s.kind == "tuple" and self.config.show_fields:
            shown = [
                render_visibility(f.visibility) + self.types.render(f.type)
                for f in s.fields
                if self.is_visible(f)
            ]
            if shown:
                heading += f"({', '.join(shown)})"
        elif s.kind == "plain":
            body = self._fields(s.fields, depth + 1)
        heading += self.types.where_clause(s.generics)
        body.extend(self._impl_members(s.impls, depth + 1))
        return self._block(s, depth, heading, body)

    def _union(self, u: Union, depth: int) -> list[str]:
        heading = self._heading("union", u) + self.types.where_clause(u.generics)
        body = self._fields(u.fields, depth + 1)
        body.extend(self._impl_members(u.impls, depth + 1))
        return self._block(u, depth, heading, body)

    def _variant_line(self, v: Variant) -> str:
        out = v.name or ""
        if v.kind == "tuple":
            out += f"({', '.join(self.types.render(f.type) for f in v.fields)})"
        elif v.kind == "struct":
            inner = ", ".join(f"{f.name}: {self.types.render(f.type)}" for f in v.fields)
            out += f" {{ {inner} }}" if inner else " {}"
        if v.discriminant is not None:
            out += f" = {v.discriminant}"
        return out + ","

    def _enum(self, e: Enum, depth: int) -> list[str]:
        heading = self._heading("enum", e) + self.types.where_clause(e.generics)
        body = []
        for v in e.variants:
            body.extend(self._item(v, depth + 1, ()))
        body.extend(self._impl_members(e.impls, depth + 1))
        return self._block(e, depth, heading, body)

    def _trait(self, t: Trait, depth: int) -> list[str]:
        heading = self._heading("trait", t)
        prefix = ("unsafe " if t.is_unsafe else "") + ("auto " if t.is_auto else "")
        if prefix:
            vis = render_visibility(t.visibility)
            heading = vis + prefix + heading[len(vis) :]
        if t.bounds:
            heading += f": {self.types.bounds(t.bounds)}"
        heading += self.types.where_clause(t.generics)
        return self._block(t, depth, heading, self._members(t.items, depth + 1))

    def impl_heading(self, record: ImplRecord) -> str:
        """Render `impl<...> Trait for Type where ...` without the brace."""
        out = "unsafe " if record.is_unsafe else ""
        out += f"impl{self.types.params(record.generics)} "
        if record.trait is not None:
            out += "!" if record.is_negative else ""
            out += f"{self.types.render(record.trait)} for "
        out += self.types.render(record.for_type)
        return out + self.types.where_clause(record.generics)

    def _impl(self, record: ImplRecord, depth: int) -> list[str]:
        body = self._members(record.items, depth + 1)
        return self._block(record, depth, self.impl_heading(record), body)

    # -----------------------------
    # Leaves
    # -----------------------------

    def param(self, name: str, t: TypeExpr) -> str:
        """Render one function parameter, with receiver shorthand for `self`."""
        if name == "self":
            if t == SELF:
                return "self"
            if isinstance(t, Reference) and t.inner == SELF:
                lifetime = f"{lifetime_text(t.lifetime)} " if t.lifetime else ""
                return f"&{lifetime}{'mut ' if t.mutable else ''}self"
        return f"{name}: {self.types.render(t)}"

    def function_signature(self, f: Function) -> str:
        """Render `[vis] [const] [async] [unsafe] [extern] fn name<...>(...) -> R`."""
        h = f.header
        out = render_visibility(f.visibility)
        out += "const " if h.is_const else ""
        out += "async " if h.is_async else ""
        out += "unsafe " if h.is_unsafe else ""
        out += f'extern "{h.abi}" ' if h.abi else ""
        params = [self.param(name, t) for name, t in f.signature.inputs]
        if f.signature.is_c_variadic:
            params.append("...")
        out += f"fn {f.name}{self.types.params(f.generics)}({', '.join(params)})"
        if not is_unit(f.signature.output):
            out += f" -> {self.types.render(f.signature.output)}"
        return out + self.types.where_clause(f.generics)

    def _assoc_type_line(self, a: AssocType) -> str:
        out = f"type {a.name}{self.types.params(a.generics)}"
        if a.bounds:
            out += f": {self.types.bounds(a.bounds)}"
        out += self.types.where_clause(a.generics)
        if a.type is not None:
            out += f" = {self.types.render(a.type)}"
        return out

    def _assoc_const_line(self, c: AssocConst) -> str:
        out = f"const {c.name}: {self.types.render(c.type)}"
        if c.value is not None:
            out += f" = {c.value}"
        return out

    def _type_alias_line(self, t: TypeAlias) -> str:
        return (
            f"{self._heading('type', t)}{self.types.where_clause(t.generics)}"
            f" = {self.types.render(t.type)}"
        )

    def _constant_line(self, c: Constant) -> str:
        out = f"{render_visibility(c.visibility)}const {c.name}: {self.types.render(c.type)}"
        if c.expr and c.expr != "_":
            out += f" = {c.expr}"
        return out

    def _static_line(self, s: Static) -> str:
        out = render_visibility(s.visibility)
        out += "unsafe " if s.is_unsafe else ""
        out += "static "
        out += "mut " if s.is_mutable else ""
        out += f"{s.name}: {self.types.render(s.type)}"
        if s.expr and s.expr != "_":
            out += f" = {s.expr}"
        return out

    def _reexport_line(self, r: ReExport) -> str:
        target = normalize_std_path(r.target_path or r.source)
        vis = render_visibility(r.visibility)
        if r.is_glob:
            return f"{vis}use {target}::*;"
        alias = ""
        if r.name and r.name != target.rsplit("::", 1)[-1]:
            alias = f" as {r.name}"
        return f"{vis}use {target}{alias};"
