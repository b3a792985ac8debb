"""Tests for rendering resolved items as indented text."""

import io

from crate_builder import (
    CrateBuilder,
    angle,
    generic,
    generics,
    path_type,
    prim,
    ref,
    trait_bound,
    type_param,
)

from rustdoc_text.crate_index import CrateIndex
from rustdoc_text.item_model import (
    INHERITED,
    PRIVATE,
    AssocConst,
    AssocType,
    Constant,
    Deprecation,
    Enum,
    Field,
    Function,
    ImplRecord,
    Module,
    ReExport,
    ResolvedCrate,
    Signature,
    Struct,
    Trait,
    Unresolved,
    Variant,
    VisibilityLevel,
)
from rustdoc_text.options import RenderConfiguration, ResolverOptions
from rustdoc_text.renderer import Renderer, write_lines
from rustdoc_text.resolver import Resolver
from rustdoc_text.type_expr import (
    ExternalType,
    Generic,
    GenericArgs,
    GenericParam,
    Generics,
    PathType,
    Primitive,
    Reference,
    TraitBound,
    Tuple,
)

SELF = Generic("Self")
SELF_RAW = generic("Self")


def render(doc: dict, config: RenderConfiguration | None = None, **options: object) -> list[str]:
    """Resolve and render a raw document."""
    crate = Resolver(CrateIndex(doc), ResolverOptions(**options)).resolve_crate()
    return Renderer(config).render_crate(crate)


def container_crate() -> dict:
    """`pub struct Container<T>` with new, get and into_inner."""
    b = CrateBuilder()
    t = generic("T")
    s = b.struct(
        "Container",
        [b.field("value", t, visibility="default")],
        gen=generics([type_param("T")]),
        docs="A generic container.",
    )
    new = b.function("new", [("value", t)], SELF_RAW, docs="Creates a container.")
    get = b.function("get", [("self", ref(SELF_RAW))], ref(t))
    into_inner = b.function("into_inner", [("self", SELF_RAW)], t)
    b.impl(
        path_type(s, "Container", angle(t)),
        [new, get, into_inner],
        gen=generics([type_param("T")]),
    )
    return b.build(s)


def test_container_scenario() -> None:
    """Verify heading, receivers, return types and closing brace of a generic struct."""
    assert render(container_crate()) == [
        "# Crate: demo",
        "",
        "Version: 0.1.0",
        "",
        "  /// A generic container.",
        "  pub struct Container<T> {",
        "    /// Creates a container.",
        "    pub fn new(value: T) -> Self",
        "    pub fn get(&self) -> &T",
        "    pub fn into_inner(self) -> T",
        "  }",
    ]


def test_private_fields_shown_at_private_threshold() -> None:
    """Verify lowering the threshold reveals private fields without a qualifier."""
    config = RenderConfiguration(min_visibility=VisibilityLevel.PRIVATE)
    lines = render(container_crate(), config)
    assert "    value: T," in lines


def test_deprecated_function_scenario() -> None:
    """Verify the deprecation marker sits directly above docs and signature."""
    b = CrateBuilder()
    f = b.function("old", docs="Old API.", deprecation={"since": "1.0.0", "note": None})
    lines = render(b.build(f))
    i = lines.index("  DEPRECATED since 1.0.0")
    assert lines[i + 1 : i + 3] == ["  /// Old API.", "  pub fn old()"]


def test_protocol_impl_renders_under_each_type() -> None:
    """Verify `impl Protocol<Req, Resp> for Http` appears under Http, Req and Resp."""
    b = CrateBuilder()
    proto = b.trait("Protocol", gen=generics([type_param("Req"), type_param("Resp")]))
    http = b.struct("Http")
    req = b.struct("Req")
    resp = b.struct("Resp")
    b.impl(
        path_type(http, "Http"),
        trait={"id": proto, "path": "Protocol", "args": angle(path_type(req, "Req"), path_type(resp, "Resp"))},
    )
    lines = render(b.build(proto, http, req, resp))
    assert lines[4:] == [
        "  pub trait Protocol<Req, Resp> {}",
        "",
        "  pub struct Http {",
        "    impl Protocol<Req, Resp> for Http {}",
        "  }",
        "",
        "  pub struct Req {",
        "    impl Protocol<Req, Resp> for Http {}",
        "  }",
        "",
        "  pub struct Resp {",
        "    impl Protocol<Req, Resp> for Http {}",
        "  }",
    ]


def test_duplicate_and_synthetic_impls_do_not_render() -> None:
    """Verify one line per distinct trait impl and no synthetic blanket impls."""
    b = CrateBuilder()
    clone = b.external(["core", "clone", "Clone"])
    from_trait = b.external(["core", "convert", "From"])
    blanket = b.impl(
        generic("T"),
        trait={"id": from_trait, "path": "From", "args": angle(generic("T"))},
        gen=generics([type_param("T")]),
        synthetic=True,
    )
    s = b.struct("Point", impls=[blanket])
    b.impl(path_type(s, "Point"), trait={"id": clone, "path": "$crate::clone::Clone", "args": None})
    b.impl(path_type(s, "Point"), trait={"id": clone, "path": "$crate::clone::Clone", "args": None})
    lines = render(b.build(s))
    assert lines.count("    impl Clone for Point {}") == 1
    assert not any("From" in line for line in lines)


def test_unit_returning_functions_have_no_arrow() -> None:
    """Verify absent and unit outputs omit the arrow."""
    r = Renderer()
    absent = Function(id="1", name="run")
    unit = Function(id="2", name="stop", signature=Signature(output=Tuple(())))
    assert r.render_item(absent) == ["pub fn run()"]
    assert r.render_item(unit) == ["pub fn stop()"]


def test_function_header_and_where_clause() -> None:
    """Verify qualifiers, generics and where clause placement."""
    g = Generics(
        params=(GenericParam("T", "type"),),
        where_predicates=(),
    )
    f = Function(
        id="1",
        name="spawn",
        generics=g,
        signature=Signature(
            inputs=[("self", Reference(SELF, lifetime="'a", mutable=True)), ("task", Generic("T"))],
            output=PathType("Handle", "9"),
        ),
    )
    f.header.is_async = True
    f.header.is_unsafe = True
    f.header.abi = "C"
    assert Renderer().render_item(f) == ['pub async unsafe extern "C" fn spawn<T>(&\'a mut self, task: T) -> Handle']


def test_receiver_forms() -> None:
    """Verify receiver shorthand and the explicit typed form."""
    r = Renderer()
    assert r.param("self", SELF) == "self"
    assert r.param("self", Reference(SELF)) == "&self"
    assert r.param("self", Reference(SELF, mutable=True)) == "&mut self"
    assert r.param("self", Reference(SELF, lifetime="'a")) == "&'a self"
    boxed = ExternalType("Box", GenericArgs(args=(SELF,)))
    assert r.param("self", boxed) == "self: Box<Self>"


def test_visibility_filter_leaves_no_trace() -> None:
    """Verify hidden items emit no lines at all, including docs and markers."""
    hidden = Function(
        id="1",
        name="secret",
        visibility=PRIVATE,
        docs="Hidden docs.",
        deprecation=Deprecation(since="0.1"),
    )
    shown = Function(id="2", name="open")
    root = Module(id="0", name="demo", children=[hidden, shown])
    lines = Renderer().render_crate(ResolvedCrate("demo", None, "", root))
    assert lines == ["# Crate: demo", "", "  pub fn open()"]


def test_depth_and_closing_delimiters() -> None:
    """Verify each container closes at its own depth and children go one level deeper."""
    inner = Module(id="2", name="inner", children=[Function(id="3", name="f")])
    outer = Module(id="1", name="outer", children=[inner])
    assert Renderer().render_item(outer, depth=1) == [
        "  pub mod outer {",
        "    pub mod inner {",
        "      pub fn f()",
        "    }",
        "  }",
    ]


def test_empty_container_renders_on_one_line() -> None:
    """Verify a container with no rendered children closes on its heading line."""
    private_only = Module(id="1", name="empty", children=[Function(id="2", name="f", visibility=PRIVATE)])
    assert Renderer().render_item(private_only) == ["pub mod empty {}"]


def test_module_siblings_separated_by_blank_lines() -> None:
    """Verify blank lines between module children but not between struct members."""
    s = Struct(
        id="3",
        name="Pair",
        fields=[
            Field(id="4", name="a", type=Primitive("u8")),
            Field(id="5", name="b", type=Primitive("u8")),
        ],
    )
    m = Module(id="1", name="m", children=[Function(id="2", name="f"), s])
    assert Renderer().render_item(m) == [
        "pub mod m {",
        "  pub fn f()",
        "",
        "  pub struct Pair {",
        "    pub a: u8,",
        "    pub b: u8,",
        "  }",
        "}",
    ]


def test_docs_lines_and_empty_lines() -> None:
    """Verify each doc line gets one space after /// and empty lines stay bare."""
    f = Function(id="1", name="f", docs="\nFirst.\n\n  indented\n")
    assert Renderer().render_item(f) == [
        "///",
        "/// First.",
        "///",
        "///   indented",
        "pub fn f()",
    ]


def test_attributes_follow_docs_and_are_filtered() -> None:
    """Verify shown attributes sit between docs and heading."""
    s = Struct(
        id="1",
        name="Flags",
        docs="Bit flags.",
        attrs=["#[repr(C)]", "#[no_mangle]"],
        kind="unit",
    )
    assert Renderer().render_item(s) == ["/// Bit flags.", "#[repr(C)]", "pub struct Flags {}"]


def test_tuple_struct_fields_inline() -> None:
    """Verify tuple struct fields appear in the heading and hidden ones vanish."""
    s = Struct(
        id="1",
        name="Meters",
        kind="tuple",
        fields=[
            Field(id="0", name="0", type=Primitive("f64")),
            Field(id="1", name="1", type=Primitive("u8"), visibility=PRIVATE),
        ],
    )
    assert Renderer().render_item(s) == ["pub struct Meters(pub f64) {}"]


def test_constrained_inherent_impl_renders_as_block() -> None:
    """Verify inherent impls with bounds become nested impl blocks."""
    g = Generics(params=(GenericParam("T", "type", bounds=(TraitBound(ExternalType("Clone")),)),))
    method = Function(id="5", name="dup", signature=Signature(inputs=[("self", Reference(SELF))], output=Generic("T")))
    record = ImplRecord(
        id="4",
        generics=g,
        visibility=INHERITED,
        for_type=PathType("Wrapper", "1", GenericArgs(args=(Generic("T"),))),
        items=[method],
    )
    s = Struct(
        id="1",
        name="Wrapper",
        generics=Generics(params=(GenericParam("T", "type"),)),
        kind="unit",
        impls=[record],
    )
    assert Renderer().render_item(s) == [
        "pub struct Wrapper<T> {",
        "  impl<T: Clone> Wrapper<T> {",
        "    pub fn dup(&self) -> T",
        "  }",
        "}",
    ]


def test_enum_variants() -> None:
    """Verify plain, tuple and struct variants with discriminants."""
    e = Enum(
        id="1",
        name="Shape",
        attrs=["#[non_exhaustive]"],
        variants=[
            Variant(id="2", name="Empty", visibility=INHERITED, discriminant="0"),
            Variant(
                id="3",
                name="Circle",
                visibility=INHERITED,
                kind="tuple",
                fields=[Field(id="4", name="0", type=Primitive("f64"), visibility=INHERITED)],
            ),
            Variant(
                id="5",
                name="Rect",
                visibility=INHERITED,
                kind="struct",
                docs="A rectangle.",
                fields=[
                    Field(id="6", name="w", type=Primitive("f64"), visibility=INHERITED),
                    Field(id="7", name="h", type=Primitive("f64"), visibility=INHERITED),
                ],
            ),
        ],
    )
    assert Renderer().render_item(e) == [
        "#[non_exhaustive]",
        "pub enum Shape {",
        "  Empty = 0,",
        "  Circle(f64),",
        "  /// A rectangle.",
        "  Rect { w: f64, h: f64 },",
        "}",
    ]


def test_trait_with_associated_items() -> None:
    """Verify trait declarations show bounds, defaults and required methods."""
    t = Trait(
        id="1",
        name="Store",
        bounds=[TraitBound(ExternalType("Send"))],
        items=[
            AssocType(
                id="2",
                name="Key",
                visibility=INHERITED,
                bounds=[TraitBound(ExternalType("Hash")), TraitBound(ExternalType("Eq"))],
            ),
            AssocConst(id="3", name="LIMIT", visibility=INHERITED, type=Primitive("usize"), value="16"),
            Function(
                id="4",
                name="get",
                visibility=INHERITED,
                signature=Signature(
                    inputs=[("self", Reference(SELF)), ("key", Generic("Self::Key"))],
                    output=Primitive("bool"),
                ),
            ),
        ],
    )
    assert Renderer().render_item(t) == [
        "pub trait Store: Send {",
        "  type Key: Hash + Eq",
        "  const LIMIT: usize = 16",
        "  fn get(&self, key: Self::Key) -> bool",
        "}",
    ]


def test_trait_impl_associated_items() -> None:
    """Verify impls bind associated types with `=`."""
    record = ImplRecord(
        id="1",
        visibility=INHERITED,
        trait=ExternalType("core::iter::Iterator"),
        for_type=PathType("Counter", "2"),
        items=[AssocType(id="3", name="Item", visibility=INHERITED, type=Primitive("u32"))],
    )
    assert Renderer().render_item(record) == [
        "impl std::iter::Iterator for Counter {",
        "  type Item = u32",
        "}",
    ]


def test_leaf_items() -> None:
    """Verify constants, re-exports and unresolved markers."""
    r = Renderer()
    assert r.render_item(Constant(id="1", name="MAX", type=Primitive("u32"), expr="10")) == ["pub const MAX: u32 = 10"]
    glob = ReExport(id="2", name="prelude", source="crate::prelude", is_glob=True)
    assert r.render_item(glob) == ["pub use crate::prelude::*;"]
    alias = ReExport(id="3", name="Alias", source="other::Thing")
    assert r.render_item(alias) == ["pub use other::Thing as Alias;"]
    known = ReExport(id="4", name="Point", source="self::geo::Point", target_path="demo::geo::Point")
    assert r.render_item(known) == ["pub use demo::geo::Point;"]
    assert r.render_item(Unresolved(id="5", name="gone", display="demo::gone")) == ["demo::gone (unresolved)"]


def test_module_filter_keeps_path_and_descendants() -> None:
    """Verify ancestors render as wrappers and unrelated siblings disappear."""
    http = Module(id="3", name="http", children=[Function(id="4", name="get")])
    tcp = Module(id="5", name="tcp", children=[Function(id="6", name="connect")])
    net = Module(id="2", name="net", children=[Function(id="7", name="resolve"), http, tcp])
    other = Module(id="8", name="fs", children=[Function(id="9", name="read")])
    root = Module(id="0", name="demo", children=[net, other, Function(id="10", name="top")])
    config = RenderConfiguration(module_filter=("net", "http"))
    lines = Renderer(config).render_crate(ResolvedCrate("demo", None, "", root))
    assert lines == [
        "# Crate: demo",
        "",
        "  pub mod net {",
        "    pub mod http {",
        "      pub fn get()",
        "    }",
        "  }",
    ]


def test_crate_header_with_docs() -> None:
    """Verify version and crate docs precede the root children."""
    root = Module(id="0", name="demo", children=[Function(id="1", name="f")])
    lines = Renderer().render_crate(ResolvedCrate("demo", "2.0.0", "Top docs.\n\nMore.", root))
    assert lines == ["# Crate: demo", "", "Version: 2.0.0", "", "Top docs.", "", "More.", "", "  pub fn f()"]


def test_ascii_only_output() -> None:
    """Verify typographic punctuation and accents are reduced to ASCII."""
    f = Function(id="1", name="f", docs="It’s “naïve” — really…")
    lines = Renderer().render_item(f)
    assert lines[0] == '/// It\'s "naive" -- really...'
    assert all(line.isascii() for line in lines)
    raw = Renderer(RenderConfiguration(ascii_only=False)).render_item(f)
    assert raw[0] == "/// It’s “naïve” — really…"


def test_width_wraps_only_docs() -> None:
    """Verify a width hint wraps doc lines and never signatures."""
    f = Function(
        id="1",
        name="a_function_with_a_rather_long_name",
        docs="one two three four five six seven eight nine ten",
        signature=Signature(inputs=[("value", Primitive("u64"))]),
    )
    lines = Renderer(RenderConfiguration(width=30)).render_item(f)
    assert lines == [
        "/// one two three four five",
        "/// six seven eight nine ten",
        "pub fn a_function_with_a_rather_long_name(value: u64)",
    ]


def test_indent_is_configurable() -> None:
    """Verify the indent unit scales with depth."""
    m = Module(id="1", name="m", children=[Function(id="2", name="f")])
    assert Renderer(RenderConfiguration(indent=4)).render_item(m, depth=1) == [
        "    pub mod m {",
        "        pub fn f()",
        "    }",
    ]


def test_rendering_is_idempotent() -> None:
    """Verify rendering the same tree twice gives identical output."""
    crate = Resolver(CrateIndex(container_crate())).resolve_crate()
    renderer = Renderer()
    assert renderer.render_crate(crate) == renderer.render_crate(crate)


def test_generic_bounds_from_json() -> None:
    """Verify bounded params and where clauses render from raw input."""
    b = CrateBuilder()
    display = b.external(["core", "fmt", "Display"])
    f = b.function(
        "show",
        [("item", generic("T"))],
        None,
        gen=generics(
            [type_param("T", [trait_bound(display, "core::fmt::Display")])],
            [{"bound_predicate": {"type": generic("T"), "bounds": [trait_bound(display, "Display")], "generic_params": []}}],
        ),
    )
    lines = render(b.build(f))
    assert lines[-1] == "  pub fn show<T: std::fmt::Display>(item: T) where T: Display"


def test_write_lines() -> None:
    """Verify lines are newline terminated."""
    buf = io.StringIO()
    write_lines(["a", "", "b"], buf)
    assert buf.getvalue() == "a\n\nb\n"


def test_unknown_type_placeholder_in_signature() -> None:
    """Verify an unknown type expression does not abort the stream."""
    f = Function(id="1", name="odd", signature=Signature(output=object()))
    assert Renderer().render_item(f) == ["pub fn odd() -> <?>"]


def test_impl_for_reference_type_renders() -> None:
    """Verify impls for references render the full implementing type."""
    record = ImplRecord(
        id="1",
        visibility=INHERITED,
        trait=ExternalType("IntoIterator"),
        for_type=Reference(PathType("Bag", "2"), lifetime="'a"),
        generics=Generics(params=(GenericParam("'a", "lifetime"),)),
    )
    assert Renderer().render_item(record) == ["impl<'a> IntoIterator for &'a Bag {}"]


def test_pipeline_prim_field() -> None:
    """Verify a public field renders with its type through the whole pipeline."""
    b = CrateBuilder()
    s = b.struct("Pixel", [b.field("x", prim("u16"))])
    assert render(b.build(s))[-3:] == ["  pub struct Pixel {", "    pub x: u16,", "  }"]
