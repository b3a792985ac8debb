"""Data models for resolved documentable items."""

from dataclasses import dataclass, field
from enum import IntEnum

from rustdoc_text.type_expr import (
    NO_GENERICS,
    Bound,
    ExternalType,
    Generics,
    PathType,
    TypeExpr,
)


class VisibilityLevel(IntEnum):
    """Ordered visibility levels; higher is more visible."""

    PRIVATE = 0
    RESTRICTED = 1
    PUBLIC = 2


@dataclass(frozen=True)
class Visibility:
    """Visibility of an item.

    `inherited` marks members whose visibility comes from their context
    (trait items, trait-impl items, enum variants); they never render a
    qualifier and always pass the visibility filter.
    """

    level: VisibilityLevel
    path: str | None = None  # restriction path for RESTRICTED
    inherited: bool = False


PUBLIC = Visibility(VisibilityLevel.PUBLIC)
PRIVATE = Visibility(VisibilityLevel.PRIVATE)
INHERITED = Visibility(VisibilityLevel.PUBLIC, inherited=True)


@dataclass(frozen=True)
class Deprecation:
    since: str | None = None
    note: str | None = None


@dataclass
class Item:
    """Fields shared by every documentable item."""

    id: str
    name: str | None = None
    visibility: Visibility = PUBLIC
    docs: str = ""
    deprecation: Deprecation | None = None
    generics: Generics = NO_GENERICS
    attrs: list[str] = field(default_factory=list)


@dataclass
class Field(Item):
    """A struct, union or variant field. Tuple fields are named by position."""

    type: TypeExpr | None = None


@dataclass
class Variant(Item):
    """An enum variant."""

    kind: str = "plain"  # plain | tuple | struct
    fields: list[Field] = field(default_factory=list)
    discriminant: str | None = None


@dataclass
class FunctionHeader:
    is_const: bool = False
    is_async: bool = False
    is_unsafe: bool = False
    abi: str | None = None  # None for the default Rust ABI


@dataclass
class Signature:
    inputs: list[tuple[str, TypeExpr]] = field(default_factory=list)
    output: TypeExpr | None = None
    is_c_variadic: bool = False


@dataclass
class Function(Item):
    signature: Signature = field(default_factory=Signature)
    header: FunctionHeader = field(default_factory=FunctionHeader)


@dataclass
class AssocType(Item):
    """An associated type: declared with bounds in a trait, bound to a value in an impl."""

    bounds: list[Bound] = field(default_factory=list)
    type: TypeExpr | None = None


@dataclass
class AssocConst(Item):
    type: TypeExpr | None = None
    value: str | None = None


@dataclass
class ImplRecord(Item):
    """An impl block. `trait` is None for inherent impls."""

    for_type: TypeExpr | None = None
    trait: PathType | ExternalType | None = None
    items: list[Item] = field(default_factory=list)
    is_synthetic: bool = False
    is_negative: bool = False
    is_unsafe: bool = False
    blanket: TypeExpr | None = None

    @property
    def is_inherent(self) -> bool:
        return self.trait is None


@dataclass
class Struct(Item):
    kind: str = "plain"  # plain | tuple | unit
    fields: list[Field] = field(default_factory=list)
    impls: list[ImplRecord] = field(default_factory=list)


@dataclass
class Union(Item):
    fields: list[Field] = field(default_factory=list)
    impls: list[ImplRecord] = field(default_factory=list)


@dataclass
class Enum(Item):
    variants: list[Variant] = field(default_factory=list)
    impls: list[ImplRecord] = field(default_factory=list)


@dataclass
class Trait(Item):
    items: list[Item] = field(default_factory=list)
    bounds: list[Bound] = field(default_factory=list)
    is_auto: bool = False
    is_unsafe: bool = False


@dataclass
class TypeAlias(Item):
    type: TypeExpr | None = None


@dataclass
class Constant(Item):
    type: TypeExpr | None = None
    expr: str | None = None


@dataclass
class Static(Item):
    type: TypeExpr | None = None
    is_mutable: bool = False
    is_unsafe: bool = False
    expr: str | None = None


@dataclass
class Macro(Item):
    signature: str = ""
    kind: str = "decl"  # decl | bang | attr | derive


@dataclass
class ReExport(Item):
    """A `pub use`. `target_path` is None when the target is unknown."""

    source: str = ""
    target_path: str | None = None
    is_glob: bool = False


@dataclass
class Unresolved(Item):
    """Marker leaf for a child identifier missing from the index."""

    display: str = ""


@dataclass
class Module(Item):
    children: list[Item] = field(default_factory=list)


@dataclass
class ResolvedCrate:
    """The output of one resolution pass."""

    name: str
    version: str | None
    docs: str
    root: Module
