"""Data model for resolved type expressions, generic parameters and bounds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Primitive:
    """A built-in type such as `u8`, `str` or `!`."""

    name: str


@dataclass(frozen=True)
class Generic:
    """A generic type parameter (or `Self`) referenced by name."""

    name: str


@dataclass(frozen=True)
class Lifetime:
    """A lifetime used as a generic argument or a predicate subject."""

    name: str


@dataclass(frozen=True)
class ConstArg:
    """A const generic argument, kept as its source expression."""

    expr: str


@dataclass(frozen=True)
class Infer:
    """The `_` placeholder."""


@dataclass(frozen=True)
class AssocConstraint:
    """An associated item constraint such as `Item = u8` or `Item: Clone`."""

    name: str
    args: GenericArgs | None = None
    equality: TypeExpr | ConstArg | None = None
    bounds: tuple[Bound, ...] = ()


@dataclass(frozen=True)
class GenericArgs:
    """Arguments attached to a path segment.

    Angle-bracketed arguments use `args` and `constraints`; the `Fn(A) -> B`
    sugar sets `parenthesized` and uses `inputs` and `output` instead.
    """

    args: tuple[GenericArg, ...] = ()
    constraints: tuple[AssocConstraint, ...] = ()
    parenthesized: bool = False
    inputs: tuple[TypeExpr, ...] = ()
    output: TypeExpr | None = None

    def is_empty(self) -> bool:
        """Return True when nothing would be rendered for these arguments."""
        if self.parenthesized:
            return False
        return not self.args and not self.constraints


@dataclass(frozen=True)
class PathType:
    """A named type resolved to an item the index knows about."""

    path: str
    id: str | None = None
    args: GenericArgs | None = None

    @property
    def last_segment(self) -> str:
        return self.path.rsplit("::", 1)[-1]


@dataclass(frozen=True)
class ExternalType:
    """Opaque leaf for a reference whose target is absent from the index."""

    path: str
    args: GenericArgs | None = None

    @property
    def last_segment(self) -> str:
        return self.path.rsplit("::", 1)[-1]


@dataclass(frozen=True)
class Reference:
    """`&'a mut T`."""

    inner: TypeExpr
    lifetime: str | None = None
    mutable: bool = False


@dataclass(frozen=True)
class RawPointer:
    """`*const T` / `*mut T`."""

    inner: TypeExpr
    mutable: bool = False


@dataclass(frozen=True)
class Tuple:
    """A tuple type; the empty tuple is the unit type."""

    elements: tuple[TypeExpr, ...] = ()

    def is_unit(self) -> bool:
        return not self.elements


@dataclass(frozen=True)
class Slice:
    inner: TypeExpr


@dataclass(frozen=True)
class Array:
    inner: TypeExpr
    length: str


@dataclass(frozen=True)
class TraitBound:
    """A trait bound, optionally higher-ranked (`for<'a>`) or relaxed (`?Sized`)."""

    trait: PathType | ExternalType
    generic_params: tuple[GenericParam, ...] = ()
    modifier: str = "none"  # none | maybe | maybe_const


@dataclass(frozen=True)
class LifetimeBound:
    lifetime: str


@dataclass(frozen=True)
class UseBound:
    """Precise capturing bound: `use<'a, T>`."""

    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class DynTrait:
    """`dyn A + B + 'a`; the lifetime always renders last."""

    traits: tuple[TraitBound, ...] = ()
    lifetime: str | None = None


@dataclass(frozen=True)
class ImplTrait:
    """`impl A + B` in argument or return position."""

    bounds: tuple[Bound, ...] = ()


@dataclass(frozen=True)
class FunctionPointer:
    """`for<'a> unsafe extern "C" fn(x: i32) -> bool`."""

    inputs: tuple[tuple[str, TypeExpr], ...] = ()
    output: TypeExpr | None = None
    generic_params: tuple[GenericParam, ...] = ()
    is_unsafe: bool = False
    abi: str | None = None
    is_c_variadic: bool = False


@dataclass(frozen=True)
class QualifiedPath:
    """`<T as Trait>::Name`, or `Self::Name` inside a trait."""

    self_type: TypeExpr
    name: str
    trait: PathType | ExternalType | None = None
    args: GenericArgs | None = None


TypeExpr = Union[
    Primitive,
    PathType,
    ExternalType,
    Reference,
    Generic,
    DynTrait,
    ImplTrait,
    Tuple,
    Slice,
    Array,
    FunctionPointer,
    RawPointer,
    QualifiedPath,
    Infer,
]

GenericArg = Union[TypeExpr, Lifetime, ConstArg]

Bound = Union[TraitBound, LifetimeBound, UseBound]


@dataclass(frozen=True)
class GenericParam:
    """A generic parameter declared on an item, an impl or a `for<...>` binder."""

    name: str
    kind: str  # type | lifetime | const
    bounds: tuple[Bound, ...] = ()
    default: TypeExpr | str | None = None
    const_type: TypeExpr | None = None
    is_synthetic: bool = False


@dataclass(frozen=True)
class WherePredicate:
    """One predicate of a where clause."""

    kind: str  # bound | lifetime | eq
    subject: TypeExpr | Lifetime
    bounds: tuple[Bound, ...] = ()
    generic_params: tuple[GenericParam, ...] = ()
    rhs: TypeExpr | ConstArg | None = None


@dataclass(frozen=True)
class Generics:
    params: tuple[GenericParam, ...] = ()
    where_predicates: tuple[WherePredicate, ...] = field(default_factory=tuple)

    def visible_params(self) -> list[GenericParam]:
        """Return the parameters written in source (synthetic ones dropped)."""
        return [p for p in self.params if not p.is_synthetic]

    def has_constraints(self) -> bool:
        """True when any parameter carries bounds or a where clause exists."""
        if self.where_predicates:
            return True
        return any(p.bounds for p in self.visible_params())


NO_GENERICS = Generics()
