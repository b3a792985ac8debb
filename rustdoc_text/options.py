"""Explicit option objects for the resolver and renderer stages."""

from dataclasses import dataclass, field
from typing import Any

from rustdoc_text.item_model import VisibilityLevel
from rustdoc_text.resolve_visibility import parse_visibility_level

DEFAULT_AUTO_TRAITS = (
    "Send",
    "Sync",
    "Freeze",
    "Unpin",
    "UnwindSafe",
    "RefUnwindSafe",
)


@dataclass(frozen=True)
class ResolverOptions:
    """Policy switches for impl filtering and association."""

    hide_blanket_impls: bool = True
    associate_trait_args: bool = True
    hidden_auto_traits: frozenset[str] = field(
        default_factory=lambda: frozenset(DEFAULT_AUTO_TRAITS)
    )


@dataclass(frozen=True)
class RenderConfiguration:
    """Options threaded through every render call."""

    min_visibility: VisibilityLevel = VisibilityLevel.PUBLIC
    module_filter: tuple[str, ...] | None = None
    width: int | None = None  # advisory; only documentation text wraps
    indent: int = 2
    ascii_only: bool = True
    show_fields: bool = True
    attributes: frozenset[str] = frozenset({"non_exhaustive", "must_use", "repr"})


def parse_module_filter(value: str | None) -> tuple[str, ...] | None:
    """Split a `a::b` module path filter; a leading `crate::` is ignored."""
    if not value:
        return None
    segments = [s for s in value.strip().split("::") if s]
    if segments and segments[0] == "crate":
        segments = segments[1:]
    return tuple(segments) or None


def options_from_config(
    config: dict[str, Any],
) -> tuple[ResolverOptions, RenderConfiguration]:
    """Build both option objects from a merged configuration dict."""
    res = config.get("resolver") or {}
    ren = config.get("render") or {}
    resolver_options = ResolverOptions(
        hide_blanket_impls=bool(res.get("hide_blanket_impls", True)),
        associate_trait_args=bool(res.get("associate_trait_args", True)),
        hidden_auto_traits=frozenset(
            res.get("hidden_auto_traits", DEFAULT_AUTO_TRAITS) or ()
        ),
    )
    width = ren.get("width")
    render_config = RenderConfiguration(
        min_visibility=parse_visibility_level(str(ren.get("min_visibility", "public"))),
        module_filter=parse_module_filter(ren.get("module_filter")),
        width=int(width) if width else None,
        indent=int(ren.get("indent", 2)),
        ascii_only=bool(ren.get("ascii_only", True)),
        show_fields=bool(ren.get("show_fields", True)),
        attributes=frozenset(
            ren.get("attributes", RenderConfiguration.attributes) or ()
        ),
    )
    return resolver_options, render_config
