"""Filtering and deduplication rules for impl blocks."""

from rustdoc_text.item_model import ImplRecord
from rustdoc_text.options import ResolverOptions
from rustdoc_text.type_expr import Generic


def drop_reason(record: ImplRecord, options: ResolverOptions) -> str | None:
    """Return why an impl is hidden everywhere, or None to keep it."""
    if record.is_synthetic and isinstance(record.for_type, Generic):
        return "synthetic impl over a bare generic"
    if options.hide_blanket_impls and record.blanket is not None:
        return "blanket impl"
    if (
        record.is_synthetic
        and record.trait is not None
        and record.trait.last_segment in options.hidden_auto_traits
    ):
        return "auto trait impl"
    return None


def impl_key(record: ImplRecord) -> tuple[object, ...]:
    """Identity of a trait impl for per-container deduplication."""
    return (record.trait, record.for_type, record.generics)
