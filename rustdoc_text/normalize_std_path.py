"""Render-time normalization of standard library paths."""

# Paths emitted by derive expansions, mapped to the names a reader expects.
STD_PATH_ALIASES = {
    "$crate::clone::Clone": "Clone",
    "$crate::cmp::PartialEq": "PartialEq",
    "$crate::fmt::Formatter": "std::fmt::Formatter",
    "$crate::fmt::Result": "std::fmt::Result",
}

STD_PREFIXES = ("$crate::", "core::", "alloc::")


def normalize_std_path(path: str) -> str:
    """Map `$crate::`, `core::` and `alloc::` paths onto `std::`."""
    alias = STD_PATH_ALIASES.get(path)
    if alias is not None:
        return alias
    for prefix in STD_PREFIXES:
        if path.startswith(prefix):
            return "std::" + path[len(prefix) :]
    return path
