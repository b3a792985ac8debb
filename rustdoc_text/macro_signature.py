"""One-line signatures for declarative and procedural macros."""

from typing import Any

CLOSERS = {"(": ")", "[": "]", "{": "}"}


def first_matcher(source: str) -> str | None:
    """Return the first rule matcher of a `macro_rules!` body, whitespace-collapsed."""
    body_start = source.find("{")
    if body_start < 0:
        return None
    i = body_start + 1
    while i < len(source) and source[i].isspace():
        i += 1
    if i >= len(source) or source[i] not in CLOSERS:
        return None
    opener = source[i]
    closer = CLOSERS[opener]
    depth = 0
    for j in range(i, len(source)):
        if source[j] == opener:
            depth += 1
        elif source[j] == closer:
            depth -= 1
            if depth == 0:
                return " ".join(source[i + 1 : j].split())
    return None


def macro_rules_signature(name: str, source: str) -> str:
    """Render `macro_rules! name(<first matcher>)`."""
    matcher = first_matcher(source or "")
    if matcher is None:
        return f"macro_rules! {name}"
    return f"macro_rules! {name}({matcher})"


def proc_macro_signature(name: str, data: dict[str, Any]) -> tuple[str, str]:
    """Return (kind, signature) for a procedural macro."""
    kind = str(data.get("kind") or "bang")
    if kind == "attr":
        return kind, f"#[proc_macro_attribute] {name}"
    if kind == "derive":
        helpers = data.get("helpers") or []
        if helpers:
            return kind, f"#[proc_macro_derive({name}, attributes({', '.join(helpers)}))]"
        return kind, f"#[proc_macro_derive({name})]"
    return "bang", f"#[proc_macro] {name}!"
