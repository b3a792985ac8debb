"""Logic for rendering documentation comments and deprecation markers."""

import textwrap

from rustdoc_text.item_model import Deprecation

# Width hints below this leave docs unwrapped.
MIN_WRAP_WIDTH = 20

FENCE = "```"


def as_doc_lines(docs: object) -> list[str]:
    """Split documentation into lines, keeping leading blank lines."""
    if docs is None:
        return []
    text = str(docs).replace("\r\n", "\n").rstrip()
    if not text:
        return []
    return [line.rstrip() for line in text.split("\n")]


def wrap_doc_lines(lines: list[str], width: int) -> list[str]:
    """Wrap prose lines to `width`, leaving fenced code blocks untouched."""
    if width < MIN_WRAP_WIDTH:
        return lines
    out: list[str] = []
    in_fence = False
    for line in lines:
        if line.lstrip().startswith(FENCE):
            in_fence = not in_fence
            out.append(line)
            continue
        if in_fence or len(line) <= width or not line.strip():
            out.append(line)
            continue
        lead = line[: len(line) - len(line.lstrip())]
        wrapped = textwrap.wrap(
            line.strip(),
            width,
            initial_indent=lead,
            subsequent_indent=lead,
            break_long_words=False,
            break_on_hyphens=False,
        )
        out.extend(wrapped or [line])
    return out


def render_docs(docs: object, pad: str, width: int | None = None) -> list[str]:
    """Render docs as `///` lines at the given indentation."""
    lines = as_doc_lines(docs)
    if width:
        lines = wrap_doc_lines(lines, width - len(pad) - len("/// "))
    return [f"{pad}/// {line}" if line else f"{pad}///" for line in lines]


def deprecation_line(dep: Deprecation) -> str:
    """Return `DEPRECATED`, optionally with the version and note."""
    out = "DEPRECATED"
    if dep.since:
        out += f" since {dep.since}"
    if dep.note:
        out += f": {' '.join(dep.note.split())}"
    return out
