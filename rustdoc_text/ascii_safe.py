"""Reduction of arbitrary text to printable ASCII."""

import unicodedata

TYPOGRAPHIC = {
    "‘": "'",
    "’": "'",
    "‚": ",",
    "‛": "'",
    "“": '"',
    "”": '"',
    "„": '"',
    "′": "'",
    "″": '"',
    "«": "<<",
    "»": ">>",
    "‹": "<",
    "›": ">",
    "‐": "-",
    "‑": "-",
    "‒": "-",
    "–": "-",
    "—": "--",
    "―": "--",
    "−": "-",
    "…": "...",
    "\u00a0": " ",
    "\u202f": " ",
    "\u200b": "",
    "•": "*",
    "·": "*",
    "→": "->",
    "←": "<-",
    "⇒": "=>",
    "≤": "<=",
    "≥": ">=",
    "≠": "!=",
    "×": "x",
    "©": "(c)",
    "®": "(R)",
    "™": "(TM)",
}


def ascii_safe(text: str) -> str:
    """Return `text` with every character in the ASCII range.

    Typographic punctuation maps to its ASCII spelling and accents are
    stripped. Anything else becomes `?`.
    """
    if text.isascii():
        return text
    out = []
    for ch in text:
        if ch.isascii():
            out.append(ch)
            continue
        if ch in TYPOGRAPHIC:
            out.append(TYPOGRAPHIC[ch])
            continue
        decomposed = unicodedata.normalize("NFKD", ch)
        stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
        out.append(stripped if stripped and stripped.isascii() else "?")
    return "".join(out)
