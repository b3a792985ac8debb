"""Logic for loading rustdoc JSON files."""

import json
import logging
from pathlib import Path

from rustdoc_text.crate_index import CrateIndex
from rustdoc_text.errors import MalformedInputError

logger = logging.getLogger(__name__)


def load_crate(path: Path) -> CrateIndex:
    """Load and index a rustdoc JSON file."""
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in {path}: {e}"
        raise MalformedInputError(msg) from e
    if not isinstance(doc, dict):
        msg = f"Expected a JSON object in {path}"
        raise MalformedInputError(msg)
    index = CrateIndex(doc)
    logger.info(
        "Loaded %s: %d items, format version %s%s",
        path,
        len(index.items),
        index.format_version,
        " (includes private items)" if index.includes_private else "",
    )
    return index
