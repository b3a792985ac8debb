"""Logic for loading and merging configuration files."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from rustdoc_text.deep_merge import deep_merge
from rustdoc_text.errors import ConfigError
from rustdoc_text.options import DEFAULT_AUTO_TRAITS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "render": {
        "min_visibility": "public",
        "module_filter": None,
        "width": None,
        "indent": 2,
        "ascii_only": True,
        "show_fields": True,
        "attributes": ["non_exhaustive", "must_use", "repr"],
    },
    "resolver": {
        "hide_blanket_impls": True,
        "associate_trait_args": True,
        "hidden_auto_traits": list(DEFAULT_AUTO_TRAITS),
    },
}


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            try:
                user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as e:
                msg = f"Invalid YAML in {p}: {e}"
                raise ConfigError(msg) from e
            if not isinstance(user_config, dict):
                msg = f"Expected a mapping at the top of {p}"
                raise ConfigError(msg)
            config = deep_merge(config, user_config)
        else:
            logger.warning("Config file %s not found, using defaults", p)
    return config
