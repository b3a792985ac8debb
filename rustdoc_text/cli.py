"""Render a rustdoc JSON file as indented ASCII text."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from rustdoc_text.errors import RustdocTextError
from rustdoc_text.load_config import load_config
from rustdoc_text.load_crate import load_crate
from rustdoc_text.options import options_from_config
from rustdoc_text.renderer import Renderer, write_lines
from rustdoc_text.resolver import Resolver

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(levelname)s] %(message)s"


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr: WARNING by default, -v INFO, -vv DEBUG."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    ap = argparse.ArgumentParser(
        description="Render rustdoc JSON output as indented ASCII text.",
    )
    ap.add_argument(
        "input",
        type=Path,
        help="rustdoc JSON file (cargo rustdoc -- --output-format json)",
    )
    ap.add_argument(
        "--config",
        help="Path to a YAML configuration file",
    )
    ap.add_argument(
        "--min-visibility",
        choices=["public", "restricted", "private"],
        help="Hide items less visible than this (default: public)",
    )
    ap.add_argument(
        "--module",
        help="Only render this module path, e.g. net::http",
    )
    ap.add_argument(
        "--width",
        type=int,
        help="Wrap documentation lines to this many columns",
    )
    ap.add_argument(
        "--crate-name",
        help="Display name for the crate header (default: the root module name)",
    )
    ap.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write to this file instead of stdout",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    return ap


def apply_overrides(config: dict[str, Any], args: argparse.Namespace) -> dict[str, Any]:
    """Let command-line flags override the loaded configuration."""
    render = config.setdefault("render", {})
    if args.min_visibility:
        render["min_visibility"] = args.min_visibility
    if args.module:
        render["module_filter"] = args.module
    if args.width is not None:
        render["width"] = args.width
    return config


def render_file(
    path: Path,
    config: dict[str, Any],
    crate_name: str | None = None,
) -> list[str]:
    """Load, resolve and render one rustdoc JSON file."""
    resolver_options, render_config = options_from_config(config)
    index = load_crate(path)
    crate = Resolver(index, resolver_options).resolve_crate(crate_name=crate_name)
    return Renderer(render_config).render_crate(crate)


def main(argv: list[str] | None = None) -> int:
    """Run the command-line interface."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if not args.input.exists():
        msg = f"Input file not found: {args.input}"
        raise SystemExit(msg)

    try:
        config = apply_overrides(load_config(args.config), args)
        lines = render_file(args.input, config, args.crate_name)
    except (RustdocTextError, ValueError) as e:
        raise SystemExit(str(e)) from e

    if args.output:
        with args.output.open("w", encoding="utf-8") as f:
            write_lines(lines, f)
        logger.info("Wrote %d lines to %s", len(lines), args.output)
    else:
        write_lines(lines, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
