"""Generate rustdoc JSON for a crate with cargo and render it as text."""

import argparse
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path


def run_command(cmd_list: Sequence[str | Path], cwd: Path | str | None = None) -> None:
    """Run a command and exit if it fails."""
    cmd_str = " ".join(str(x) for x in cmd_list)
    print(f"Running: {cmd_str}", file=sys.stderr)
    try:
        subprocess.run(cmd_list, check=True, cwd=cwd)
    except subprocess.CalledProcessError as e:
        print(f"Error executing command: {cmd_str}", file=sys.stderr)
        sys.exit(e.returncode)
    except FileNotFoundError:
        print(f"Command not found: {cmd_list[0]}", file=sys.stderr)
        sys.exit(127)


def rustdoc_json_path(crate_dir: Path, crate_name: str) -> Path:
    """Return where cargo writes the JSON for a crate."""
    return crate_dir / "target" / "doc" / f"{crate_name.replace('-', '_')}.json"


def main() -> None:
    """Run cargo rustdoc, then the text renderer on its output."""
    parser = argparse.ArgumentParser(
        description="Generate rustdoc JSON for a crate and render it as text."
    )
    parser.add_argument(
        "crate_dir",
        type=Path,
        help="Directory containing the crate's Cargo.toml",
    )
    parser.add_argument(
        "--crate-name",
        help="Library target name (default: the directory name)",
    )
    parser.add_argument(
        "--document-private-items",
        action="store_true",
        help="Include private items in the JSON and render them",
    )
    parser.add_argument(
        "--config",
        help="Path to configuration file",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write the rendering to this file instead of stdout",
    )
    args = parser.parse_args()

    crate_dir = args.crate_dir.resolve()
    crate_name = args.crate_name or crate_dir.name

    # 1. Generate rustdoc JSON (requires a nightly toolchain)
    print("--- Step 1: Generating rustdoc JSON ---", file=sys.stderr)
    cmd: list[str | Path] = ["cargo", "+nightly", "rustdoc", "--lib", "--"]
    cmd += ["-Z", "unstable-options", "--output-format", "json"]
    if args.document_private_items:
        cmd.append("--document-private-items")
    run_command(cmd, cwd=crate_dir)

    json_path = rustdoc_json_path(crate_dir, crate_name)
    if not json_path.exists():
        msg = f"Expected rustdoc output at {json_path}"
        raise SystemExit(msg)

    # 2. Render the JSON as text
    print("--- Step 2: Rendering text ---", file=sys.stderr)
    render_cmd: list[str | Path] = [sys.executable, "-m", "rustdoc_text.cli", json_path]
    if args.document_private_items:
        render_cmd += ["--min-visibility", "private"]
    if args.config:
        render_cmd += ["--config", args.config]
    if args.output:
        render_cmd += ["--output", args.output]
    run_command(render_cmd)


if __name__ == "__main__":
    main()
