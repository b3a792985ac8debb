"""Development script to run checks (formatting, linting, tests)."""

import argparse
import subprocess
import sys


def run_command(command: list[str], step_name: str) -> None:
    """Run a shell command as a step in the development process."""
    print(f"\n--- Running Step: {step_name} ---")
    print(f"$ {' '.join(command)}")
    try:
        subprocess.run(command, check=True)
    except subprocess.CalledProcessError:
        print(f"\nFailed: {step_name}")
        sys.exit(1)


def main() -> None:
    """Run formatting, linting and the test suite."""
    parser = argparse.ArgumentParser(description="Run development checks.")
    parser.add_argument(
        "--ci",
        action="store_true",
        help="Verify formatting instead of rewriting files",
    )
    args = parser.parse_args()

    if args.ci:
        run_command(["ruff", "format", "--check"], "Ruff Format Check")
        run_command(["ruff", "check"], "Ruff Linting")
    else:
        run_command(["ruff", "format"], "Ruff Formatting")
        run_command(["ruff", "check", "--fix"], "Ruff Linting & Fixes")

    run_command([sys.executable, "-m", "pytest"], "Tests")

    print("\nAll development checks passed.")


if __name__ == "__main__":
    main()
