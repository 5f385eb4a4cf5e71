#!/usr/bin/env python3
"""Generate man page(s) for romodoro from the Typer/Click app definition.

Usage:
    uv run scripts/generate_man.py [--output-dir DIR]

The generated file is written to man/man1/romodoro.1 by default.
"""

import argparse
import sys
from pathlib import Path

import typer
from click_man.core import write_man_pages

from romodoro import __version__
from romodoro.main import app

repo_root = Path(__file__).parent.parent


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate romodoro man page.")
    parser.add_argument(
        "--output-dir",
        default=str(repo_root / "man" / "man1"),
        help="Directory to write generated man page(s) into (default: man/man1/)",
    )
    args = parser.parse_args()

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    click_app = typer.main.get_command(app)
    write_man_pages(
        name="romodoro",
        cli=click_app,
        version=__version__,
        target_dir=str(output_dir),
    )

    generated = output_dir / "romodoro.1"
    if generated.exists():
        print(f"Man page written to: {generated}")
    else:
        print("Warning: expected output file not found.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
