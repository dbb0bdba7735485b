"""Sleepy CLI — serve an API from an import string.

Entry point registered as ``sleepy`` in ``pyproject.toml``::

    [project.scripts]
    sleepy = "sleepy.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``sleepy`` command."""
    parser = argparse.ArgumentParser(
        prog="sleepy",
        description="Sleepy — a small HTTP router for resource objects.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- sleepy run -------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start serving an API")
    run_parser.add_argument(
        "api",
        help="Import string (e.g. myapp:api)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count (0=auto-detect)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from sleepy.cli._run import run_api

        run_api(args)
