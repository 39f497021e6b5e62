"""Wren CLI: route listing and schema export.

Entry point registered as ``wren`` in ``pyproject.toml``::

    [project.scripts]
    wren = "wren.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wren`` command."""
    parser = argparse.ArgumentParser(
        prog="wren",
        description="Wren: class-based JSON handlers with typed binding and OpenAPI output.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- wren routes ------------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )

    # -- wren schema ------------------------------------------------------
    schema_parser = subparsers.add_parser("schema", help="Print the OpenAPI document")
    schema_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )
    schema_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )
    schema_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write to a file instead of stdout",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from wren.cli._routes import run_routes

        run_routes(args)
    elif args.command == "schema":
        from wren.cli._schema import run_schema

        run_schema(args)
