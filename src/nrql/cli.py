"""
nrql CLI - NRQL query command-line interface.

Usage:
    nrql [global flags] run <nrql>                     Run an NRQL query
    nrql [global flags] types                          List event types
    nrql [global flags] attrs <type>                   List attributes of an event type
    nrql [global flags] complete <type> <attr> [part]  List values of an attribute

Global flags:
    -a, --account KEY      Account entry in ~/.insights.yaml (default: its 'default')
    -i, --account_id ID    Account ID (requires --api_key)
    -k, --api_key KEY      Query key (requires --account_id)
    -u, --url URL          Base API URL when passing --account_id/--api_key

Output flags (per command, pick one):
    --table (default), --json, --raw, --csv

Examples:
    nrql types
    nrql -a staging attrs Transaction
    nrql run "select count(*) from Transaction since 1 hour ago" --json
    nrql complete Transaction appName prod
"""

from __future__ import annotations

import argparse
import logging
import sys

from nrql import __version__
from nrql.commands import cmd_attrs, cmd_complete, cmd_run, cmd_types
from nrql.core import NrqlError

__all__ = ["build_parser", "main"]

logger = logging.getLogger("nrql-cli")


def _setup_logging() -> None:
    """Configure the nrql logger with stderr handler."""
    nrql_logger = logging.getLogger("nrql-cli")
    for old in list(nrql_logger.handlers):
        nrql_logger.removeHandler(old)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    nrql_logger.addHandler(handler)
    # Default level is WARNING (quiet), changed by --verbose
    nrql_logger.setLevel(logging.WARNING)


def _add_format_flags(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--raw", action="store_true", help="Return raw query output")
    group.add_argument("--json", action="store_true", help="Format output as json")
    group.add_argument("--csv", action="store_true", help="Format output as CSV")
    group.add_argument("--table", action="store_true", help="Format output as table (default)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nrql",
        description="Runs a NRQL query",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    # Global flags
    parser.add_argument("--account", "-a", help="Account Config Key")
    parser.add_argument("--account_id", "-i", help="Account ID")
    parser.add_argument("--api_key", "-k", help="API Key")
    parser.add_argument(
        "--url",
        "-u",
        help="Base API URL for --account_id/--api_key (default: https://insights-api.newrelic.com/)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show request details")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # run
    p_run = subparsers.add_parser("run", help="Run an Insights query")
    p_run.add_argument("nrql", nargs="+", help="The NRQL to run")
    _add_format_flags(p_run)
    p_run.set_defaults(func=cmd_run)

    # types
    p_types = subparsers.add_parser(
        "types", help="Returns the list of known types for the account."
    )
    _add_format_flags(p_types)
    p_types.set_defaults(func=cmd_types)

    # attrs
    p_attrs = subparsers.add_parser(
        "attrs", help="Returns the list of known attributes for the event type."
    )
    p_attrs.add_argument("type", help="The type for which to display attributes")
    _add_format_flags(p_attrs)
    p_attrs.set_defaults(func=cmd_attrs)

    # complete
    p_complete = subparsers.add_parser("complete", help="Returns a list of valid completions")
    p_complete.add_argument("type", help="The event type containing the attribute to complete")
    p_complete.add_argument("attr", help="The attribute to complete")
    p_complete.add_argument("partial", nargs="?", help="The partial text to complete")
    _add_format_flags(p_complete)
    p_complete.set_defaults(func=cmd_complete)

    return parser


def main(argv: list[str] | None = None) -> None:
    _setup_logging()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logger.setLevel(logging.DEBUG)

    try:
        args.func(args)
    except NrqlError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
