"""
Query commands for nrql CLI.

Maps each subcommand to its NRQL text, runs it against the resolved
connection, and prints the formatted result.
"""

from __future__ import annotations

import argparse

from nrql.client import run_query
from nrql.core import Connection, resolve_connection
from nrql.render import OutputFormat, format_result

SINCE = "since 1 week ago"


def types_query() -> str:
    return "show event types"


def attrs_query(event_type: str) -> str:
    """NRQL listing the attribute names of an event type."""
    return f"select keyset() from {event_type} {SINCE}"


def complete_query(event_type: str, attr: str, partial: str | None = None) -> str:
    """NRQL listing known values of an attribute, optionally by prefix.

    Identifiers and the prefix are interpolated as-is; the server reports
    any resulting syntax error.
    """
    query = f"select uniques({attr}) from {event_type}"
    if partial is not None:
        query += f" where {attr} like '{partial}%'"
    return f"{query} {SINCE}"


def get_connection_for_args(args: argparse.Namespace) -> Connection:
    """Resolve the connection from the global CLI flags."""
    return resolve_connection(
        account_id=getattr(args, "account_id", None),
        api_key=getattr(args, "api_key", None),
        url=getattr(args, "url", None),
        account_key=getattr(args, "account", None),
    )


def execute_query(args: argparse.Namespace, nrql: str) -> None:
    """Run a query and print it in the format selected by the flags."""
    connection = get_connection_for_args(args)
    result = run_query(connection, nrql)
    output = format_result(result.raw, OutputFormat.from_args(args))
    if output:
        print(output)


def cmd_run(args: argparse.Namespace) -> None:
    """Run an NRQL query."""
    execute_query(args, " ".join(args.nrql))


def cmd_types(args: argparse.Namespace) -> None:
    """List the event types known to the account."""
    execute_query(args, types_query())


def cmd_attrs(args: argparse.Namespace) -> None:
    """List the attributes of an event type."""
    execute_query(args, attrs_query(args.type))


def cmd_complete(args: argparse.Namespace) -> None:
    """List completions for an attribute value."""
    execute_query(args, complete_query(args.type, args.attr, args.partial))
