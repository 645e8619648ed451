"""
Result rendering for nrql query responses.

Responses are schema-less JSON. The query API wraps results in an envelope
of the form ``{"results": [{"<events|eventTypes|...>": [...]}]}``; the
table and JSON formats unwrap it, the raw format prints the whole body.
"""

from __future__ import annotations

import argparse
import json
from enum import Enum
from typing import Any

from nrql.core import MalformedResponse, UnsupportedFormat

UNEXPECTED_TYPE = "Unexpected type in result!"


class OutputFormat(Enum):
    RAW = "raw"
    JSON = "json"
    CSV = "csv"
    TABLE = "table"

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> OutputFormat:
        """Pick a format from selector flags (JSON > CSV > RAW > TABLE)."""
        if getattr(args, "json", False):
            return cls.JSON
        if getattr(args, "csv", False):
            return cls.CSV
        if getattr(args, "raw", False):
            return cls.RAW
        return cls.TABLE


def _reject_constant(name: str) -> Any:
    raise MalformedResponse(f"Response is not valid JSON: {name} is not a JSON value")


def parse_response(raw: str) -> Any:
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Response is not valid JSON: {e}") from e


def extract_results(raw: str) -> list[Any]:
    """Unwrap the result array from a response envelope.

    Args:
        raw: Response body text

    Returns:
        The array held by the single property of the first result

    Raises:
        MalformedResponse: If the body does not match the envelope shape
    """
    data = parse_response(raw)
    if not isinstance(data, dict):
        raise MalformedResponse("Response is not a JSON object")

    results = data.get("results")
    if not isinstance(results, list) or not results:
        if "error" in data:
            raise MalformedResponse(f"Query failed: {data['error']}")
        raise MalformedResponse("Response has no results")

    first = results[0]
    if not isinstance(first, dict) or not first:
        raise MalformedResponse("First result is not an object with a result list")

    value = next(iter(first.values()))
    if not isinstance(value, list):
        raise MalformedResponse("First result does not hold a list")
    return value


def cell_text(value: Any) -> str:
    """Display text of a JSON value: its JSON form minus surrounding quotes."""
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def format_table(values: list[Any]) -> str:
    """Format a result list as left-aligned columns.

    Strings are emitted on their own line. Objects become rows whose
    columns are their keys; the first object's keys are the header. Widths
    are measured over every row before anything is printed.
    """
    lines: list[str] = []
    rows: list[list[str]] = []
    widths: list[int] = []

    for value in values:
        if isinstance(value, str):
            lines.append(value)
        elif isinstance(value, dict):
            if not rows:
                rows.append([str(key) for key in value])
            rows.append([cell_text(v) for v in value.values()])
        else:
            lines.append(UNEXPECTED_TYPE)

    for row in rows:
        for i, cell in enumerate(row):
            if i < len(widths):
                widths[i] = max(widths[i], len(cell))
            else:
                widths.append(len(cell))

    for row in rows:
        lines.append("".join(f"{cell:<{widths[i]}} " for i, cell in enumerate(row)))

    return "\n".join(lines)


def format_result(raw: str, output_format: OutputFormat = OutputFormat.TABLE) -> str:
    """Format a response body for output.

    Args:
        raw: Response body text
        output_format: One of the OutputFormat members

    Returns:
        Formatted string output

    Raises:
        UnsupportedFormat: For CSV output
        MalformedResponse: If the body cannot be rendered in the format
    """
    if output_format is OutputFormat.CSV:
        raise UnsupportedFormat("Unimplemented Output Format: CSV")
    if output_format is OutputFormat.RAW:
        return json.dumps(parse_response(raw), indent=2, ensure_ascii=False)
    if output_format is OutputFormat.JSON:
        return json.dumps(extract_results(raw), indent=2, ensure_ascii=False)
    return format_table(extract_results(raw))
