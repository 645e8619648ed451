"""
nrql - NRQL query client

Run NRQL queries against the Insights query API and render the results.

Example usage:
    from nrql import format_result, resolve_connection, run_query
    from nrql.render import OutputFormat

    # Use the default account from ~/.insights.yaml
    connection = resolve_connection()
    result = run_query(connection, "show event types")
    print(format_result(result.raw, OutputFormat.TABLE))
"""

__version__ = "0.1.0"

from nrql.client import QueryResult, run_query
from nrql.core import Connection, NrqlError, resolve_connection
from nrql.render import OutputFormat, format_result

__all__ = [
    "Connection",
    "NrqlError",
    "OutputFormat",
    "QueryResult",
    "format_result",
    "resolve_connection",
    "run_query",
    "__version__",
]
