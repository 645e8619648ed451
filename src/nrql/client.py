"""
Query client for the Insights query API.

Builds the request URL for an NRQL query and performs the HTTP call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote_plus

import httpx

from nrql.core import Connection, NetworkError

logger = logging.getLogger("nrql-cli")

DEFAULT_TIMEOUT = 30.0


@dataclass
class QueryResult:
    """Raw response from one query."""

    raw: str
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def build_query_url(connection: Connection, nrql: str) -> str:
    """Build the query endpoint URL with the NRQL form-encoded."""
    return f"{connection.url}v1/accounts/{connection.account_id}/query?nrql={quote_plus(nrql)}"


def build_headers(connection: Connection) -> dict[str, str]:
    return {
        "Accept": "application/json",
        "X-Query-Key": connection.api_key,
    }


def run_query(
    connection: Connection,
    nrql: str,
    client: httpx.Client | None = None,
) -> QueryResult:
    """Run an NRQL query and return the response body.

    The query text is echoed to stdout before the request is sent. Any
    response body is returned regardless of status; non-2xx statuses are
    only logged.

    Args:
        connection: Resolved credentials
        nrql: Query text (unencoded)
        client: HTTP client to use (default: a new client per call)

    Returns:
        QueryResult with the response text

    Raises:
        NetworkError: If the request fails in transport
    """
    url = build_query_url(connection, nrql)
    print(nrql)
    logger.debug(f"GET {url}")

    try:
        if client is not None:
            response = client.get(url, headers=build_headers(connection))
        else:
            with httpx.Client(timeout=httpx.Timeout(DEFAULT_TIMEOUT)) as own_client:
                response = own_client.get(url, headers=build_headers(connection))
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise NetworkError(f"Request to {connection.url} failed: {e}") from e

    result = QueryResult(raw=response.text, status_code=response.status_code)
    if not result.ok:
        logger.warning(f"Query returned HTTP {response.status_code}")
    return result
