"""Shared fixtures for nrql tests."""

import logging
import shutil
import tempfile
from pathlib import Path

import pytest

from nrql.client import QueryResult

SAMPLE_CONFIG = """\
default: prod
accounts:
  prod:
    account_id: "1"
    api_key: k
  staging:
    account_id: "2"
    api_key: staging-key
    url: https://staging-insights.example.com/
"""

EVENTS_RESPONSE = """\
{"results": [{"events": [{"a": "1", "bb": "22"}, {"a": "333", "bb": "4"}]}]}
"""


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers main() attaches so they don't outlive capsys streams."""
    yield
    nrql_logger = logging.getLogger("nrql-cli")
    for handler in list(nrql_logger.handlers):
        nrql_logger.removeHandler(handler)
    nrql_logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmp = tempfile.mkdtemp()
    yield Path(tmp)
    shutil.rmtree(tmp)


@pytest.fixture
def fake_home(temp_dir, monkeypatch):
    """Point the home directory at an empty temp directory."""
    monkeypatch.setenv("HOME", str(temp_dir))
    return temp_dir


@pytest.fixture
def config_home(fake_home):
    """A home directory with a sample ~/.insights.yaml."""
    (fake_home / ".insights.yaml").write_text(SAMPLE_CONFIG)
    return fake_home


@pytest.fixture
def fake_query(monkeypatch):
    """Replace the HTTP call made by commands with a canned response.

    Returns the list of (connection, nrql) calls; set ``calls.response``
    to change the body returned.
    """

    class Calls(list):
        response = EVENTS_RESPONSE

    calls = Calls()

    def _run_query(connection, nrql, client=None):
        print(nrql)
        calls.append((connection, nrql))
        return QueryResult(raw=calls.response)

    monkeypatch.setattr("nrql.commands.query_cmd.run_query", _run_query)
    return calls
