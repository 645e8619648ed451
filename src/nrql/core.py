"""
Core utilities and shared types for nrql CLI commands.

This module contains the error types, account configuration, and the
connection resolution shared by every query command.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("nrql-cli")

# ============================================================================
# Configuration
# ============================================================================

CONFIG_FILE = ".insights.yaml"
DEFAULT_URL = "https://insights-api.newrelic.com/"

# ============================================================================
# Errors
# ============================================================================


class NrqlError(Exception):
    """Base class for errors that end an nrql invocation."""


class InvalidArguments(NrqlError):
    """Conflicting or incomplete command-line arguments."""


class HomeDirNotFound(NrqlError):
    """The user's home directory could not be determined."""


class ConfigNotFound(NrqlError):
    """The account configuration file does not exist."""


class ConfigParseError(NrqlError):
    """The account configuration file is not valid."""


class NoAccountSpecified(NrqlError):
    """Neither --account nor a config default names an account."""


class UnknownAccount(NrqlError):
    """The requested account key is not in the configuration."""


class NetworkError(NrqlError):
    """The query request could not be sent or completed."""


class MalformedResponse(NrqlError):
    """The response body does not have the expected shape."""


class UnsupportedFormat(NrqlError):
    """The requested output format is not implemented."""


# ============================================================================
# Account Configuration
# ============================================================================


@dataclass(frozen=True)
class Account:
    """One named credential set from the config file."""

    account_id: str
    api_key: str
    url: str | None = None

    @classmethod
    def from_dict(cls, key: str, data: Any) -> Account:
        """Create from a YAML mapping, coercing scalar values to strings."""
        if not isinstance(data, dict):
            raise ConfigParseError(f"Account '{key}' must be a mapping")
        missing = [name for name in ("account_id", "api_key") if data.get(name) is None]
        if missing:
            raise ConfigParseError(f"Account '{key}' is missing {', '.join(missing)}")
        url = data.get("url")
        return cls(
            account_id=str(data["account_id"]),
            api_key=str(data["api_key"]),
            url=str(url) if url is not None else None,
        )


@dataclass(frozen=True)
class Config:
    """The account registry loaded from ~/.insights.yaml."""

    default: str | None = None
    accounts: dict[str, Account] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigParseError("Config must be a mapping with 'default' and 'accounts' keys")

        accounts_data = data.get("accounts") or {}
        if not isinstance(accounts_data, dict):
            raise ConfigParseError("'accounts' must be a mapping of account keys to accounts")

        default = data.get("default")
        return cls(
            default=str(default) if default is not None else None,
            accounts={
                str(key): Account.from_dict(str(key), value)
                for key, value in accounts_data.items()
            },
        )


def default_config_path(home: Path | None = None) -> Path:
    """Return the path of the account config file.

    Args:
        home: Home directory to use (default: the current user's)

    Raises:
        HomeDirNotFound: If the home directory cannot be determined
    """
    if home is None:
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as e:
            raise HomeDirNotFound(
                "Unable to find home directory for config. Must provide account_id and api_key!"
            ) from e
    return home / CONFIG_FILE


def load_config(path: Path) -> Config:
    """Load the account registry from a YAML file.

    Args:
        path: Path to the config file

    Returns:
        Config parsed from the file (empty if the file is empty)

    Raises:
        ConfigParseError: If the file cannot be read, is not valid YAML,
            or has the wrong shape
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Unable to parse {path}: {e}") from e
    except OSError as e:
        raise ConfigParseError(f"Unable to read {path}: {e}") from e
    return Config.from_dict(data)


# ============================================================================
# Connection Resolution
# ============================================================================


@dataclass(frozen=True)
class Connection:
    """Resolved credentials for one query session."""

    account_id: str
    api_key: str
    url: str = DEFAULT_URL

    @classmethod
    def from_account(cls, account: Account) -> Connection:
        return cls(
            account_id=account.account_id,
            api_key=account.api_key,
            url=account.url or DEFAULT_URL,
        )


def resolve_connection(
    account_id: str | None = None,
    api_key: str | None = None,
    url: str | None = None,
    account_key: str | None = None,
    config_path: Path | None = None,
) -> Connection:
    """Decide which account id, API key, and base URL to query with.

    Explicit credentials win outright and the config file is never read.
    Otherwise the account named by ``account_key`` (or the config default)
    is looked up in the config file. The two sources are never mixed.

    Args:
        account_id: Account ID from the command line
        api_key: Query key from the command line
        url: Base URL from the command line (explicit credentials only)
        account_key: Name of an account entry in the config file
        config_path: Config file to read (default: ~/.insights.yaml)

    Returns:
        The resolved Connection

    Raises:
        NrqlError: If the inputs or the config cannot produce a Connection
    """
    if account_id is not None and api_key is not None:
        logger.debug("Using account_id and api_key from the command line")
        return Connection(account_id=account_id, api_key=api_key, url=url or DEFAULT_URL)

    if account_id is not None or api_key is not None:
        raise InvalidArguments(
            "Either pass in both account_id and api_key or pull in both from the config."
        )

    if config_path is None:
        config_path = default_config_path()
    if not config_path.exists():
        raise ConfigNotFound(f"{config_path} does not exist. Must provide account_id and api_key!")

    logger.debug(f"Reading accounts from {config_path}")
    config = load_config(config_path)

    key = account_key if account_key is not None else config.default
    if key is None:
        raise NoAccountSpecified("No account specified!")

    account = config.accounts.get(key)
    if account is None:
        raise UnknownAccount(f"Unable to find account config for {key}!")

    logger.debug(f"Using account '{key}' ({account.account_id})")
    return Connection.from_account(account)
