"""
nrql commands module.

This module provides the command implementations for the nrql CLI.
"""

from nrql.commands.query_cmd import cmd_attrs, cmd_complete, cmd_run, cmd_types

__all__ = [
    "cmd_run",
    "cmd_types",
    "cmd_attrs",
    "cmd_complete",
]
