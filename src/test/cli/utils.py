"""Utility functions for atlasctl tests."""

import logging
from typing import Optional

from click.testing import CliRunner, Result

from atlasctl.cli import cli
from constants import ROLE_NAME

logger = logging.getLogger("atlasctl.test")


def cli_cmd(cmd: list[str], input: Optional[str] = None) -> Result:
    """
    Log and execute a CLI command.

    Parameters
    ----------
    cmd : list[str]
        The command and arguments to invoke.
    input : str | None
        Input string to pass to the command (for prompts, etc.).

    Returns
    -------
    Result
        The click result, with output and exit code.
    """
    logger.debug(f"Running command: atlasctl {' '.join(cmd)}")
    result = CliRunner().invoke(cli, cmd, input=input)
    logger.debug(f"Exit code {result.exit_code}, output:\n{result.output}")
    return result


def role_body(role_name: str = ROLE_NAME, **overrides) -> dict:
    """Return a custom role as the API sends it."""
    body = {
        "roleName": role_name,
        "actions": [
            {
                "action": "FIND",
                "resources": [{"db": "reporting", "collection": "events"}],
            },
            {"action": "LIST_DATABASES", "resources": [{"cluster": True}]},
        ],
        "inheritedRoles": [{"db": "admin", "role": "read"}],
    }
    body.update(overrides)
    return body


def role_definition(role_name: str = ROLE_NAME, **overrides) -> dict:
    """Return the YAML-level definition matching `role_body`."""
    definition = {
        "role_name": role_name,
        "actions": [
            {
                "action": "FIND",
                "resources": [
                    {"database_name": "reporting", "collection_name": "events"}
                ],
            },
            {"action": "LIST_DATABASES", "resources": [{"cluster": True}]},
        ],
        "inherited_roles": [{"database_name": "admin", "role_name": "read"}],
    }
    definition.update(overrides)
    return definition


def global_cluster_body(**overrides) -> dict:
    """Return a global writes configuration as the API sends it."""
    body = {
        "customZoneMapping": {"US": "5b8d7d6b0f3e4c0f1a2b3c4d"},
        "managedNamespaces": [
            {"db": "sales", "collection": "orders", "customShardKey": "region"}
        ],
    }
    body.update(overrides)
    return body
