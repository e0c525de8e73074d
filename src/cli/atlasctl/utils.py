"""Utility functions for the atlasctl CLI and core operations."""

from __future__ import annotations

import difflib
import json
import logging
from functools import wraps
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Dict, Optional
from urllib.parse import quote

import yaml
from click import ClickException, echo, make_pass_decorator
from click.exceptions import Exit

from atlasctl.core.errors import AtlasError, RemoteOperationError, UserError
from atlasctl.core.logging.logger import get_logger
from atlasctl.settings import SCRUB_KEYS, SCRUBBED


# ----------------------------------------------------------------------
# CLI Decorators & Exception Handling
# ----------------------------------------------------------------------
def pass_environment() -> Any:
    """
    Return a Click pass decorator for the AtlasContext.

    Returns
    -------
    Any
        A decorator that passes the AtlasContext instance.
    """
    from atlasctl.core.context import AtlasContext

    return make_pass_decorator(AtlasContext, ensure=True)


def handle_exception(error: BaseException, ctx: Optional[Any] = None) -> None:
    """
    Log an exception raised by a command and exit.

    User errors and API failures are expected outcomes and are logged as
    a single message. Other `AtlasError`s include the traceback at debug
    level. Anything else is a bug and always logs the traceback.

    Parameters
    ----------
    error : BaseException
        The exception object.
    ctx : Any, optional
        CLI context whose logger to use. Defaults to the atlasctl logger.

    Raises
    ------
    SystemExit
        With the error's exit code, or 1 for unexpected errors.
    """
    logger = getattr(ctx, "logger", None) or get_logger()
    exc_info = (type(error), error, error.__traceback__)

    if isinstance(error, (UserError, RemoteOperationError)):
        logger.error(error.msg)
    elif isinstance(error, AtlasError):
        debug = logger.isEnabledFor(logging.DEBUG)
        logger.error(error.msg, exc_info=exc_info if debug else None)
    else:
        logger.error(
            f"Unexpected error: {type(error).__name__}: {error}",
            exc_info=exc_info,
        )
    raise SystemExit(getattr(error, "exit_code", 1))


def exception_handler(func: Any) -> Any:
    """
    Route exceptions escaping a command through `handle_exception`.

    Click's own exceptions and `SystemExit` pass through untouched so
    click can render usage errors and exit codes itself.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (SystemExit, ClickException, Exit):
            raise
        except Exception as e:
            ctx = next((a for a in args if hasattr(a, "logger")), None)
            handle_exception(e, ctx)

    return wrapper


# ----------------------------------------------------------------------
# Miscellaneous
# ----------------------------------------------------------------------
def generate_identifier(identifiers: Optional[Dict[str, Any]] = None) -> str:
    """
    Return an object identifier string used for creating log messages.

    Parameters
    ----------
    identifiers : Optional[Dict[str, Any]], optional
        Dictionary of "identifier_key": "identifier_value" pairs, by
        default None.

    Returns
    -------
    str
        Formatted string with identifiers enclosed in brackets.

    Examples
    --------
    >>> generate_identifier({"project": "5e2211c1", "role": "reader"})
    '[project: 5e2211c1] [role: reader]'
    """
    if identifiers is None:
        identifiers = {}
    return " ".join(f"[{key}: {value}]" for key, value in identifiers.items())


def scrub(key: str, value: str) -> str:
    """
    Mask a value if its key looks like a secret.

    Parameters
    ----------
    key : str
        Variable name, e.g. `ATLAS_PRIVATE_KEY`.
    value : str
        Variable value.

    Returns
    -------
    str
        `SCRUBBED` if the key ends with one of `SCRUB_KEYS` and the value
        is non-empty, otherwise the value unchanged.
    """
    if value and any(key.lower().endswith(k) for k in SCRUB_KEYS):
        return SCRUBBED
    return value


def path_escape(value: str) -> str:
    """Escape a value for use as a single URL path segment."""
    return quote(value, safe="")


def echo_data(data: Any, as_json: bool = False) -> None:
    """
    Print structured data to stdout.

    Parameters
    ----------
    data : Any
        JSON-compatible data (dicts, lists, scalars).
    as_json : bool, optional
        Print indented JSON instead of YAML, by default `False`.
    """
    if as_json:
        echo(json.dumps(data, indent=2))
    else:
        echo(yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip())


# ----------------------------------------------------------------------
# Parsing & Validation Utilities
# ----------------------------------------------------------------------
def load_yaml_file(path: str) -> Any:
    """
    Load a YAML file.

    Parameters
    ----------
    path : str
        Path to the file.

    Returns
    -------
    Any
        The parsed document.

    Raises
    ------
    UserError
        If the file cannot be read or is not valid YAML.
    """
    try:
        with open(path, "r") as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise UserError(f"Failed to read {path}: {str(e)}") from e
    except yaml.YAMLError as e:
        raise UserError(
            f"Failed to parse {path}:\n{str(e)}",
            "The file must contain a single YAML mapping.",
        ) from e


def parse_key_value_pair(pair: str, hard_fail: bool = False) -> tuple[str, str]:
    """
    Parse a key-value pair from a string.

    Parameters
    ----------
    pair : str
        Key-value pair to parse, e.g. `PROJECT_ID=5e2211c1`.
    hard_fail : bool, optional
        Whether to raise an error if the key-value pair is invalid,
        by default `False`.

    Returns
    -------
    tuple[str, str]
        Tuple of key and value. Invalid pairs yield empty strings when
        `hard_fail` is False.

    Raises
    ------
    UserError
        If `hard_fail` is True and the pair is malformed.
    """
    pair = pair.strip()
    if "=" not in pair:
        if hard_fail:
            raise UserError(f"Invalid key-value pair: {pair}")
        return "", ""
    key, value = pair.split("=", 1)
    key, value = key.strip(), value.strip()
    if (not key or not value) and hard_fail:
        raise UserError(f"Invalid key-value pair: {pair}")
    return key, value


def closest_match_or_error(
    name: str, valid_names: list[str], context: str = "item"
) -> str:
    """
    Return the name or fail with a closest match suggestion.

    Parameters
    ----------
    name : str
        The user-provided name to validate.
    valid_names : list[str]
        List of valid names to check against.
    context : str, optional
        Context string for error message (default: "item").

    Returns
    -------
    str
        The valid name (if found).

    Raises
    ------
    UserError
        If the name is not valid, with a suggestion if available.

    Examples
    --------
    >>> closest_match_or_error('rol', ['role', 'config'], 'command')
    UserError: Command 'rol' not found. Did you mean 'role'?
    """
    if name in valid_names:
        return name
    suggestion = difflib.get_close_matches(name, valid_names, n=1)
    suggestion_msg = f" Did you mean '{suggestion[0]}'?" if suggestion else ""
    raise UserError(f"{context.capitalize()} '{name}' not found.{suggestion_msg}")


def validate_yes(value: str) -> bool:
    """
    Validate if the input is an affirmative response.

    Parameters
    ----------
    value : str
        Value to validate.

    Returns
    -------
    bool
        `True` if the input is 'y' or 'yes' (case-insensitive), `False`
        otherwise.
    """
    response = value.replace(" ", "").lower()
    return response in ("y", "yes")


# ----------------------------------------------------------------------
# Version Helpers
# ----------------------------------------------------------------------
def cli_ver() -> str:
    """
    Return the CLI version.

    Returns
    -------
    str
        CLI version, or "unknown" when running from an uninstalled tree.
    """
    try:
        return version("atlasctl")
    except PackageNotFoundError:
        return "unknown"
