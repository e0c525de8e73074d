"""Environment variable utilities for atlasctl."""

from __future__ import annotations

import os
from configparser import ConfigParser
from typing import TYPE_CHECKING, Any

from atlasctl import utils
from atlasctl.settings import CONFIG_TEMPLATE, SHELL_SOURCE

if TYPE_CHECKING:
    from atlasctl.core.context import AtlasContext


class EnvironmentVariables(dict):
    """atlasctl environment variables.

    Parameters
    ----------
    ctx : AtlasContext
        An instantiated AtlasContext object containing user input and
        context.

    Methods
    -------
    get(key, default=None)
        Get an environment variable. Always returns a string.

    Examples
    --------
    >>> project_id = ctx.env.get("PROJECT_ID")

    Notes
    -----
    This class bundles all environment variables used by atlasctl,
    combining user-provided input, OS environment variables, and values
    from the atlasctl.cfg file, in that order of precedence.
    """

    def __init__(self, ctx: AtlasContext) -> None:
        super().__init__()
        self._ctx = ctx
        self._parse_user_env_args()
        self._parse_os_env()
        self._parse_config_file()

    def get(self, key: Any, default: Any = None) -> str:
        """Return the value for a given environment variable key.

        Parameters
        ----------
        key : Any
            The environment variable key.
        default : Any, optional
            The default value to return if the key is not found.
            Defaults to None.

        Returns
        -------
        str
            The value for the given key, or an empty string.
        """
        val = super().get(key, default)
        return str(val) if val is not None else ""

    def _strip_quotes(self, value: str) -> str:
        """Strip matching surrounding quotes from a config file value."""
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            return value[1:-1]
        return value

    def _parse_user_env_args(self) -> None:
        """Parse variables passed with `-e KEY=VALUE`.

        Notes
        -----
        This is the highest-precedence source.
        """
        for env_var in self._ctx._user_env_args:
            k, v = utils.parse_key_value_pair(env_var, hard_fail=True)
            self[k.upper()] = str(v)

    def _parse_os_env(self) -> None:
        """Parse whitelisted environment variables from the user's shell.

        Notes
        -----
        These variables take second precedence. Only keys listed in
        `SHELL_SOURCE` are read.
        """
        for k, v in os.environ.items():
            k = k.upper()
            if k in SHELL_SOURCE and not self.get(k):
                self[k] = str(v)

    def _parse_config_file(self) -> None:
        """Parse the `[config]` section of the user's `atlasctl.cfg` file.

        Notes
        -----
        These values take third precedence. Keys are converted to
        uppercase and existing values are not overridden. A missing file
        is skipped silently; a malformed one logs a warning.
        """
        if not os.path.isfile(self._ctx.config_file):
            return

        try:
            config = ConfigParser(interpolation=None)
            config.optionxform = str
            config.read(self._ctx.config_file)
            for k, v in config.items("config"):
                if not self.get(k.upper()) and v:
                    self[k.upper()] = self._strip_quotes(str(v))
        except Exception as e:
            self._ctx.logger.warn(
                f"Failed to parse config file {self._ctx.config_file} with error:"
                f"\n{str(e)}\n"
                f"Variables set in the config file will not be loaded. You can "
                f"reset your configuration file with atlasctl config --reset or "
                f"edit it manually with atlasctl config. The valid config file "
                f"structure is:\n"
                f"{CONFIG_TEMPLATE}"
            )

    def _log_env_vars(self) -> None:
        """Log the registered variables at debug level with secrets masked."""
        if not self:
            return
        sorted_items = sorted(self.items())
        max_key_len = max(len(str(k)) for k, _ in sorted_items)
        env_lines = []
        for k, v in sorted_items:
            spaces = " " * (max_key_len - len(str(k)) + 4)
            env_lines.append(f"\t{k}{spaces}{utils.scrub(str(k), str(v))}")
        env_block = "\n".join(env_lines)
        self._ctx.logger.debug(f"Registered environment variables:\n{env_block}")
