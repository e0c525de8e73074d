"""Core context and controls for the atlasctl CLI."""

import math
import os
from typing import Optional

from atlasctl.core.api.client import AtlasClient
from atlasctl.core.envvars import EnvironmentVariables
from atlasctl.core.errors import AtlasError, UserError
from atlasctl.core.logging.logger import AtlasLogger, LogLevel, configure_logging
from atlasctl.core.resources.custom_db_role import CustomDBRoleResource
from atlasctl.core.state import StateStore
from atlasctl.settings import (
    CONFIG_FILE,
    DEFAULT_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    STATE_FILE,
    USER_DIR,
)


class AtlasContext:
    """Expose context and core controls to CLI scripts.

    Attributes
    ----------
    logger : AtlasLogger
        Logs CLI activity.
    env : EnvironmentVariables
        CLI environment variables.
    client : AtlasClient
        Management API client. Set by `initialize()` unless the command
        does not talk to the API.
    state : StateStore
        Local record of managed resources.
    custom_db_roles : CustomDBRoleResource
        Custom DB role lifecycle operations bound to `client`.
    user_home_dir : str
        Home directory of the current user.
    user_dir : str
        Path to the `~/.atlasctl/` directory.
    config_file : str
        Path to the user's `atlasctl.cfg` file.

    Methods
    -------
    initialize(log_level=None, require_client=True)
        Hydrate the context with user-provided inputs.
    resolve_project_id(project_id="")
        Return the project to operate on.
    """

    logger: AtlasLogger
    env: Optional[EnvironmentVariables]
    client: Optional[AtlasClient]
    state: Optional[StateStore]
    custom_db_roles: Optional[CustomDBRoleResource]
    user_home_dir: str
    user_dir: str
    config_file: str

    def __init__(self):
        # ------------------------------
        # ---- User-provided inputs ----
        self._user_env_args = []
        self._user_log_level = LogLevel.INFO
        # ------------------------------

        self.logger = configure_logging()
        self.env = None
        self.client = None
        self.state = None
        self.custom_db_roles = None

        self.user_home_dir = os.path.expanduser("~")
        self.user_dir = os.path.abspath(os.path.join(self.user_home_dir, USER_DIR))
        self.config_file = os.path.join(self.user_dir, CONFIG_FILE)

        self._initialized = False

    def initialize(
        self, log_level: Optional[LogLevel] = None, require_client: bool = True
    ) -> None:
        """Initialize core CLI context attributes.

        Parameters
        ----------
        log_level : LogLevel, optional
            The log level to set for the logger.
        require_client : bool, optional
            If False, skip building the API client. Used by commands that
            only touch local files.

        Raises
        ------
        UserError
            If API credentials or the request timeout are missing or
            invalid.
        """
        if self._initialized:
            raise AtlasError("Context has already been initialized.")
        if log_level:
            self.logger.set_level(log_level)
        self.env = EnvironmentVariables(self)
        self.env._log_env_vars()
        self.state = StateStore(self._state_file())
        if require_client:
            self.client = self._build_client()
            self.custom_db_roles = CustomDBRoleResource(self.client)
        self._initialized = True

    @property
    def user_log_level(self) -> LogLevel:
        """The user-configured log level for this context."""
        return self._user_log_level

    @user_log_level.setter
    def user_log_level(self, value: LogLevel) -> None:
        self._user_log_level = value
        self.logger.set_level(value)

    def resolve_project_id(self, project_id: str = "") -> str:
        """
        Return the project to operate on.

        Parameters
        ----------
        project_id : str, optional
            Value of a `--project-id` option. Takes precedence over the
            `PROJECT_ID` environment variable.

        Raises
        ------
        UserError
            If no project ID is available.
        """
        project_id = project_id or (self.env.get("PROJECT_ID") if self.env else "")
        if not project_id:
            raise UserError(
                "A project ID is required for this operation.",
                "Pass --project-id or set PROJECT_ID in the environment or in "
                "atlasctl.cfg.",
            )
        return project_id

    def _state_file(self) -> str:
        """Return the path to the state file."""
        state_file = self.env.get("STATE_FILE")
        if state_file:
            return os.path.abspath(os.path.expanduser(state_file))
        return os.path.join(self.user_dir, STATE_FILE)

    def _build_client(self) -> AtlasClient:
        """Build the API client from environment variables."""
        public_key = self.env.get("ATLAS_PUBLIC_KEY")
        private_key = self.env.get("ATLAS_PRIVATE_KEY")
        if not public_key or not private_key:
            raise UserError(
                "ATLAS_PUBLIC_KEY and ATLAS_PRIVATE_KEY must be set.",
                "Run 'atlasctl config' to add your API key pair to atlasctl.cfg, "
                "or pass them with -e.",
            )

        timeout_str = self.env.get("REQUEST_TIMEOUT")
        try:
            timeout = float(timeout_str) if timeout_str else DEFAULT_REQUEST_TIMEOUT
        except ValueError as e:
            raise UserError(
                f"Invalid REQUEST_TIMEOUT value: {timeout_str}",
                "REQUEST_TIMEOUT must be a number of seconds.",
            ) from e
        if not math.isfinite(timeout) or timeout <= 0:
            raise UserError(f"REQUEST_TIMEOUT must be positive, got: {timeout_str}")

        base_url = self.env.get("ATLAS_BASE_URL") or DEFAULT_BASE_URL
        self.logger.debug(f"API base URL set to: {base_url}")
        return AtlasClient(
            base_url=base_url,
            public_key=public_key,
            private_key=private_key,
            timeout=timeout,
        )
