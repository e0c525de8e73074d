"""atlasctl CLI entrypoint."""

import pkgutil
from importlib import import_module
from typing import Optional

import click

from atlasctl import utils
from atlasctl.core.context import AtlasContext
from atlasctl.core.errors import UserError
from atlasctl.core.logging.logger import LogLevel

CMD_PACKAGE = "atlasctl.cmd"


class CommandLineInterface(click.Group):
    """Group that loads each command from a module in `atlasctl.cmd`.

    A module named `global_cluster.py` provides the `global-cluster`
    command through its module-level `cli` object.
    """

    def list_commands(self, ctx: click.Context) -> list[str]:
        cmd_package = import_module(CMD_PACKAGE)
        return sorted(
            info.name.replace("_", "-")
            for info in pkgutil.iter_modules(cmd_package.__path__)
            if not info.name.startswith("_")
        )

    def get_command(self, ctx: click.Context, name: str) -> Optional[click.Command]:
        commands = self.list_commands(ctx)
        try:
            utils.closest_match_or_error(name, commands, "command")
        except UserError as e:
            ctx.ensure_object(AtlasContext).logger.error(e.msg)
            ctx.exit(2)

        mod = import_module(f"{CMD_PACKAGE}.{name.replace('-', '_')}")
        cmd = getattr(mod, "cli", None)
        if not isinstance(cmd, click.Command):
            raise click.ClickException(
                f"Module {mod.__name__} defines no 'cli' command"
            )
        return cmd


@click.group(cls=CommandLineInterface)
@click.option(
    "--version",
    is_flag=True,
    help="Show the version and exit.",
    expose_value=False,
    is_eager=True,
    callback=lambda ctx, param, value: display_version(ctx) if value else None,
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.option(
    "--log-level",
    type=click.Choice(
        ["ERROR", "WARN", "INFO", "DEBUG"],
        case_sensitive=False,
    ),
    default="INFO",
    help="Set the minimum log level (ERROR, WARN, INFO, DEBUG).",
)
@click.option(
    "-e",
    "--env",
    default=[],
    type=str,
    multiple=True,
    help="Add or override environment variables.",
)
@utils.exception_handler
@utils.pass_environment()
def cli(
    ctx: AtlasContext,
    verbose: bool,
    log_level: str,
    env: list[str],
) -> None:
    """Welcome to the atlasctl command line interface.

    Manage custom database roles and Global Cluster settings through the
    management API.
    """
    ctx._user_env_args = list(env)
    ctx.user_log_level = LogLevel.DEBUG if verbose else LogLevel[log_level.upper()]


def display_version(ctx: click.Context) -> None:
    """Log the CLI version and exit."""
    atlas_ctx: AtlasContext = ctx.ensure_object(AtlasContext)
    atlas_ctx.logger.info(utils.cli_ver())
    ctx.exit()
