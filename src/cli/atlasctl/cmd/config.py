"""Configuration commands for the atlasctl CLI.

Handle configuration-related CLI commands.
"""

import os

import click

from atlasctl import utils
from atlasctl.core.context import AtlasContext
from atlasctl.settings import CONFIG_TEMPLATE


@click.command(
    "config",
    help="Edit the atlasctl config file (atlasctl.cfg).",
)
@click.option(
    "-r",
    "--reset",
    is_flag=True,
    default=False,
    help="Reset the config file with default values.",
)
@utils.exception_handler
@utils.pass_environment()
def cli(ctx: AtlasContext, reset: bool) -> None:
    """
    Edit or reset the atlasctl config file.

    Parameters
    ----------
    reset : bool
        If True, resets the config file with default values.
    """
    ctx.initialize(require_client=False)
    if os.path.isfile(ctx.config_file) and not reset:
        ctx.logger.debug(
            f"Opening existing config file at path: {ctx.config_file}",
        )
        edit_file(ctx)
    elif os.path.isfile(ctx.config_file) and reset:
        response = ctx.logger.prompt_msg("Configuration file exists. Overwrite? [Y/N]")
        if utils.validate_yes(response):
            write_template(ctx)
            edit_file(ctx)
        else:
            ctx.logger.info(f"Opted out of recreating {ctx.config_file}.")
    else:
        ctx.logger.debug(
            f"No config file found at path: {ctx.config_file}. "
            f"Creating template config file and opening for edits...",
        )
        write_template(ctx)
        edit_file(ctx)


def write_template(ctx: AtlasContext) -> None:
    """Write a template configuration file for the user."""
    os.makedirs(ctx.user_dir, exist_ok=True)
    with open(ctx.config_file, "w") as config_file:
        config_file.write(CONFIG_TEMPLATE.lstrip())


def edit_file(ctx: AtlasContext) -> None:
    """Open the config file for editing."""
    editor = ctx.env.get("TEXT_EDITOR") or None
    click.edit(
        filename=ctx.config_file,
        editor=editor,
    )
