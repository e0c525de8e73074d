"""Custom database role commands for the atlasctl CLI."""

import click

from atlasctl import utils
from atlasctl.core.context import AtlasContext
from atlasctl.core.errors import RemoteOperationError, UserError
from atlasctl.core.logging.logger import LogLevel
from atlasctl.core.resources.config import CustomDBRoleConfig, bind_role_config
from atlasctl.core.resources.custom_db_role import (
    ResourceState,
    flatten_actions,
    flatten_inherited_roles,
)
from atlasctl.core.state import encode_state_id

project_id_option = click.option(
    "-p",
    "--project-id",
    default="",
    type=str,
    help="Project (group) ID. Defaults to PROJECT_ID.",
)
json_option = click.option(
    "-j",
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print output as JSON.",
)
file_option = click.option(
    "-f",
    "--file",
    "file_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file defining the role.",
)


@click.group("role", help="Manage custom database roles.")
def cli() -> None:
    pass


@cli.command("create", help="Create a custom role from a YAML definition.")
@file_option
@project_id_option
@json_option
@utils.exception_handler
@utils.pass_environment()
def create(ctx: AtlasContext, file_path: str, project_id: str, as_json: bool) -> None:
    """Create a custom role and record it in the state file."""
    _initialize(ctx, as_json)
    config = bind_role_config(
        utils.load_yaml_file(file_path), project_id or ctx.env.get("PROJECT_ID")
    )
    identifier = _identifier(config.project_id, config.role_name)

    with ctx.logger.operation(f"Creating custom role {identifier}"):
        state = ctx.custom_db_roles.create(config)
    _record(ctx, state)
    ctx.logger.info(f"Created custom role {identifier}")
    utils.echo_data(state.attributes.to_attributes(), as_json)


@cli.command("update", help="Update a custom role from a YAML definition.")
@file_option
@project_id_option
@json_option
@utils.exception_handler
@utils.pass_environment()
def update(ctx: AtlasContext, file_path: str, project_id: str, as_json: bool) -> None:
    """
    Update a custom role.

    Actions and inherited roles are only sent when they differ from the
    attributes last recorded in the state file. Roles with no recorded
    state have both replaced.
    """
    _initialize(ctx, as_json)
    config = bind_role_config(
        utils.load_yaml_file(file_path), project_id or ctx.env.get("PROJECT_ID")
    )
    state_id = encode_state_id(
        {"project_id": config.project_id, "role_name": config.role_name}
    )
    recorded = ctx.state.get(state_id)
    prior = CustomDBRoleConfig.model_validate(recorded) if recorded else None
    if prior is None:
        ctx.logger.debug(
            f"No recorded state for {state_id}; replacing actions and inherited roles"
        )

    identifier = _identifier(config.project_id, config.role_name)
    with ctx.logger.operation(f"Updating custom role {identifier}"):
        state = ctx.custom_db_roles.update(state_id, config, prior=prior)
    _record(ctx, state)
    ctx.logger.info(f"Updated custom role {identifier}")
    utils.echo_data(state.attributes.to_attributes(), as_json)


@cli.command("show", help="Show a custom role.")
@click.argument("role_name")
@project_id_option
@json_option
@utils.exception_handler
@utils.pass_environment()
def show(ctx: AtlasContext, role_name: str, project_id: str, as_json: bool) -> None:
    """
    Fetch a custom role and refresh its recorded state.

    A role the API no longer knows is dropped from the state file.
    """
    _initialize(ctx, as_json)
    project_id = ctx.resolve_project_id(project_id)
    state_id = encode_state_id({"project_id": project_id, "role_name": role_name})
    try:
        state = ctx.custom_db_roles.read(state_id)
    except RemoteOperationError as e:
        if not e.not_found:
            raise
        if ctx.state.remove(state_id):
            ctx.logger.warn(
                f"Custom role {role_name} no longer exists. Removed it from "
                f"{ctx.state.path}."
            )
        raise UserError(
            f"Custom role {_identifier(project_id, role_name)} not found."
        ) from e

    _record(ctx, state)
    utils.echo_data(state.attributes.to_attributes(), as_json)


@cli.command("delete", help="Delete a custom role.")
@click.argument("role_name")
@project_id_option
@utils.exception_handler
@utils.pass_environment()
def delete(ctx: AtlasContext, role_name: str, project_id: str) -> None:
    """Delete a custom role and drop it from the state file."""
    _initialize(ctx)
    project_id = ctx.resolve_project_id(project_id)
    state_id = encode_state_id({"project_id": project_id, "role_name": role_name})
    identifier = _identifier(project_id, role_name)

    with ctx.logger.operation(f"Deleting custom role {identifier}"):
        ctx.custom_db_roles.delete(state_id)
    ctx.state.remove(state_id)
    ctx.logger.info(f"Deleted custom role {identifier}")


@cli.command(
    "import",
    help="Adopt an existing custom role. IMPORT_ID is {project_id}-{role_name}.",
)
@click.argument("import_id")
@json_option
@utils.exception_handler
@utils.pass_environment()
def import_role(ctx: AtlasContext, import_id: str, as_json: bool) -> None:
    """Import an existing custom role into the state file."""
    _initialize(ctx, as_json)
    state = ctx.custom_db_roles.import_state(import_id)
    _record(ctx, state)
    ctx.logger.info(
        f"Imported custom role "
        f"{_identifier(state.attributes.project_id, state.attributes.role_name)}"
    )
    utils.echo_data(state.attributes.to_attributes(), as_json)


@cli.command("list", help="List the custom roles of a project.")
@project_id_option
@json_option
@utils.exception_handler
@utils.pass_environment()
def list_roles(ctx: AtlasContext, project_id: str, as_json: bool) -> None:
    """List custom roles as the API reports them."""
    _initialize(ctx, as_json)
    project_id = ctx.resolve_project_id(project_id)
    roles, _ = ctx.client.custom_db_roles.list(project_id)
    ctx.logger.debug(f"Found {len(roles)} custom role(s) in project {project_id}")

    configs = [
        CustomDBRoleConfig(
            project_id=project_id,
            role_name=role.role_name,
            actions=flatten_actions(role.actions),
            inherited_roles=flatten_inherited_roles(role.inherited_roles),
        ).to_attributes()
        for role in roles
    ]
    utils.echo_data(configs, as_json)


def _initialize(ctx: AtlasContext, as_json: bool = False) -> None:
    # Keep stdout parseable in JSON mode
    ctx.initialize(log_level=LogLevel.ERROR if as_json else None)


def _record(ctx: AtlasContext, state: ResourceState) -> None:
    ctx.state.put(state.id, state.attributes.to_attributes())


def _identifier(project_id: str, role_name: str) -> str:
    return utils.generate_identifier({"project": project_id, "role": role_name})
