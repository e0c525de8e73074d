"""Global Cluster commands for the atlasctl CLI."""

import click

from atlasctl import utils
from atlasctl.core.api.models import (
    CustomZoneMapping,
    CustomZoneMappingsRequest,
    GlobalCluster,
    ManagedNamespace,
)
from atlasctl.core.context import AtlasContext
from atlasctl.core.errors import UserError
from atlasctl.core.logging.logger import LogLevel

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


@click.group(
    "global-cluster",
    help="Manage managed namespaces and custom zone mappings of a Global Cluster.",
)
def cli() -> None:
    pass


@cli.command("get", help="Show the managed namespaces and custom zone mappings.")
@click.argument("cluster_name")
@project_id_option
@json_option
@utils.exception_handler
@utils.pass_environment()
def get(ctx: AtlasContext, cluster_name: str, project_id: str, as_json: bool) -> None:
    project_id = _initialize(ctx, project_id, as_json)
    cluster, _ = ctx.client.global_clusters.get(project_id, cluster_name)
    _echo_cluster(cluster, as_json)


@cli.command("add-namespace", help="Add a managed namespace.")
@click.argument("cluster_name")
@click.option("--db", required=True, type=str, help="Database name.")
@click.option("--collection", required=True, type=str, help="Collection name.")
@click.option(
    "--custom-shard-key",
    default=None,
    type=str,
    help="Custom shard key for the collection.",
)
@project_id_option
@json_option
@utils.exception_handler
@utils.pass_environment()
def add_namespace(
    ctx: AtlasContext,
    cluster_name: str,
    db: str,
    collection: str,
    custom_shard_key: str,
    project_id: str,
    as_json: bool,
) -> None:
    project_id = _initialize(ctx, project_id, as_json)
    namespace = ManagedNamespace(
        db=db, collection=collection, custom_shard_key=custom_shard_key
    )
    with ctx.logger.operation(f"Adding managed namespace {db}.{collection}"):
        cluster, _ = ctx.client.global_clusters.add_managed_namespace(
            project_id, cluster_name, namespace
        )
    ctx.logger.info(f"Added managed namespace {db}.{collection} to {cluster_name}")
    _echo_cluster(cluster, as_json)


@cli.command("delete-namespace", help="Remove a managed namespace.")
@click.argument("cluster_name")
@click.option("--db", required=True, type=str, help="Database name.")
@click.option("--collection", required=True, type=str, help="Collection name.")
@project_id_option
@json_option
@utils.exception_handler
@utils.pass_environment()
def delete_namespace(
    ctx: AtlasContext,
    cluster_name: str,
    db: str,
    collection: str,
    project_id: str,
    as_json: bool,
) -> None:
    project_id = _initialize(ctx, project_id, as_json)
    namespace = ManagedNamespace(db=db, collection=collection)
    with ctx.logger.operation(f"Removing managed namespace {db}.{collection}"):
        cluster, _ = ctx.client.global_clusters.delete_managed_namespace(
            project_id, cluster_name, namespace
        )
    ctx.logger.info(f"Removed managed namespace {db}.{collection} from {cluster_name}")
    _echo_cluster(cluster, as_json)


@cli.command(
    "add-zone-mapping",
    help="Map locations to zones. Pass -m LOCATION=ZONE once per mapping.",
)
@click.argument("cluster_name")
@click.option(
    "-m",
    "--mapping",
    "mappings",
    required=True,
    multiple=True,
    type=str,
    help="Location to zone mapping, e.g. US=Zone 1.",
)
@project_id_option
@json_option
@utils.exception_handler
@utils.pass_environment()
def add_zone_mapping(
    ctx: AtlasContext,
    cluster_name: str,
    mappings: list[str],
    project_id: str,
    as_json: bool,
) -> None:
    project_id = _initialize(ctx, project_id, as_json)
    zone_mappings = []
    for mapping in mappings:
        location, zone = utils.parse_key_value_pair(mapping)
        if not location or not zone:
            raise UserError(
                f"Invalid zone mapping: {mapping}",
                "Mappings take the form LOCATION=ZONE, e.g. -m 'US=Zone 1'.",
            )
        zone_mappings.append(CustomZoneMapping(location=location, zone=zone))

    request = CustomZoneMappingsRequest(custom_zone_mappings=zone_mappings)
    with ctx.logger.operation(f"Adding {len(zone_mappings)} zone mapping(s)"):
        cluster, _ = ctx.client.global_clusters.add_custom_zone_mappings(
            project_id, cluster_name, request
        )
    ctx.logger.info(f"Added {len(zone_mappings)} zone mapping(s) to {cluster_name}")
    _echo_cluster(cluster, as_json)


@cli.command("delete-zone-mappings", help="Remove all custom zone mappings.")
@click.argument("cluster_name")
@project_id_option
@json_option
@utils.exception_handler
@utils.pass_environment()
def delete_zone_mappings(
    ctx: AtlasContext, cluster_name: str, project_id: str, as_json: bool
) -> None:
    project_id = _initialize(ctx, project_id, as_json)
    with ctx.logger.operation("Removing custom zone mappings"):
        cluster, _ = ctx.client.global_clusters.delete_custom_zone_mappings(
            project_id, cluster_name
        )
    ctx.logger.info(f"Removed all custom zone mappings from {cluster_name}")
    _echo_cluster(cluster, as_json)


def _initialize(ctx: AtlasContext, project_id: str, as_json: bool) -> str:
    ctx.initialize(log_level=LogLevel.ERROR if as_json else None)
    return ctx.resolve_project_id(project_id)


def _echo_cluster(cluster: GlobalCluster, as_json: bool) -> None:
    if cluster is None:
        cluster = GlobalCluster()
    utils.echo_data(cluster.to_body(), as_json)
