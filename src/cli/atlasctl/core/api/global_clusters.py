"""Global Clusters endpoints of the management API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import requests

from atlasctl.core.api.models import (
    CustomZoneMappingsRequest,
    GlobalCluster,
    ManagedNamespace,
)
from atlasctl.core.errors import ArgumentError
from atlasctl.settings import (
    CUSTOM_ZONE_MAPPING_PATH,
    GLOBAL_WRITES_PATH,
    MANAGED_NAMESPACES_PATH,
)
from atlasctl.utils import path_escape

if TYPE_CHECKING:
    from atlasctl.core.api.client import AtlasClient


class GlobalClustersService:
    """Managed namespaces and custom zone mappings of a Global Cluster.

    Every operation returns the cluster's resulting global writes
    configuration alongside the raw response.

    Parameters
    ----------
    client : AtlasClient
        Client used to build and send requests.

    Methods
    -------
    get(group_id, cluster_name)
        Retrieve the managed namespaces and custom zone mappings.
    add_managed_namespace(group_id, cluster_name, namespace)
        Add a managed namespace.
    delete_managed_namespace(group_id, cluster_name, namespace)
        Remove a managed namespace.
    add_custom_zone_mappings(group_id, cluster_name, mappings)
        Add entries to the custom zone mappings.
    delete_custom_zone_mappings(group_id, cluster_name)
        Remove all custom zone mappings.
    """

    def __init__(self, client: AtlasClient) -> None:
        self._client = client

    def get(
        self, group_id: str, cluster_name: str
    ) -> tuple[GlobalCluster, requests.Response]:
        """
        Retrieve the global writes configuration of a cluster.

        Raises
        ------
        ArgumentError
            If `cluster_name` is empty. No request is sent.
        RemoteOperationError
            If the request fails.
        """
        if not cluster_name:
            raise ArgumentError("cluster_name", "must be set")

        path = self._path(GLOBAL_WRITES_PATH, group_id, cluster_name)
        request = self._client.new_request("GET", path)
        return self._client.do(request, GlobalCluster)

    def add_managed_namespace(
        self,
        group_id: str,
        cluster_name: str,
        namespace: Optional[ManagedNamespace],
    ) -> tuple[GlobalCluster, requests.Response]:
        """
        Add a managed namespace to a cluster.

        Raises
        ------
        ArgumentError
            If `namespace` is None. No request is sent.
        """
        if namespace is None:
            raise ArgumentError("namespace", "cannot be nil")

        path = self._path(MANAGED_NAMESPACES_PATH, group_id, cluster_name)
        request = self._client.new_request("POST", path, body=namespace)
        return self._client.do(request, GlobalCluster)

    def delete_managed_namespace(
        self,
        group_id: str,
        cluster_name: str,
        namespace: Optional[ManagedNamespace],
    ) -> tuple[GlobalCluster, requests.Response]:
        """
        Remove a managed namespace from a cluster.

        The namespace travels as `collection` and `db` query parameters.
        No body is sent and `custom_shard_key` is ignored.

        Raises
        ------
        ArgumentError
            If `namespace` is None. No request is sent.
        """
        if namespace is None:
            raise ArgumentError("namespace", "cannot be nil")

        path = self._path(MANAGED_NAMESPACES_PATH, group_id, cluster_name)
        params = [("collection", namespace.collection), ("db", namespace.db)]
        request = self._client.new_request("DELETE", path, params=params)
        return self._client.do(request, GlobalCluster)

    def add_custom_zone_mappings(
        self,
        group_id: str,
        cluster_name: str,
        mappings: Optional[CustomZoneMappingsRequest],
    ) -> tuple[GlobalCluster, requests.Response]:
        """
        Add entries to the custom zone mappings of a cluster.

        Raises
        ------
        ArgumentError
            If `mappings` is None. No request is sent.
        """
        if mappings is None:
            raise ArgumentError("mappings", "cannot be nil")

        path = self._path(CUSTOM_ZONE_MAPPING_PATH, group_id, cluster_name)
        request = self._client.new_request("POST", path, body=mappings)
        return self._client.do(request, GlobalCluster)

    def delete_custom_zone_mappings(
        self, group_id: str, cluster_name: str
    ) -> tuple[GlobalCluster, requests.Response]:
        """Remove all custom zone mappings from a cluster."""
        path = self._path(CUSTOM_ZONE_MAPPING_PATH, group_id, cluster_name)
        request = self._client.new_request("DELETE", path)
        return self._client.do(request, GlobalCluster)

    @staticmethod
    def _path(template: str, group_id: str, cluster_name: str) -> str:
        return template.format(
            group_id=path_escape(group_id), cluster_name=path_escape(cluster_name)
        )
