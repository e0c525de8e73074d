"""Custom DB Roles endpoints of the management API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import requests

from atlasctl.core.api.models import CustomDBRole
from atlasctl.core.errors import ArgumentError
from atlasctl.settings import CUSTOM_DB_ROLE_PATH, CUSTOM_DB_ROLES_PATH
from atlasctl.utils import path_escape

if TYPE_CHECKING:
    from atlasctl.core.api.client import AtlasClient

CustomDBRoleList = list[CustomDBRole]


class CustomDBRolesService:
    """Custom database roles of a project.

    Parameters
    ----------
    client : AtlasClient
        Client used to build and send requests.
    """

    def __init__(self, client: AtlasClient) -> None:
        self._client = client

    def list(self, group_id: str) -> tuple[CustomDBRoleList, requests.Response]:
        """Return all custom roles in a project."""
        path = CUSTOM_DB_ROLES_PATH.format(group_id=path_escape(group_id))
        request = self._client.new_request("GET", path)
        roles, response = self._client.do(request, CustomDBRoleList)
        return roles or [], response

    def get(
        self, group_id: str, role_name: str
    ) -> tuple[CustomDBRole, requests.Response]:
        """
        Return a single custom role by name.

        Raises
        ------
        ArgumentError
            If `role_name` is empty.
        """
        if not role_name:
            raise ArgumentError("role_name", "must be set")

        request = self._client.new_request("GET", self._role_path(group_id, role_name))
        return self._client.do(request, CustomDBRole)

    def create(
        self, group_id: str, role: Optional[CustomDBRole]
    ) -> tuple[CustomDBRole, requests.Response]:
        """
        Create a custom role.

        Raises
        ------
        ArgumentError
            If `role` is None.
        """
        if role is None:
            raise ArgumentError("role", "cannot be nil")

        path = CUSTOM_DB_ROLES_PATH.format(group_id=path_escape(group_id))
        request = self._client.new_request("POST", path, body=role)
        return self._client.do(request, CustomDBRole)

    def update(
        self, group_id: str, role_name: str, role: Optional[CustomDBRole]
    ) -> tuple[CustomDBRole, requests.Response]:
        """
        Update a custom role in place.

        The full role, actions and inherited roles included, is sent as the
        PATCH body. Lists present in the body replace the remote ones.

        Raises
        ------
        ArgumentError
            If `role_name` is empty or `role` is None.
        """
        if not role_name:
            raise ArgumentError("role_name", "must be set")
        if role is None:
            raise ArgumentError("role", "cannot be nil")

        request = self._client.new_request(
            "PATCH", self._role_path(group_id, role_name), body=role
        )
        return self._client.do(request, CustomDBRole)

    def delete(self, group_id: str, role_name: str) -> requests.Response:
        """
        Delete a custom role.

        Raises
        ------
        ArgumentError
            If `role_name` is empty.
        """
        if not role_name:
            raise ArgumentError("role_name", "must be set")

        request = self._client.new_request(
            "DELETE", self._role_path(group_id, role_name)
        )
        _, response = self._client.do(request)
        return response

    @staticmethod
    def _role_path(group_id: str, role_name: str) -> str:
        return CUSTOM_DB_ROLE_PATH.format(
            group_id=path_escape(group_id), role_name=path_escape(role_name)
        )
