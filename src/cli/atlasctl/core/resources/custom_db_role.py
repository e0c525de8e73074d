"""Custom database role resource.

Translates a declared `CustomDBRoleConfig` into calls against the Custom
DB Roles API and translates the API's answer back into configuration.
Every operation re-reads the role from the API, which remains the source
of truth.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from atlasctl.core.api.models import (
    Action,
    ClusterResource,
    CustomDBRole,
    InheritedRole,
    NamespaceResource,
    Resource,
)
from atlasctl.core.errors import (
    ImportFormatError,
    RemoteOperationError,
    ResourceValidationError,
)
from atlasctl.core.resources.config import (
    ActionConfig,
    CustomDBRoleConfig,
    InheritedRoleConfig,
    ResourceConfig,
)
from atlasctl.core.state import decode_state_id, encode_state_id
from atlasctl.settings import IMPORT_ID_SEPARATOR

if TYPE_CHECKING:
    from atlasctl.core.api.client import AtlasClient

logger = logging.getLogger(__name__)


@dataclass
class ResourceState:
    """Identifier and attributes of a managed resource."""

    id: str
    attributes: CustomDBRoleConfig


class CustomDBRoleResource:
    """Lifecycle operations for a custom database role.

    Parameters
    ----------
    client : AtlasClient
        Client used for all API calls.

    Methods
    -------
    create(config)
        Create the role and return its state.
    read(state_id)
        Fetch the role and return its state.
    update(state_id, config, prior=None)
        Apply changed actions and inherited roles.
    delete(state_id)
        Delete the role.
    import_state(import_id)
        Adopt an existing role given `{project_id}-{role_name}`.
    """

    def __init__(self, client: AtlasClient) -> None:
        self._client = client

    def create(self, config: CustomDBRoleConfig) -> ResourceState:
        """
        Create a custom role.

        Raises
        ------
        ResourceValidationError
            If an action resource is malformed. No request is sent.
        RemoteOperationError
            If the API rejects the role or the follow-up read fails.
        """
        validate_actions(config.actions)
        role = CustomDBRole(
            role_name=config.role_name,
            actions=expand_actions(config.actions),
            inherited_roles=expand_inherited_roles(config.inherited_roles),
        )

        try:
            created, _ = self._client.custom_db_roles.create(config.project_id, role)
        except RemoteOperationError as e:
            raise e.with_context("error creating custom db role") from e

        state_id = encode_state_id(
            {"project_id": config.project_id, "role_name": created.role_name}
        )
        logger.debug(f"Created custom db role {created.role_name} ({state_id})")
        return self.read(state_id)

    def read(self, state_id: str) -> ResourceState:
        """
        Fetch a custom role and flatten it into configuration.

        A 404 surfaces as a `RemoteOperationError` whose `not_found` is
        True; callers decide whether that means the role was removed.
        """
        project_id, role_name = _decode(state_id)
        try:
            role, _ = self._client.custom_db_roles.get(project_id, role_name)
        except RemoteOperationError as e:
            raise e.with_context("error getting custom db role information") from e

        return ResourceState(id=state_id, attributes=_flatten_role(project_id, role))

    def update(
        self,
        state_id: str,
        config: CustomDBRoleConfig,
        prior: Optional[CustomDBRoleConfig] = None,
    ) -> ResourceState:
        """
        Apply changes to a custom role.

        Parameters
        ----------
        state_id : str
            Identifier of the role.
        config : CustomDBRoleConfig
            Desired attributes.
        prior : CustomDBRoleConfig, optional
            Attributes last applied. Lists equal to their prior value are
            left as the API reports them; any other list is replaced
            wholesale. Without a prior, both lists are replaced.

        Raises
        ------
        ResourceValidationError
            If an action resource is malformed. No request is sent.
        RemoteOperationError
            If fetching, patching or re-reading the role fails.
        """
        validate_actions(config.actions)
        project_id, role_name = _decode(state_id)

        try:
            role, _ = self._client.custom_db_roles.get(project_id, role_name)
        except RemoteOperationError as e:
            raise e.with_context("error getting custom db role information") from e

        if prior is None or prior.actions != config.actions:
            role.actions = expand_actions(config.actions)
        if prior is None or prior.inherited_roles != config.inherited_roles:
            role.inherited_roles = expand_inherited_roles(config.inherited_roles)

        try:
            self._client.custom_db_roles.update(project_id, role_name, role)
        except RemoteOperationError as e:
            raise e.with_context(f"error updating custom db role ({role_name})") from e

        return self.read(state_id)

    def delete(self, state_id: str) -> None:
        """Delete a custom role. A missing role is reported as an error."""
        project_id, role_name = _decode(state_id)
        try:
            self._client.custom_db_roles.delete(project_id, role_name)
        except RemoteOperationError as e:
            raise e.with_context(f"error deleting custom db role ({role_name})") from e

    def import_state(self, import_id: str) -> ResourceState:
        """
        Adopt an existing role.

        Parameters
        ----------
        import_id : str
            `{project_id}-{role_name}`. Only the first `-` separates the
            parts, so role names may contain dashes.

        Raises
        ------
        ImportFormatError
            If the separator is missing or either part is empty.
        RemoteOperationError
            If the role cannot be fetched.
        """
        project_id, sep, role_name = import_id.partition(IMPORT_ID_SEPARATOR)
        if not sep or not project_id or not role_name:
            raise ImportFormatError(
                f"Invalid import ID '{import_id}'.",
                "To import a custom db role use the format {project_id}-{role_name}",
            )

        try:
            role, _ = self._client.custom_db_roles.get(project_id, role_name)
        except RemoteOperationError as e:
            raise e.with_context(
                f"couldn't import custom db role {role_name} in project {project_id}"
            ) from e

        state_id = encode_state_id(
            {"project_id": project_id, "role_name": role.role_name}
        )
        return ResourceState(id=state_id, attributes=_flatten_role(project_id, role))


def _decode(state_id: str) -> tuple[str, str]:
    ids = decode_state_id(state_id)
    return ids.get("project_id", ""), ids.get("role_name", "")


def _flatten_role(project_id: str, role: CustomDBRole) -> CustomDBRoleConfig:
    return CustomDBRoleConfig(
        project_id=project_id,
        role_name=role.role_name,
        actions=flatten_actions(role.actions),
        inherited_roles=flatten_inherited_roles(role.inherited_roles),
    )


# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------
def validate_actions(actions: Optional[list[ActionConfig]]) -> None:
    """
    Check that every action resource has a valid shape.

    A resource either targets the whole cluster (`cluster` set, no
    database or collection) or one namespace (`cluster` unset, both
    database and collection set). Empty strings count as unset.

    Raises
    ------
    ResourceValidationError
        On the first resource that breaks the rule.
    """
    for action in actions or []:
        for resource in action.resources:
            has_db = bool(resource.database_name)
            has_collection = bool(resource.collection_name)
            if resource.cluster:
                if has_db or has_collection:
                    raise ResourceValidationError(
                        "setting `actions.resources.cluster` is exclusive with "
                        "`actions.resources.collection_name` and "
                        "`actions.resources.database_name`"
                    )
            elif not (has_db and has_collection):
                raise ResourceValidationError(
                    "either `actions.resources.cluster` or both "
                    "`actions.resources.collection_name` and "
                    "`actions.resources.database_name` must be set"
                )


# ----------------------------------------------------------------------
# Config -> API
# ----------------------------------------------------------------------
def expand_actions(actions: Optional[list[ActionConfig]]) -> list[Action]:
    return [
        Action(action=a.action, resources=expand_action_resources(a.resources))
        for a in actions or []
    ]


def expand_action_resources(
    resources: Optional[list[ResourceConfig]],
) -> list[Resource]:
    expanded: list[Resource] = []
    for r in resources or []:
        if r.cluster:
            expanded.append(ClusterResource())
        else:
            expanded.append(
                NamespaceResource(
                    db=r.database_name or "", collection=r.collection_name or ""
                )
            )
    return expanded


def expand_inherited_roles(
    roles: Optional[list[InheritedRoleConfig]],
) -> list[InheritedRole]:
    return [InheritedRole(db=r.database_name, role=r.role_name) for r in roles or []]


# ----------------------------------------------------------------------
# API -> config
# ----------------------------------------------------------------------
def flatten_actions(actions: Optional[list[Action]]) -> list[ActionConfig]:
    return [
        ActionConfig(action=a.action, resources=flatten_action_resources(a.resources))
        for a in actions or []
    ]


def flatten_action_resources(
    resources: Optional[list[Resource]],
) -> list[ResourceConfig]:
    flattened = []
    for r in resources or []:
        if isinstance(r, ClusterResource):
            flattened.append(ResourceConfig(cluster=True))
        else:
            flattened.append(
                ResourceConfig(database_name=r.db, collection_name=r.collection)
            )
    return flattened


def flatten_inherited_roles(
    roles: Optional[list[InheritedRole]],
) -> list[InheritedRoleConfig]:
    return [
        InheritedRoleConfig(database_name=r.db, role_name=r.role) for r in roles or []
    ]
