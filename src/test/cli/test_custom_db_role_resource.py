"""Unit tests for the custom DB role resource controller."""

from unittest.mock import MagicMock

import pytest

from atlasctl.core.api.models import (
    Action,
    ClusterResource,
    CustomDBRole,
    InheritedRole,
    NamespaceResource,
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
from atlasctl.core.resources.custom_db_role import (
    CustomDBRoleResource,
    expand_action_resources,
    expand_actions,
    expand_inherited_roles,
    flatten_action_resources,
    flatten_actions,
    flatten_inherited_roles,
    validate_actions,
)
from atlasctl.core.state import encode_state_id
from constants import PROJECT_ID, ROLE_NAME

STATE_ID = encode_state_id({"project_id": PROJECT_ID, "role_name": ROLE_NAME})


def make_config(**overrides) -> CustomDBRoleConfig:
    values = {
        "project_id": PROJECT_ID,
        "role_name": ROLE_NAME,
        "actions": [
            ActionConfig(
                action="FIND",
                resources=[
                    ResourceConfig(database_name="reporting", collection_name="events")
                ],
            ),
            ActionConfig(
                action="LIST_DATABASES", resources=[ResourceConfig(cluster=True)]
            ),
        ],
        "inherited_roles": [
            InheritedRoleConfig(database_name="admin", role_name="read")
        ],
    }
    values.update(overrides)
    return CustomDBRoleConfig(**values)


def make_role(**overrides) -> CustomDBRole:
    values = {
        "role_name": ROLE_NAME,
        "actions": [
            Action(
                action="FIND",
                resources=[NamespaceResource(db="reporting", collection="events")],
            ),
            Action(action="LIST_DATABASES", resources=[ClusterResource()]),
        ],
        "inherited_roles": [InheritedRole(db="admin", role="read")],
    }
    values.update(overrides)
    return CustomDBRole(**values)


@pytest.fixture
def api() -> MagicMock:
    """Return a mocked client whose role endpoints echo a stored role."""
    client = MagicMock()
    client.custom_db_roles.get.return_value = (make_role(), MagicMock())
    client.custom_db_roles.create.return_value = (make_role(), MagicMock())
    client.custom_db_roles.update.return_value = (make_role(), MagicMock())
    return client


@pytest.fixture
def resource(api) -> CustomDBRoleResource:
    return CustomDBRoleResource(api)


class TestCreate:
    """Test cases for CustomDBRoleResource.create."""

    def test_create(self, api, resource):
        """Test the role is created, identified and read back."""
        state = resource.create(make_config())

        api.custom_db_roles.create.assert_called_once_with(PROJECT_ID, make_role())
        api.custom_db_roles.get.assert_called_once_with(PROJECT_ID, ROLE_NAME)
        assert state.id == STATE_ID
        assert state.attributes == make_config()

    def test_create_uses_returned_name(self, api, resource):
        """Test the identifier is built from the name the API returns."""
        api.custom_db_roles.create.return_value = (
            make_role(role_name="renamed"),
            MagicMock(),
        )

        state = resource.create(make_config())

        assert state.id == encode_state_id(
            {"project_id": PROJECT_ID, "role_name": "renamed"}
        )
        api.custom_db_roles.get.assert_called_once_with(PROJECT_ID, "renamed")

    def test_create_invalid_resource(self, api, resource):
        """Test malformed resources are rejected before any request."""
        config = make_config(
            actions=[
                ActionConfig(
                    action="FIND",
                    resources=[ResourceConfig(cluster=True, database_name="reporting")],
                )
            ]
        )

        with pytest.raises(ResourceValidationError, match="exclusive"):
            resource.create(config)
        api.custom_db_roles.create.assert_not_called()

    def test_create_failure(self, api, resource):
        """Test API failures keep their status and gain context."""
        api.custom_db_roles.create.side_effect = RemoteOperationError(
            "POST roles: 409", status_code=409, error_code="DUPLICATE_ROLE"
        )

        with pytest.raises(RemoteOperationError) as exc_info:
            resource.create(make_config())

        error = exc_info.value
        assert error.msg == "error creating custom db role: POST roles: 409"
        assert error.status_code == 409
        assert error.error_code == "DUPLICATE_ROLE"
        api.custom_db_roles.get.assert_not_called()


class TestRead:
    """Test cases for CustomDBRoleResource.read."""

    def test_read(self, api, resource):
        """Test the role is flattened with the project from the identifier."""
        state = resource.read(STATE_ID)

        assert state.id == STATE_ID
        assert state.attributes == make_config()

    def test_read_not_found(self, api, resource):
        """Test a missing role surfaces as a not-found error."""
        api.custom_db_roles.get.side_effect = RemoteOperationError(
            "GET role: 404", status_code=404
        )

        with pytest.raises(RemoteOperationError) as exc_info:
            resource.read(STATE_ID)

        assert exc_info.value.not_found


class TestUpdate:
    """Test cases for CustomDBRoleResource.update."""

    def test_update_only_changed_lists(self, api, resource):
        """Test unchanged actions keep the remote value."""
        remote_actions = [Action(action="REMOTE_ONLY", resources=[ClusterResource()])]
        api.custom_db_roles.get.return_value = (
            make_role(actions=remote_actions),
            MagicMock(),
        )
        prior = make_config()
        desired = make_config(inherited_roles=[])

        resource.update(STATE_ID, desired, prior=prior)

        sent = api.custom_db_roles.update.call_args.args[2]
        assert sent.actions == remote_actions
        assert sent.inherited_roles == []

    def test_update_changed_actions(self, api, resource):
        """Test changed actions replace the remote list."""
        prior = make_config()
        desired = make_config(
            actions=[
                ActionConfig(action="INSERT", resources=[ResourceConfig(cluster=True)])
            ]
        )

        resource.update(STATE_ID, desired, prior=prior)

        sent = api.custom_db_roles.update.call_args.args[2]
        assert sent.actions == [Action(action="INSERT", resources=[ClusterResource()])]
        assert sent.inherited_roles == [InheritedRole(db="admin", role="read")]

    def test_update_without_prior(self, api, resource):
        """Test both lists are replaced when nothing was recorded."""
        api.custom_db_roles.get.return_value = (
            make_role(actions=[], inherited_roles=[]),
            MagicMock(),
        )

        state = resource.update(STATE_ID, make_config())

        api.custom_db_roles.update.assert_called_once_with(
            PROJECT_ID, ROLE_NAME, make_role()
        )
        assert api.custom_db_roles.get.call_count == 2
        assert state.attributes == make_config()

    def test_update_invalid_resource(self, api, resource):
        """Test malformed resources are rejected before any request."""
        config = make_config(
            actions=[ActionConfig(action="FIND", resources=[ResourceConfig()])]
        )

        with pytest.raises(ResourceValidationError):
            resource.update(STATE_ID, config)
        api.custom_db_roles.get.assert_not_called()
        api.custom_db_roles.update.assert_not_called()

    def test_update_failure(self, api, resource):
        """Test patch failures name the role."""
        api.custom_db_roles.update.side_effect = RemoteOperationError("PATCH: 500")

        with pytest.raises(RemoteOperationError, match=f"\\({ROLE_NAME}\\)"):
            resource.update(STATE_ID, make_config())


class TestDelete:
    """Test cases for CustomDBRoleResource.delete."""

    def test_delete(self, api, resource):
        resource.delete(STATE_ID)

        api.custom_db_roles.delete.assert_called_once_with(PROJECT_ID, ROLE_NAME)

    def test_delete_missing(self, api, resource):
        """Test a missing role is not treated as success."""
        api.custom_db_roles.delete.side_effect = RemoteOperationError(
            "DELETE: 404", status_code=404
        )

        with pytest.raises(RemoteOperationError, match="error deleting custom db role"):
            resource.delete(STATE_ID)


class TestImport:
    """Test cases for CustomDBRoleResource.import_state."""

    def test_import_splits_on_first_separator(self, api, resource):
        """Test role names may contain the separator."""
        state = resource.import_state(f"{PROJECT_ID}-{ROLE_NAME}")

        api.custom_db_roles.get.assert_called_once_with(PROJECT_ID, ROLE_NAME)
        assert state.id == STATE_ID
        assert state.attributes.project_id == PROJECT_ID
        assert state.attributes == make_config()

    @pytest.mark.parametrize(
        "import_id",
        ["no_separator", f"-{ROLE_NAME}", f"{PROJECT_ID}-", ""],
        ids=["missing_separator", "empty_project", "empty_role", "empty"],
    )
    def test_import_format_error(self, api, resource, import_id):
        with pytest.raises(ImportFormatError, match="{project_id}-{role_name}"):
            resource.import_state(import_id)
        api.custom_db_roles.get.assert_not_called()

    def test_import_not_found(self, api, resource):
        """Test fetch failures name the role and project."""
        api.custom_db_roles.get.side_effect = RemoteOperationError(
            "GET: 404", status_code=404
        )

        with pytest.raises(RemoteOperationError) as exc_info:
            resource.import_state(f"{PROJECT_ID}-missing")

        assert exc_info.value.msg.startswith(
            f"couldn't import custom db role missing in project {PROJECT_ID}"
        )
        assert exc_info.value.not_found


class TestValidateActions:
    """Test cases for validate_actions."""

    @pytest.mark.parametrize(
        "resource_config",
        [
            ResourceConfig(cluster=True),
            ResourceConfig(cluster=True, database_name="", collection_name=""),
            ResourceConfig(database_name="db", collection_name="coll"),
        ],
        ids=["cluster", "cluster_empty_strings", "namespace"],
    )
    def test_valid(self, resource_config):
        validate_actions([ActionConfig(action="FIND", resources=[resource_config])])

    @pytest.mark.parametrize(
        "resource_config,message",
        [
            (ResourceConfig(cluster=True, database_name="db"), "exclusive"),
            (ResourceConfig(cluster=True, collection_name="coll"), "exclusive"),
            (ResourceConfig(), "must be set"),
            (ResourceConfig(database_name="db"), "must be set"),
            (ResourceConfig(database_name="db", collection_name=""), "must be set"),
        ],
        ids=[
            "cluster_and_db",
            "cluster_and_collection",
            "nothing",
            "db_only",
            "empty_collection",
        ],
    )
    def test_invalid(self, resource_config, message):
        with pytest.raises(ResourceValidationError, match=message):
            validate_actions([ActionConfig(action="FIND", resources=[resource_config])])

    def test_none(self):
        validate_actions(None)


class TestShapeConversion:
    """Test cases for the expand and flatten helpers."""

    def test_expand_empty(self):
        assert expand_actions(None) == []
        assert expand_action_resources(None) == []
        assert expand_inherited_roles(None) == []

    def test_flatten_empty(self):
        assert flatten_actions(None) == []
        assert flatten_action_resources(None) == []
        assert flatten_inherited_roles(None) == []

    def test_expand_preserves_order(self):
        resources = [
            ResourceConfig(database_name="b", collection_name="2"),
            ResourceConfig(cluster=True),
            ResourceConfig(database_name="a", collection_name="1"),
        ]

        assert expand_action_resources(resources) == [
            NamespaceResource(db="b", collection="2"),
            ClusterResource(),
            NamespaceResource(db="a", collection="1"),
        ]

    def test_flatten_resources(self):
        flattened = flatten_action_resources(
            [ClusterResource(), NamespaceResource(db="a", collection="1")]
        )

        assert flattened == [
            ResourceConfig(cluster=True),
            ResourceConfig(database_name="a", collection_name="1"),
        ]

    def test_inherited_roles(self):
        configs = [
            InheritedRoleConfig(database_name="admin", role_name="read"),
            InheritedRoleConfig(database_name="sales", role_name="readWrite"),
        ]

        expanded = expand_inherited_roles(configs)

        assert expanded == [
            InheritedRole(db="admin", role="read"),
            InheritedRole(db="sales", role="readWrite"),
        ]
        assert flatten_inherited_roles(expanded) == configs

    def test_actions(self):
        assert flatten_actions(expand_actions(make_config().actions)) == (
            make_config().actions
        )
