"""Typed resource configuration.

These models hold the attributes a user declares for a resource (and the
attributes read back from the API). Field names follow the configuration
vocabulary (`database_name`, `role_name`) rather than the API's.
"""

import re
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from atlasctl.core.errors import UserError
from atlasctl.settings import (
    RESERVED_ROLE_NAMES,
    RESERVED_ROLE_PREFIX,
    ROLE_NAME_PATTERN,
)


class ResourceConfig(BaseModel):
    """Resource an action applies to.

    Either `cluster` is set, or both `database_name` and
    `collection_name` are. Other combinations can be represented here so
    that they are rejected with a clear message by `validate_actions`.
    """

    cluster: bool = False
    database_name: Optional[str] = None
    collection_name: Optional[str] = None


class ActionConfig(BaseModel):
    action: str
    resources: list[ResourceConfig] = Field(default_factory=list)


class InheritedRoleConfig(BaseModel):
    database_name: str
    role_name: str


class CustomDBRoleConfig(BaseModel):
    """Declared or observed attributes of a custom database role."""

    project_id: str = ""
    role_name: str
    actions: list[ActionConfig] = Field(default_factory=list)
    inherited_roles: list[InheritedRoleConfig] = Field(default_factory=list)

    def to_attributes(self) -> dict[str, Any]:
        """Return the attributes as plain data for YAML, JSON or state."""
        return self.model_dump(mode="json")


def bind_role_config(
    attributes: dict[str, Any], project_id: str = ""
) -> CustomDBRoleConfig:
    """
    Bind a generic mapping to a `CustomDBRoleConfig`.

    Parameters
    ----------
    attributes : dict[str, Any]
        Role attributes, typically parsed from a YAML file.
    project_id : str, optional
        Project to use when `attributes` does not name one.

    Returns
    -------
    CustomDBRoleConfig
        The typed configuration.

    Raises
    ------
    UserError
        If the attributes do not fit the schema or break a naming rule.
    """
    if not isinstance(attributes, dict):
        raise UserError(
            "Role definition must be a mapping.",
            "Define role_name, actions and optionally inherited_roles at the top "
            "level of the file.",
        )

    data = dict(attributes)
    if not data.get("project_id"):
        data["project_id"] = project_id
    for key in ("actions", "inherited_roles"):
        if data.get(key) is None:
            data.pop(key, None)

    try:
        config = CustomDBRoleConfig.model_validate(data)
    except ValidationError as e:
        raise UserError(f"Invalid role definition:\n{_format_errors(e)}") from e

    if not config.project_id:
        raise UserError(
            "project_id must be set.",
            "Set it in the role definition, pass --project-id, or set PROJECT_ID.",
        )
    check_role_name(config.role_name)
    if len(config.actions) < 1:
        raise UserError("A custom role must define at least one action.")
    return config


def check_role_name(role_name: str) -> None:
    """
    Enforce the naming rules for custom roles.

    Raises
    ------
    UserError
        If the name is empty, contains characters other than letters,
        digits, underscores and dashes, is reserved, or uses the reserved
        prefix.
    """
    if not re.fullmatch(ROLE_NAME_PATTERN, role_name, flags=re.ASCII):
        raise UserError(
            f"Invalid role_name '{role_name}'. role_name can contain only "
            f"letters, digits, underscores, and dashes."
        )
    if role_name in RESERVED_ROLE_NAMES:
        raise UserError(f"role_name cannot be '{role_name}'.")
    if role_name.startswith(RESERVED_ROLE_PREFIX):
        raise UserError(f"role_name cannot start with '{RESERVED_ROLE_PREFIX}'.")


def _format_errors(error: ValidationError) -> str:
    lines = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"])
        lines.append(f"{loc}: {err['msg']}")
    return "\n".join(lines)
