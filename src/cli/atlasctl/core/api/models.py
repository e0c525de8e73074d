"""Request and response models for the management API.

Field names are snake_case in Python and camelCase on the wire. Models
accept either form when validating and always dump by alias.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator


class APIModel(BaseModel):
    """Base model for API payloads."""

    model_config = ConfigDict(populate_by_name=True)

    def to_body(self) -> dict:
        """Return the JSON body for this model."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ----------------------------------------------------------------------
# Global clusters
# ----------------------------------------------------------------------
class ManagedNamespace(APIModel):
    """A database/collection pair subject to global write sharding."""

    db: str
    collection: str
    custom_shard_key: Optional[str] = Field(default=None, alias="customShardKey")


class CustomZoneMapping(APIModel):
    """Association of a geographic location with a shard zone."""

    location: str
    zone: str


class CustomZoneMappingsRequest(APIModel):
    """Body for adding custom zone mappings."""

    custom_zone_mappings: list[CustomZoneMapping] = Field(
        default_factory=list, alias="customZoneMappings"
    )


class GlobalCluster(APIModel):
    """Global writes configuration of a cluster."""

    custom_zone_mapping: dict[str, str] = Field(
        default_factory=dict, alias="customZoneMapping"
    )
    managed_namespaces: list[ManagedNamespace] = Field(
        default_factory=list, alias="managedNamespaces"
    )

    @field_validator("custom_zone_mapping", "managed_namespaces", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any, info) -> Any:
        if value is None:
            return {} if info.field_name == "custom_zone_mapping" else []
        return value


# ----------------------------------------------------------------------
# Custom DB roles
# ----------------------------------------------------------------------
class ClusterResource(APIModel):
    """Action resource that applies to the whole cluster."""

    cluster: Literal[True] = True


class NamespaceResource(APIModel):
    """Action resource scoped to one database and collection."""

    db: str = ""
    collection: str = ""


def _resource_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "cluster" if value.get("cluster") else "namespace"
    return "cluster" if isinstance(value, ClusterResource) else "namespace"


Resource = Annotated[
    Union[
        Annotated[ClusterResource, Tag("cluster")],
        Annotated[NamespaceResource, Tag("namespace")],
    ],
    Discriminator(_resource_kind),
]


class Action(APIModel):
    """A privilege action and the resources it applies to."""

    action: str
    resources: list[Resource] = Field(default_factory=list)


class InheritedRole(APIModel):
    """A role whose privileges a custom role inherits."""

    db: str
    role: str


class CustomDBRole(APIModel):
    """A custom database role."""

    role_name: str = Field(alias="roleName")
    actions: list[Action] = Field(default_factory=list)
    inherited_roles: list[InheritedRole] = Field(
        default_factory=list, alias="inheritedRoles"
    )

    @field_validator("actions", "inherited_roles", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ErrorResponse(APIModel):
    """Error body returned by the API on non-2xx responses."""

    detail: Optional[str] = None
    error: Optional[int] = None
    error_code: Optional[str] = Field(default=None, alias="errorCode")
    reason: Optional[str] = None
