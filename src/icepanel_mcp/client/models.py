"""Request models for IcePanel list filters and write payloads.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

IcePanelId = Annotated[str, Field(min_length=20, max_length=20, description="IcePanel ID (20 characters)")]
Name = Annotated[str, Field(min_length=1, max_length=255)]

Status: TypeAlias = Literal["deprecated", "future", "live", "removed"]
ModelObjectType: TypeAlias = Literal["actor", "app", "component", "group", "root", "store", "system"]
MutableModelObjectType: TypeAlias = Literal["actor", "app", "component", "group", "store", "system"]
ConnectionDirection: TypeAlias = Literal["outgoing", "bidirectional"]
ColorName: TypeAlias = Literal[
    "blue", "green", "yellow", "orange", "red", "beaver",
    "dark-blue", "purple", "pink", "white", "grey", "black",
]
HexColor = Annotated[str, Field(pattern=r"^#[0-9A-Fa-f]{6}$")]
Color: TypeAlias = ColorName | HexColor

CatalogProvider: TypeAlias = Literal[
    "aws", "azure", "gcp", "microsoft", "salesforce", "atlassian", "apache", "supabase",
]
CatalogTechnologyType: TypeAlias = Literal[
    "data-storage", "deployment", "framework-library", "gateway", "other", "language",
    "message-broker", "network", "protocol", "runtime", "service-tool",
]
CatalogRestriction: TypeAlias = Literal["actor", "app", "component", "connection", "group", "store", "system"]
TechnologyStatus: TypeAlias = Literal["approved", "pending-review", "rejected"]

_BASE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="forbid",
    frozen=True,
    str_strip_whitespace=True,
)


class WirePayload(BaseModel):
    """Base for request bodies; ``to_payload`` produces the JSON document sent."""

    model_config = _BASE_CONFIG

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PartialPayload(WirePayload):
    """Update body: only the fields the caller set are sent (explicit ``None`` included)."""

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


# ─────────────────────────────────────────────────────────────────────────────
# Filters
# ─────────────────────────────────────────────────────────────────────────────

class ModelObjectFilter(BaseModel):
    model_config = _BASE_CONFIG

    domain_id: str | list[str] | None = None
    external: bool | None = None
    handle_id: str | list[str] | None = None
    labels: dict[str, str] | None = None
    name: str | None = None
    parent_id: str | None = None
    status: Status | list[Status] | None = None
    type: ModelObjectType | list[ModelObjectType] | None = None


class ConnectionFilter(BaseModel):
    model_config = _BASE_CONFIG

    direction: ConnectionDirection | None = None
    handle_id: str | list[str] | None = None
    labels: dict[str, str] | None = None
    name: str | None = None
    origin_id: str | list[str] | None = None
    status: Status | list[Status] | None = None
    target_id: str | list[str] | None = None


class TechnologyFilter(BaseModel):
    model_config = _BASE_CONFIG

    provider: CatalogProvider | list[CatalogProvider] | None = None
    type: CatalogTechnologyType | list[CatalogTechnologyType] | None = None
    restrictions: CatalogRestriction | list[CatalogRestriction] | None = None
    status: TechnologyStatus | list[TechnologyStatus] | None = None


# ─────────────────────────────────────────────────────────────────────────────
# Write payloads
# ─────────────────────────────────────────────────────────────────────────────

class ModelObjectCreate(WirePayload):
    name: Name
    type: MutableModelObjectType
    parent_id: IcePanelId
    description: str | None = None
    status: Status = "live"
    external: bool = False
    technology_ids: list[IcePanelId] | None = None
    caption: str | None = None


class ModelObjectUpdate(PartialPayload):
    name: Name | None = None
    description: str | None = None
    status: Status | None = None
    external: bool | None = None
    parent_id: IcePanelId | None = None
    type: MutableModelObjectType | None = None
    technology_ids: list[IcePanelId] | None = None
    caption: str | None = None


class ConnectionCreate(WirePayload):
    name: Name
    origin_id: IcePanelId
    target_id: IcePanelId
    direction: ConnectionDirection | None
    description: str | None = None
    status: Status = "live"

    def to_payload(self) -> dict[str, Any]:
        # null direction is meaningful (undirected), so it is always sent
        return {**super().to_payload(), "direction": self.direction}


class ConnectionUpdate(PartialPayload):
    name: Name | None = None
    direction: ConnectionDirection | None = None
    description: str | None = None
    status: Status | None = None


class TagCreate(WirePayload):
    name: Name
    group_id: IcePanelId
    color: Color | None = None


class TagUpdate(PartialPayload):
    name: Name | None = None
    color: Color | None = None


class DomainCreate(WirePayload):
    name: Name
    color: Color | None = None


class DomainUpdate(PartialPayload):
    name: Name | None = None
    color: Color | None = None
