"""IcePanel REST endpoints as coroutines.

Each method describes one remote operation and delegates to
``IcePanelClient.execute``; retries, timeouts and error classification all
happen there.

Example:
    >>> async with IcePanelClient() as client:
    ...     api = IcePanelApi(client)
    ...     landscapes = await api.get_landscapes()
    ...     objects = await api.get_model_objects(
    ...         landscape_id, filter=ModelObjectFilter(type=["app", "store"])
    ...     )
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel

from .http import HttpMethod, IcePanelClient, RequestDescriptor, ResponseType
from .models import (
    ConnectionCreate,
    ConnectionFilter,
    ConnectionUpdate,
    DomainCreate,
    DomainUpdate,
    ModelObjectCreate,
    ModelObjectFilter,
    ModelObjectUpdate,
    TagCreate,
    TagUpdate,
    TechnologyFilter,
    WirePayload,
)
from .params import build_filter_params

LATEST = "latest"

Filter = Mapping[str, object] | BaseModel | None


def _seg(value: str) -> str:
    """Quote a caller-supplied ID for use as one path segment."""
    return quote(value, safe="")


class IcePanelApi:
    """Typed surface over the IcePanel REST API.

    Args:
        client: The resilient client that performs every request
        organization_id: Organization for organization-scoped calls
            (default: ``ORGANIZATION_ID`` from the client's settings)

    Every method accepts ``cancel``, an ``asyncio.Event`` that aborts the
    call without retry when set.
    """

    __slots__ = ("_client", "_organization_id")

    def __init__(self, client: IcePanelClient, organization_id: str | None = None) -> None:
        self._client = client
        self._organization_id = organization_id

    @property
    def client(self) -> IcePanelClient:
        return self._client

    def _org(self) -> str:
        if self._organization_id:
            return _seg(self._organization_id)
        return _seg(self._client.settings.require_organization_id())

    async def _call(
        self,
        path: str,
        method: HttpMethod = "GET",
        *,
        body: WirePayload | None = None,
        filter: Filter = None,
        response_type: ResponseType = "json",
        cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._client.execute(RequestDescriptor(
            path=path,
            method=method,
            body=body.to_payload() if body is not None else None,
            params=build_filter_params(filter),
            response_type=response_type,
            cancel=cancel,
        ))

    @staticmethod
    def _version(landscape_id: str, version_id: str) -> str:
        return f"/landscapes/{_seg(landscape_id)}/versions/{_seg(version_id)}"

    # ─────────────────────────────────────────────────────────────────
    # Landscapes & versions
    # ─────────────────────────────────────────────────────────────────

    async def get_landscapes(self, *, cancel: asyncio.Event | None = None) -> Any:
        return await self._call(f"/organizations/{self._org()}/landscapes", cancel=cancel)

    async def get_landscape(self, landscape_id: str, *, cancel: asyncio.Event | None = None) -> Any:
        return await self._call(f"/organizations/{self._org()}/landscapes/{_seg(landscape_id)}", cancel=cancel)

    async def get_version(
        self, landscape_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(self._version(landscape_id, version_id), cancel=cancel)

    # ─────────────────────────────────────────────────────────────────
    # Model objects
    # ─────────────────────────────────────────────────────────────────

    async def get_model_objects(
        self,
        landscape_id: str,
        version_id: str = LATEST,
        *,
        filter: ModelObjectFilter | Mapping[str, object] | None = None,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        """List model objects, optionally filtered.

        C4 levels map onto types: ``system`` for C1, ``app``/``store`` for C2,
        ``component`` for C3; ``group`` and ``actor`` appear at every level.
        """
        return await self._call(
            f"{self._version(landscape_id, version_id)}/model/objects", filter=filter, cancel=cancel
        )

    async def get_model_object(
        self, landscape_id: str, model_object_id: str, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/model/objects/{_seg(model_object_id)}", cancel=cancel
        )

    async def create_model_object(
        self, landscape_id: str, data: ModelObjectCreate, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/model/objects", "POST", body=data, cancel=cancel
        )

    async def update_model_object(
        self, landscape_id: str, model_object_id: str, data: ModelObjectUpdate, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/model/objects/{_seg(model_object_id)}",
            "PATCH", body=data, cancel=cancel,
        )

    async def delete_model_object(
        self, landscape_id: str, model_object_id: str, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> None:
        await self._call(
            f"{self._version(landscape_id, version_id)}/model/objects/{_seg(model_object_id)}",
            "DELETE", cancel=cancel,
        )

    # ─────────────────────────────────────────────────────────────────
    # Connections
    # ─────────────────────────────────────────────────────────────────

    async def get_model_connections(
        self,
        landscape_id: str,
        version_id: str = LATEST,
        *,
        filter: ConnectionFilter | Mapping[str, object] | None = None,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/model/connections", filter=filter, cancel=cancel
        )

    async def get_connection(
        self, landscape_id: str, connection_id: str, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/model/connections/{_seg(connection_id)}", cancel=cancel
        )

    async def get_model_connections_csv(
        self, landscape_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> str:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/model/connections/export/csv",
            response_type="text", cancel=cancel,
        )

    async def create_connection(
        self, landscape_id: str, data: ConnectionCreate, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/model/connections", "POST", body=data, cancel=cancel
        )

    async def update_connection(
        self, landscape_id: str, connection_id: str, data: ConnectionUpdate, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/model/connections/{_seg(connection_id)}",
            "PATCH", body=data, cancel=cancel,
        )

    async def delete_connection(
        self, landscape_id: str, connection_id: str, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> None:
        await self._call(
            f"{self._version(landscape_id, version_id)}/model/connections/{_seg(connection_id)}",
            "DELETE", cancel=cancel,
        )

    # ─────────────────────────────────────────────────────────────────
    # Tags & tag groups
    # ─────────────────────────────────────────────────────────────────

    async def get_tags(
        self, landscape_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(f"{self._version(landscape_id, version_id)}/tags", cancel=cancel)

    async def get_tag(
        self, landscape_id: str, tag_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(f"{self._version(landscape_id, version_id)}/tags/{_seg(tag_id)}", cancel=cancel)

    async def get_tag_groups(
        self, landscape_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(f"{self._version(landscape_id, version_id)}/tag-groups", cancel=cancel)

    async def get_tag_group(
        self, landscape_id: str, tag_group_id: str, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/tag-groups/{_seg(tag_group_id)}", cancel=cancel
        )

    async def create_tag(
        self, landscape_id: str, data: TagCreate, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(f"{self._version(landscape_id, version_id)}/tags", "POST", body=data, cancel=cancel)

    async def update_tag(
        self, landscape_id: str, tag_id: str, data: TagUpdate, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/tags/{_seg(tag_id)}", "PATCH", body=data, cancel=cancel
        )

    async def delete_tag(
        self, landscape_id: str, tag_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> None:
        await self._call(f"{self._version(landscape_id, version_id)}/tags/{_seg(tag_id)}", "DELETE", cancel=cancel)

    # ─────────────────────────────────────────────────────────────────
    # Domains
    # ─────────────────────────────────────────────────────────────────

    async def get_domains(
        self, landscape_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(f"{self._version(landscape_id, version_id)}/domains", cancel=cancel)

    async def create_domain(
        self, landscape_id: str, data: DomainCreate, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/domains", "POST", body=data, cancel=cancel
        )

    async def update_domain(
        self, landscape_id: str, domain_id: str, data: DomainUpdate, version_id: str = LATEST,
        *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/domains/{_seg(domain_id)}", "PATCH", body=data, cancel=cancel
        )

    async def delete_domain(
        self, landscape_id: str, domain_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> None:
        await self._call(
            f"{self._version(landscape_id, version_id)}/domains/{_seg(domain_id)}", "DELETE", cancel=cancel
        )

    # ─────────────────────────────────────────────────────────────────
    # Flows
    # ─────────────────────────────────────────────────────────────────

    async def get_flows(
        self, landscape_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(f"{self._version(landscape_id, version_id)}/flows", cancel=cancel)

    async def get_flow(
        self, landscape_id: str, flow_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(f"{self._version(landscape_id, version_id)}/flows/{_seg(flow_id)}", cancel=cancel)

    async def get_flow_thumbnails(
        self, landscape_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(f"{self._version(landscape_id, version_id)}/flows/thumbnails", cancel=cancel)

    async def get_flow_thumbnail(
        self, landscape_id: str, flow_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/flows/{_seg(flow_id)}/thumbnail", cancel=cancel
        )

    async def _flow_export(
        self, landscape_id: str, flow_id: str, kind: str, version_id: str, cancel: asyncio.Event | None
    ) -> str:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/flows/{_seg(flow_id)}/export/{kind}",
            response_type="text", cancel=cancel,
        )

    async def get_flow_text(
        self, landscape_id: str, flow_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> str:
        """Flow as a plain-language step list."""
        return await self._flow_export(landscape_id, flow_id, "text", version_id, cancel)

    async def get_flow_code(
        self, landscape_id: str, flow_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> str:
        """Flow as IcePanel flow code."""
        return await self._flow_export(landscape_id, flow_id, "code", version_id, cancel)

    async def get_flow_mermaid(
        self, landscape_id: str, flow_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> str:
        """Flow as a Mermaid sequence diagram."""
        return await self._flow_export(landscape_id, flow_id, "mermaid", version_id, cancel)

    # ─────────────────────────────────────────────────────────────────
    # Diagrams
    # ─────────────────────────────────────────────────────────────────

    async def get_diagrams(
        self, landscape_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(f"{self._version(landscape_id, version_id)}/diagrams", cancel=cancel)

    async def get_diagram(
        self, landscape_id: str, diagram_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/diagrams/{_seg(diagram_id)}", cancel=cancel
        )

    async def get_diagram_thumbnails(
        self, landscape_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(f"{self._version(landscape_id, version_id)}/diagrams/thumbnails", cancel=cancel)

    async def get_diagram_thumbnail(
        self, landscape_id: str, diagram_id: str, version_id: str = LATEST, *, cancel: asyncio.Event | None = None
    ) -> Any:
        return await self._call(
            f"{self._version(landscape_id, version_id)}/diagrams/{_seg(diagram_id)}/thumbnail", cancel=cancel
        )

    # ─────────────────────────────────────────────────────────────────
    # Technologies
    # ─────────────────────────────────────────────────────────────────

    async def get_catalog_technologies(
        self,
        *,
        filter: TechnologyFilter | Mapping[str, object] | None = None,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call("/catalog/technologies", filter=filter, cancel=cancel)

    async def get_organization_technologies(
        self,
        *,
        filter: TechnologyFilter | Mapping[str, object] | None = None,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self._call(f"/organizations/{self._org()}/technologies", filter=filter, cancel=cancel)
