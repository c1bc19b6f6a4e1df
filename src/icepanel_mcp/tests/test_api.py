"""Tests for the endpoint surface and request models."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest
from pydantic import ValidationError

from icepanel_mcp.client import (
    ConnectionCreate,
    ConnectionUpdate,
    DomainCreate,
    DomainUpdate,
    IcePanelApi,
    ModelObjectCreate,
    ModelObjectFilter,
    ModelObjectUpdate,
    TagCreate,
    TagUpdate,
    TechnologyFilter,
)
from icepanel_mcp.foundation.errors import ConfigurationError, IcePanelApiError, RequestCancelled

LANDSCAPE = "L" * 20
PARENT = "P" * 20
OBJ = "O" * 20
TARGET = "T" * 20
GROUP = "G" * 20

V = f"/v1/landscapes/{LANDSCAPE}/versions/latest"


@pytest.fixture
def net(script):
    async def respond(request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            return httpx.Response(204)
        if request.url.path.endswith(("/export/text", "/export/code", "/export/mermaid", "/export/csv")):
            return httpx.Response(200, text="exported")
        return httpx.Response(200, json={"path": request.url.path})

    return script(respond)


@pytest.fixture
def api(net, make_client) -> IcePanelApi:
    return IcePanelApi(make_client(net))


def sent(net) -> httpx.Request:
    return net.requests[-1]


class TestReads:
    @pytest.mark.asyncio
    async def test_landscapes_use_configured_organization(self, api, net) -> None:
        assert await api.get_landscapes() == {"path": "/v1/organizations/org123/landscapes"}
        await api.get_landscape(LANDSCAPE)
        assert sent(net).url.path == f"/v1/organizations/org123/landscapes/{LANDSCAPE}"

    @pytest.mark.asyncio
    async def test_explicit_organization_wins(self, net, make_client) -> None:
        api = IcePanelApi(make_client(net), organization_id="other")
        await api.get_landscapes()
        assert sent(net).url.path == "/v1/organizations/other/landscapes"

    @pytest.mark.asyncio
    async def test_missing_organization(self, net, make_client) -> None:
        api = IcePanelApi(make_client(net, organization_id=None))
        with pytest.raises(ConfigurationError, match="ORGANIZATION_ID"):
            await api.get_organization_technologies()
        assert net.calls == 0

    @pytest.mark.asyncio
    async def test_version_defaults_to_latest(self, api, net) -> None:
        await api.get_version(LANDSCAPE)
        assert sent(net).url.path == V
        await api.get_version(LANDSCAPE, "v2")
        assert sent(net).url.path == f"/v1/landscapes/{LANDSCAPE}/versions/v2"

    @pytest.mark.asyncio
    async def test_model_objects_with_filter(self, api, net) -> None:
        await api.get_model_objects(LANDSCAPE, filter=ModelObjectFilter(type=["app", "store"], parent_id=None))
        req = sent(net)
        assert req.method == "GET"
        assert req.url.path == f"{V}/model/objects"
        assert req.url.params.get_list("filter[type][]") == ["app", "store"]
        assert req.url.params["filter[parentId]"] == "null"

    @pytest.mark.asyncio
    async def test_connections_with_mapping_filter(self, api, net) -> None:
        await api.get_model_connections(LANDSCAPE, filter={"originId": OBJ})
        assert sent(net).url.path == f"{V}/model/connections"
        assert sent(net).url.params["filter[originId]"] == OBJ

    @pytest.mark.asyncio
    async def test_technologies(self, api, net) -> None:
        await api.get_catalog_technologies(filter=TechnologyFilter(type="framework-library"))
        assert sent(net).url.path == "/v1/catalog/technologies"
        assert sent(net).url.params["filter[type]"] == "framework-library"

        await api.get_organization_technologies()
        assert sent(net).url.path == "/v1/organizations/org123/technologies"
        assert sent(net).url.query == b""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("call", "suffix"),
        [
            (lambda a: a.get_model_object(LANDSCAPE, OBJ), f"/model/objects/{OBJ}"),
            (lambda a: a.get_connection(LANDSCAPE, "c1"), "/model/connections/c1"),
            (lambda a: a.get_tags(LANDSCAPE), "/tags"),
            (lambda a: a.get_tag(LANDSCAPE, "t1"), "/tags/t1"),
            (lambda a: a.get_tag_groups(LANDSCAPE), "/tag-groups"),
            (lambda a: a.get_tag_group(LANDSCAPE, "g1"), "/tag-groups/g1"),
            (lambda a: a.get_domains(LANDSCAPE), "/domains"),
            (lambda a: a.get_flows(LANDSCAPE), "/flows"),
            (lambda a: a.get_flow(LANDSCAPE, "f1"), "/flows/f1"),
            (lambda a: a.get_flow_thumbnails(LANDSCAPE), "/flows/thumbnails"),
            (lambda a: a.get_flow_thumbnail(LANDSCAPE, "f1"), "/flows/f1/thumbnail"),
            (lambda a: a.get_diagrams(LANDSCAPE), "/diagrams"),
            (lambda a: a.get_diagram(LANDSCAPE, "d1"), "/diagrams/d1"),
            (lambda a: a.get_diagram_thumbnails(LANDSCAPE), "/diagrams/thumbnails"),
            (lambda a: a.get_diagram_thumbnail(LANDSCAPE, "d1"), "/diagrams/d1/thumbnail"),
        ],
    )
    async def test_version_scoped_reads(self, api, net, call, suffix) -> None:
        assert await call(api) == {"path": f"{V}{suffix}"}
        assert sent(net).method == "GET"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", ["text", "code", "mermaid"])
    async def test_flow_exports_are_text(self, api, net, kind) -> None:
        result = await getattr(api, f"get_flow_{kind}")(LANDSCAPE, "f1")
        assert result == "exported"
        assert sent(net).url.path == f"{V}/flows/f1/export/{kind}"

    @pytest.mark.asyncio
    async def test_connections_csv(self, api, net) -> None:
        assert await api.get_model_connections_csv(LANDSCAPE) == "exported"
        assert sent(net).url.path == f"{V}/model/connections/export/csv"

    @pytest.mark.asyncio
    async def test_segments_are_quoted(self, api, net) -> None:
        await api.get_model_object("a/b", "x?y")
        assert sent(net).url.raw_path == b"/v1/landscapes/a%2Fb/versions/latest/model/objects/x%3Fy"

    @pytest.mark.asyncio
    async def test_cancel_passthrough(self, api, net) -> None:
        cancel = asyncio.Event()
        cancel.set()
        with pytest.raises(RequestCancelled):
            await api.get_flows(LANDSCAPE, cancel=cancel)
        assert net.calls == 0


class TestWrites:
    @pytest.mark.asyncio
    async def test_create_model_object(self, api, net) -> None:
        await api.create_model_object(LANDSCAPE, ModelObjectCreate(name=" Checkout ", type="app", parent_id=PARENT))
        req = sent(net)
        assert req.method == "POST"
        assert req.url.path == f"{V}/model/objects"
        assert json.loads(req.content) == {
            "name": "Checkout",
            "type": "app",
            "parentId": PARENT,
            "status": "live",
            "external": False,
        }

    @pytest.mark.asyncio
    async def test_update_sends_only_set_fields(self, api, net) -> None:
        await api.update_model_object(LANDSCAPE, OBJ, ModelObjectUpdate(name="Billing", description=None))
        req = sent(net)
        assert req.method == "PATCH"
        assert req.url.path == f"{V}/model/objects/{OBJ}"
        assert json.loads(req.content) == {"name": "Billing", "description": None}

    @pytest.mark.asyncio
    async def test_delete_returns_none(self, api, net) -> None:
        assert await api.delete_model_object(LANDSCAPE, OBJ) is None
        assert sent(net).method == "DELETE"
        assert sent(net).content == b""

    @pytest.mark.asyncio
    async def test_connection_direction_null_is_sent(self, api, net) -> None:
        data = ConnectionCreate(name="reads", origin_id=OBJ, target_id=TARGET, direction=None)
        await api.create_connection(LANDSCAPE, data)
        assert json.loads(sent(net).content) == {
            "name": "reads",
            "originId": OBJ,
            "targetId": TARGET,
            "direction": None,
            "status": "live",
        }

    @pytest.mark.asyncio
    async def test_connection_update_and_delete(self, api, net) -> None:
        await api.update_connection(LANDSCAPE, "c1", ConnectionUpdate(direction="bidirectional"))
        assert sent(net).url.path == f"{V}/model/connections/c1"
        assert json.loads(sent(net).content) == {"direction": "bidirectional"}

        await api.delete_connection(LANDSCAPE, "c1")
        assert sent(net).method == "DELETE"

    @pytest.mark.asyncio
    async def test_tags(self, api, net) -> None:
        await api.create_tag(LANDSCAPE, TagCreate(name="PCI", group_id=GROUP, color="red"))
        assert sent(net).url.path == f"{V}/tags"
        assert json.loads(sent(net).content) == {"name": "PCI", "groupId": GROUP, "color": "red"}

        await api.update_tag(LANDSCAPE, "t1", TagUpdate(color="#00ff00"))
        assert json.loads(sent(net).content) == {"color": "#00ff00"}

        await api.delete_tag(LANDSCAPE, "t1")
        assert sent(net).url.path == f"{V}/tags/t1"

    @pytest.mark.asyncio
    async def test_domains(self, api, net) -> None:
        await api.create_domain(LANDSCAPE, DomainCreate(name="Payments"))
        assert sent(net).method == "POST"
        assert json.loads(sent(net).content) == {"name": "Payments"}

        await api.update_domain(LANDSCAPE, "d1", DomainUpdate(name="Billing"))
        assert sent(net).url.path == f"{V}/domains/d1"

        await api.delete_domain(LANDSCAPE, "d1")
        assert sent(net).method == "DELETE"

    @pytest.mark.asyncio
    async def test_writes_are_not_retried(self, script, make_client) -> None:
        net = script(httpx.Response(503))
        api = IcePanelApi(make_client(net, api_max_retries=5))

        with pytest.raises(IcePanelApiError):
            await api.create_domain(LANDSCAPE, DomainCreate(name="Payments"))
        assert net.calls == 1


class TestModels:
    def test_ids_must_be_twenty_characters(self) -> None:
        with pytest.raises(ValidationError):
            ModelObjectCreate(name="x", type="app", parent_id="short")

    def test_root_type_cannot_be_created(self) -> None:
        with pytest.raises(ValidationError):
            ModelObjectCreate(name="x", type="root", parent_id=PARENT)

    @pytest.mark.parametrize("color", ["#zzzzzz", "#fff", "teal"])
    def test_invalid_colors(self, color: str) -> None:
        with pytest.raises(ValidationError):
            DomainCreate(name="x", color=color)

    def test_name_required(self) -> None:
        with pytest.raises(ValidationError):
            TagCreate(name="", group_id=GROUP)

    def test_camel_case_input_accepted(self) -> None:
        data = ModelObjectCreate.model_validate({"name": "x", "type": "store", "parentId": PARENT, "technologyIds": []})
        assert data.to_payload()["technologyIds"] == []

    def test_unknown_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DomainUpdate(name="x", owner="me")
