"""IcePanel API client: resilient request pipeline and endpoint surface."""

from .api import LATEST, IcePanelApi
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
)
from .params import QueryParams, build_filter_params

__all__ = [
    "LATEST",
    "ConnectionCreate",
    "ConnectionFilter",
    "ConnectionUpdate",
    "DomainCreate",
    "DomainUpdate",
    "HttpMethod",
    "IcePanelApi",
    "IcePanelClient",
    "ModelObjectCreate",
    "ModelObjectFilter",
    "ModelObjectUpdate",
    "QueryParams",
    "RequestDescriptor",
    "ResponseType",
    "TagCreate",
    "TagUpdate",
    "TechnologyFilter",
    "build_filter_params",
]
