"""Query serialization for IcePanel list filters.

The API expects bracketed filter keys::

    filter[type][]=app&filter[type][]=store    # arrays
    filter[parentId]=null                      # explicit null
    filter[labels][team]=payments              # labels map
    filter[external]=true                      # scalars

The pairs are handed to httpx as-is, so repeated keys survive.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeAlias

from pydantic import BaseModel

QueryParams: TypeAlias = tuple[tuple[str, str], ...]


def _stringify(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_filter_params(filter: Mapping[str, object] | BaseModel | None) -> QueryParams:
    """Convert a filter into ``filter[...]`` query pairs.

    Pydantic filter models are dumped by alias with only the fields that were
    set, so an explicit ``None`` is sent as ``null`` while untouched fields
    are left out.
    """
    if filter is None:
        return ()
    if isinstance(filter, BaseModel):
        filter = filter.model_dump(mode="json", by_alias=True, exclude_unset=True)

    pairs: list[tuple[str, str]] = []
    for key, value in filter.items():
        if key == "labels" and isinstance(value, Mapping):
            pairs.extend((f"filter[labels][{k}]", _stringify(v)) for k, v in value.items())
        elif isinstance(value, (list, tuple, set, frozenset)):
            pairs.extend((f"filter[{key}][]", _stringify(item)) for item in value)
        else:
            pairs.append((f"filter[{key}]", _stringify(value)))
    return tuple(pairs)
