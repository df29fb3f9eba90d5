"""Helpers for managed metadata (taxonomy) CSOM requests and responses."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Union

Payload = Union[bytes, str]


class CsomResponseError(ValueError):
    """A CSOM response could not be interpreted."""


def append_taxonomy_prop(props: Sequence[str], prop: str) -> List[str]:
    """Add comma-separated property names to ``props``, skipping duplicates."""
    result = list(props)
    for name in prop.split(","):
        name = name.strip(" ")
        if name not in result:
            result.append(name)
    return result


def trim_taxonomy_guid(guid: str) -> str:
    """Reduce a ``/Guid(...)/`` wrapped identifier to a lower-case GUID."""
    guid = guid.lower()
    guid = guid.replace("/guid(", "", 1)
    return guid.replace(")/", "", 1)


def parse_csom_response(payload: Payload) -> Dict[str, Any]:
    """Return the last object of a CSOM process-query response."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    try:
        data = json.loads(payload)
    except ValueError as err:
        raise CsomResponseError(f"can't parse CSOM response: {err}") from err
    if not isinstance(data, list):
        raise CsomResponseError("can't parse CSOM response: not an array")
    if not data:
        raise CsomResponseError("empty CSOM response")
    last = data[-1]
    if last is None:
        raise CsomResponseError("object not found")
    if not isinstance(last, dict):
        raise CsomResponseError(f"can't cast CSOM response, {last!r}")
    return last


def csom_child_items(payload: Payload, prop: Optional[str] = None) -> List[Dict[str, Any]]:
    """Child items of a CSOM response, optionally of one of its properties."""
    data = parse_csom_response(payload)
    if prop is not None:
        data = data.get(prop)
        if not isinstance(data, dict):
            raise CsomResponseError("can't get property data")
    items = data.get("_Child_Items_")
    if not isinstance(items, list):
        raise CsomResponseError("can't get child items")
    for item in items:
        if not isinstance(item, dict):
            raise CsomResponseError("can't get child item")
    return list(items)