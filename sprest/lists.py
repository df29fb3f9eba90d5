"""Lists collection endpoint."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from .odata import Queryable
from .utils import (
    get_conf_headers,
    normalize_odata_collection,
    patch_config_headers,
)

_LIST_DEFAULTS = {
    "BaseTemplate": 100,
    "AllowContentTypes": False,
    "ContentTypesEnabled": False,
}


def _dumps(value: Any) -> bytes:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), sort_keys=True).encode("utf-8")


class ListsResp(bytes):
    """Raw lists collection response body with typed accessors."""

    def normalized(self) -> bytes:
        """Body as a plain JSON array of items."""
        normalized, _ = normalize_odata_collection(bytes(self))
        return normalized

    def data(self) -> List[bytes]:
        """The collection items as separate JSON bodies."""
        try:
            items = json.loads(self.normalized())
        except ValueError:
            return []
        if not isinstance(items, list):
            return []
        return [_dumps(item) for item in items]


class Lists(Queryable):
    """Lists collection of a web."""

    def get(self) -> ListsResp:
        """Fetch the lists collection."""
        return ListsResp(self.client.get(self.to_url(), self.config))

    def add(self, title: str, metadata: Optional[Mapping[str, Any]] = None) -> bytes:
        """Create a list titled ``title``; ``metadata`` holds further SP.List props."""
        payload: Dict[str, Any] = dict(metadata or {})
        payload["__metadata"] = {"type": "SP.List"}
        payload["Title"] = title
        for key, default in _LIST_DEFAULTS.items():
            if payload.get(key) is None:
                payload[key] = default
        headers = dict(get_conf_headers(self.config) or {})
        headers["Accept"] = "application/json;odata=verbose"
        headers["Content-Type"] = "application/json;odata=verbose;charset=utf-8"
        config = patch_config_headers(self.config, headers)
        return self.client.post(self.endpoint, _dumps(payload), config)