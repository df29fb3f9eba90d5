"""Recycle bin collection and recycled item endpoints."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional

from .odata import Queryable
from .utils import DecodedURL, normalize_odata_collection, normalize_odata_item

_TIME_RE = re.compile(r"^(.*T\d{2}:\d{2}:\d{2})(\.\d+)?(.*)$")


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return 0


def _parse_time(value: Any) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; anything else gives ``None``."""
    if not isinstance(value, str) or not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    match = _TIME_RE.match(text)
    if match and match.group(2):
        fraction = (match.group(2)[1:] + "000000")[:6]
        text = f"{match.group(1)}.{fraction}{match.group(3)}"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo is not None else None


def _decoded_url(value: Any) -> Optional[DecodedURL]:
    return DecodedURL.from_dict(value) if isinstance(value, Mapping) else None


def _dump_item(item: Any) -> bytes:
    return json.dumps(item, ensure_ascii=False, separators=(",", ":"), sort_keys=True).encode("utf-8")


@dataclass
class RecycleBinItemInfo:
    """Properties of a recycled item."""

    author_email: str = ""
    author_name: str = ""
    deleted_by_email: str = ""
    deleted_by_name: str = ""
    deleted_date: Optional[datetime] = None
    deleted_date_local_formatted: str = ""
    dir_name: str = ""
    id: str = ""
    item_state: int = 0
    item_type: int = 0
    leaf_name: str = ""
    size: int = 0
    title: str = ""
    leaf_name_path: Optional[DecodedURL] = None
    dir_name_path: Optional[DecodedURL] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "RecycleBinItemInfo":
        data = data or {}
        return cls(
            author_email=_str(data.get("AuthorEmail")),
            author_name=_str(data.get("AuthorName")),
            deleted_by_email=_str(data.get("DeletedByEmail")),
            deleted_by_name=_str(data.get("DeletedByName")),
            deleted_date=_parse_time(data.get("DeletedDate")),
            deleted_date_local_formatted=_str(data.get("DeletedDateLocalFormatted")),
            dir_name=_str(data.get("DirName")),
            id=_str(data.get("Id")),
            item_state=_int(data.get("ItemState")),
            item_type=_int(data.get("ItemType")),
            leaf_name=_str(data.get("LeafName")),
            size=_int(data.get("Size")),
            title=_str(data.get("Title")),
            leaf_name_path=_decoded_url(data.get("LeafNamePath")),
            dir_name_path=_decoded_url(data.get("DirNamePath")),
        )


class RecycleBinItemResp(bytes):
    """Raw recycled item response body with typed accessors."""

    def normalized(self) -> bytes:
        """Body with the verbose OData wrapper removed."""
        return normalize_odata_item(bytes(self))

    def data(self) -> RecycleBinItemInfo:
        """Typed item properties; an unparsable body gives empty ones."""
        try:
            payload = json.loads(self.normalized())
        except ValueError:
            return RecycleBinItemInfo()
        return RecycleBinItemInfo.from_dict(payload if isinstance(payload, dict) else None)


class RecycleBinResp(bytes):
    """Raw recycle bin collection response body with typed accessors."""

    def normalized(self) -> bytes:
        """Body as a plain JSON array of items."""
        normalized, _ = normalize_odata_collection(bytes(self))
        return normalized

    def data(self) -> List[RecycleBinItemResp]:
        """The collection items as separate item responses."""
        try:
            items = json.loads(self.normalized())
        except ValueError:
            return []
        if not isinstance(items, list):
            return []
        return [RecycleBinItemResp(_dump_item(item)) for item in items]


class RecycleBinItem(Queryable):
    """A single recycled item endpoint."""

    def get(self) -> RecycleBinItemResp:
        """Fetch this recycled item's data."""
        return RecycleBinItemResp(self.client.get(self.endpoint, self.config))

    def restore(self) -> None:
        """Restore this item from the recycle bin."""
        self.client.post(f"{self.endpoint}/Restore()", None, self.config)


class RecycleBin(Queryable):
    """Recycle bin collection endpoint."""

    def get(self) -> RecycleBinResp:
        """Fetch the recycled items collection."""
        return RecycleBinResp(self.client.get(self.to_url(), self.config))

    def get_by_id(self, item_id: str) -> RecycleBinItem:
        """Recycled item by its ID."""
        return RecycleBinItem(self.client, f"{self.endpoint}('{item_id}')", self.config)