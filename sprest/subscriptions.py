"""List webhook subscriptions."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .utils import (
    RequestConfig,
    get_prior_endpoint,
    normalize_odata_collection,
    normalize_odata_item,
    patch_config_headers,
)

_TIME_RE = re.compile(r"^(.*T\d{2}:\d{2}:\d{2})(\.\d+)?(.*)$")


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _parse_time(value: Any) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; missing values give ``None``."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"invalid timestamp: {value!r}")
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    match = _TIME_RE.match(text)
    if match and match.group(2):
        fraction = (match.group(2)[1:] + "000000")[:6]
        text = f"{match.group(1)}.{fraction}{match.group(3)}"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as err:
        raise ValueError(f"invalid timestamp: {value!r}") from err
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp without zone: {value!r}")
    return parsed


def _format_time(value: datetime) -> str:
    """RFC 3339 with trimmed fraction; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset()
    if not offset:
        return text + "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    minutes = abs(minutes)
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return _format_time(value)
    raise TypeError(f"can't serialize {type(value).__name__}")


def _dumps(value: Any) -> bytes:
    return json.dumps(value, default=_json_default, separators=(",", ":"), sort_keys=True).encode("utf-8")


@dataclass
class SubscriptionInfo:
    """A list webhook subscription."""

    id: str = ""
    notification_url: str = ""
    expiration_date_time: Optional[datetime] = None
    resource: str = ""
    client_state: str = ""
    resource_data: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SubscriptionInfo":
        data = data or {}
        return cls(
            id=_str(data.get("id")),
            notification_url=_str(data.get("notificationUrl")),
            expiration_date_time=_parse_time(data.get("expirationDateTime")),
            resource=_str(data.get("resource")),
            client_state=_str(data.get("clientState")),
            resource_data=_str(data.get("resourceData")),
        )


def _parse_item(payload: bytes) -> Optional[SubscriptionInfo]:
    data = json.loads(normalize_odata_item(payload))
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError("can't parse subscription response")
    return SubscriptionInfo.from_dict(data)


def _json_config(config: Optional[RequestConfig]) -> RequestConfig:
    return patch_config_headers(config, {"Content-Type": "application/json"})


class Subscription:
    """A single list subscription endpoint."""

    def __init__(self, client: Any, endpoint: str, config: Optional[RequestConfig] = None) -> None:
        self.client = client
        self.endpoint = endpoint
        self.config = config

    def get(self) -> Optional[SubscriptionInfo]:
        """Fetch this subscription."""
        return _parse_item(self.client.get(self.endpoint, self.config))

    def delete(self) -> None:
        """Delete this subscription."""
        self.client.delete(self.endpoint, self.config)

    def update(self, metadata: Dict[str, Any]) -> Optional[SubscriptionInfo]:
        """Update the subscription with ``metadata`` and return it refreshed."""
        self.client.update(self.endpoint, _dumps(metadata), _json_config(self.config))
        return self.get()

    def set_expiration(self, expiration: datetime) -> Optional[SubscriptionInfo]:
        """Set a new expiration date and time."""
        return self.update({"expirationDateTime": expiration})

    def set_notification_url(self, notification_url: str) -> Optional[SubscriptionInfo]:
        """Set a new notification URL."""
        return self.update({"notificationUrl": notification_url})

    def set_client_state(self, client_state: str) -> Optional[SubscriptionInfo]:
        """Set a new client state."""
        return self.update({"clientState": client_state})


class Subscriptions:
    """A list's subscriptions collection endpoint."""

    def __init__(self, client: Any, endpoint: str, config: Optional[RequestConfig] = None) -> None:
        self.client = client
        self.endpoint = endpoint
        self.config = config

    def get(self) -> List[SubscriptionInfo]:
        """Fetch all subscriptions of the list."""
        data, _ = normalize_odata_collection(self.client.get(self.endpoint, self.config))
        items = json.loads(data)
        if items is None:
            return []
        if not isinstance(items, list):
            raise ValueError("can't parse subscriptions response")
        return [SubscriptionInfo.from_dict(item) for item in items if isinstance(item, dict)]

    def get_by_id(self, subscription_id: str) -> Subscription:
        """Subscription by its ID (GUID)."""
        return Subscription(self.client, f"{self.endpoint}('{subscription_id}')", self.config)

    def add(
        self, notification_url: str, expiration: datetime, client_state: str = ""
    ) -> Optional[SubscriptionInfo]:
        """Create a subscription to the list."""
        payload = {
            "notificationUrl": notification_url,
            "expirationDateTime": expiration,
            "resource": get_prior_endpoint(self.endpoint, "/subscriptions"),
            "clientState": client_state,
        }
        resp = self.client.post(self.endpoint, _dumps(payload), _json_config(self.config))
        return _parse_item(resp)