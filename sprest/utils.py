"""Helpers for SharePoint REST payloads, endpoints and HTTP requests."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import unquote, urlsplit

VERBOSE_JSON = "application/json;odata=verbose"

Payload = Union[bytes, str]
Transport = Callable[[str, str, Dict[str, str], Optional[bytes], Optional[float]], bytes]


def _as_bytes(payload: Payload) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)


def _loads(payload: Payload) -> Any:
    return json.loads(_as_bytes(payload))


def _dumps(value: Any) -> bytes:
    return json.dumps(
        value, ensure_ascii=False, separators=(",", ":"), sort_keys=True
    ).encode("utf-8")


@dataclass
class RequestConfig:
    """Per-request overrides: extra headers and an optional timeout in seconds."""

    headers: Optional[Dict[str, str]] = None
    timeout: Optional[float] = None


def _urllib_transport(
    method: str,
    url: str,
    headers: Dict[str, str],
    body: Optional[bytes],
    timeout: Optional[float],
) -> bytes:
    request = urllib.request.Request(url, data=body, headers=headers, method=method)
    try:
        if timeout is None:
            response = urllib.request.urlopen(request)
        else:
            response = urllib.request.urlopen(request, timeout=timeout)
        with response:
            return response.read()
    except urllib.error.HTTPError as err:
        detail = err.read().decode("utf-8", "replace")
        raise RuntimeError(f"{err.code} {err.reason} :: {detail}") from err


class SPClient:
    """Minimal SharePoint HTTP client bound to a site URL.

    ``headers`` are sent with every request (authentication headers belong here);
    ``transport`` performs the actual exchange and defaults to urllib.
    """

    def __init__(
        self,
        site_url: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        self.site_url = site_url
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._transport = transport or _urllib_transport

    def _send(
        self,
        method: str,
        url: str,
        body: Optional[Payload],
        config: Optional[RequestConfig],
        extra: Optional[Mapping[str, str]] = None,
    ) -> bytes:
        headers = {
            "Accept": VERBOSE_JSON,
            "Content-Type": VERBOSE_JSON + ";charset=utf-8",
            **self.headers,
            **(extra or {}),
            **get_conf_headers(config),
        }
        timeout = self.timeout
        if config is not None and config.timeout is not None:
            timeout = config.timeout
        data = None if body is None else _as_bytes(body)
        return self._transport(method, url, headers, data, timeout)

    def get(self, url: str, config: Optional[RequestConfig] = None) -> bytes:
        """Send a GET request and return the response body."""
        return self._send("GET", url, None, config)

    def post(
        self,
        url: str,
        body: Optional[Payload] = None,
        config: Optional[RequestConfig] = None,
    ) -> bytes:
        """Send a POST request and return the response body."""
        return self._send("POST", url, b"" if body is None else body, config)

    def update(
        self,
        url: str,
        body: Optional[Payload] = None,
        config: Optional[RequestConfig] = None,
    ) -> bytes:
        """Send a MERGE (partial update) request."""
        extra = {"X-HTTP-Method": "MERGE", "If-Match": "*"}
        return self._send("POST", url, b"" if body is None else body, config, extra)

    def delete(self, url: str, config: Optional[RequestConfig] = None) -> bytes:
        """Send a DELETE request."""
        extra = {"X-HTTP-Method": "DELETE", "If-Match": "*"}
        return self._send("POST", url, b"", config, extra)


@dataclass
class StringValue:
    """Single string value property."""

    string_value: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "StringValue":
        return cls(string_value=(data or {}).get("StringValue") or "")


@dataclass
class DecodedURL:
    """Decoded URL property."""

    decoded_url: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DecodedURL":
        return cls(decoded_url=(data or {}).get("DecodedUrl") or "")


@dataclass
class TypedKeyValue:
    """Typed key/value property."""

    key: str = ""
    value: str = ""
    value_type: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "TypedKeyValue":
        data = data or {}
        return cls(
            key=data.get("Key") or "",
            value=data.get("Value") or "",
            value_type=data.get("ValueType") or "",
        )


def trim_multiline(multi: str) -> str:
    """Join lines into one, stripping leading and trailing tabs of each."""
    return "".join(line.strip("\t") for line in multi.split("\n"))


def normalize_odata_item(payload: Payload) -> bytes:
    """Unwrap a verbose ``{"d": {...}}`` item; other payloads are returned as is."""
    raw = _as_bytes(payload)
    try:
        data = _loads(raw)
    except ValueError:
        return raw
    if not isinstance(data, dict):
        return raw
    inner = data.get("d")
    if not isinstance(inner, dict) or not inner:
        return raw
    return _dumps(normalize_multi_lookups_map(inner))


def normalize_odata_collection(payload: Payload) -> Tuple[bytes, str]:
    """Turn any OData collection flavour into a plain JSON array plus next-page URL."""
    chunks, next_url = split_odata_collection(payload)
    items = []
    for chunk in chunks:
        try:
            item = _loads(chunk)
        except ValueError:
            continue
        if isinstance(item, dict):
            items.append(normalize_multi_lookups_map(item))
    return _dumps(items), next_url


def extract_entity_uri(payload: Payload) -> str:
    """Get the REST entity URI from an item payload."""
    try:
        data = _loads(normalize_odata_item(payload))
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""
    entity_uri = data.get("odata.id") if isinstance(data.get("odata.id"), str) else ""
    metadata = data.get("__metadata")
    if isinstance(metadata, dict):
        metadata_id = metadata.get("id")
        if isinstance(metadata_id, str) and metadata_id:
            entity_uri = metadata_id
    return entity_uri


def escape_path_uri(s: str) -> str:
    """Escape a server-relative path for GetFile/GetFolder style methods."""
    return s.replace("'", "''").replace("%", "%25").replace("#", "%23")


def get_conf_headers(config: Optional[RequestConfig]) -> Dict[str, str]:
    """Headers of a request config, or an empty dict."""
    if config is None or not config.headers:
        return {}
    return dict(config.headers)


def patch_config_headers(
    config: Optional[RequestConfig], headers: Mapping[str, str]
) -> RequestConfig:
    """Return a new config whose headers are the config's ones updated with ``headers``."""
    patched = RequestConfig()
    if config is not None:
        patched.timeout = config.timeout
        patched.headers = dict(config.headers or {})
    if patched.headers is None:
        patched.headers = {}
    patched.headers.update(headers)
    return patched


def get_relative_url(abs_url: str) -> str:
    """Path part of an absolute URL."""
    return unquote(urlsplit(abs_url).path)


def check_get_relative_url(relative_uri: str, ctx_url: str) -> str:
    """Make a web-relative URI server-relative using the context URL."""
    relative_url = get_relative_url(get_prior_endpoint(ctx_url, "/_api"))
    if relative_uri == "":
        return relative_url
    if not relative_uri.startswith("/"):
        relative_uri = f"{relative_url}/{relative_uri}"
    return relative_uri


def _part_index(endpoint: str, part: str) -> int:
    index = endpoint.lower().find(part.lower())
    return len(endpoint) if index < 0 else index


def get_prior_endpoint(endpoint: str, part: str) -> str:
    """Endpoint up to the first case-insensitive occurrence of ``part``."""
    return endpoint[: _part_index(endpoint, part)]


def get_include_endpoint(endpoint: str, part: str) -> str:
    """Endpoint up to and including the first case-insensitive occurrence of ``part``."""
    index = _part_index(endpoint, part)
    if index == len(endpoint):
        return endpoint
    return endpoint[:index] + part


def get_include_endpoints(endpoint: str, parts: Iterable[str]) -> str:
    """Like get_include_endpoint for the last of ``parts`` that shortens the endpoint."""
    result = endpoint
    for part in parts:
        candidate = get_include_endpoint(endpoint, part)
        if len(candidate) < len(endpoint):
            result = candidate
    return result


def contains_metadata_type(payload: Payload) -> bool:
    """Whether a payload carries the ``__metadata`` property."""
    return b'"__metadata"' in _as_bytes(payload)


def patch_metadata_type(payload: Payload, odata_type: str) -> bytes:
    """Add ``__metadata.type`` to a JSON object payload unless it is present."""
    raw = _as_bytes(payload)
    if contains_metadata_type(raw):
        return raw
    try:
        data = _loads(raw)
    except ValueError:
        return raw
    if not isinstance(data, dict):
        return raw
    data["__metadata"] = {"type": odata_type}
    return _dumps(data)


def patch_metadata_type_cb(payload: Payload, resolver: Callable[[], str]) -> bytes:
    """Like patch_metadata_type, resolving the type lazily only when needed."""
    raw = _as_bytes(payload)
    if contains_metadata_type(raw):
        return raw
    return patch_metadata_type(raw, resolver())


def split_odata_collection(payload: Payload) -> Tuple[List[bytes], str]:
    """Split a collection payload into serialized items and the next-page URL."""
    raw = _as_bytes(payload)
    try:
        data = _loads(raw)
    except ValueError:
        return [raw], ""
    next_url = ""
    if isinstance(data, dict):
        value = data.get("value")
        inner = data.get("d")
        if isinstance(value, list):
            items = value
            next_url = data.get("odata.nextLink") or ""
        elif isinstance(inner, dict) and isinstance(inner.get("results"), list):
            items = inner["results"]
            next_url = inner.get("__next") or ""
        else:
            return [raw], ""
    elif isinstance(data, list):
        items = data
    else:
        return [raw], ""
    if not all(isinstance(item, dict) for item in items):
        return [raw], ""
    return [_dumps(item) for item in items], str(next_url)


def get_odata_collection_next_page_url(payload: Payload) -> str:
    """Next-page URL of a collection payload in any OData mode, or ``""``."""
    try:
        data = _loads(payload)
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""
    next_link = data.get("odata.nextLink")
    if isinstance(next_link, str) and next_link:
        return next_link
    inner = data.get("d")
    if isinstance(inner, dict):
        next_url = inner.get("__next")
        if isinstance(next_url, str) and next_url:
            return next_url
    return ""


def normalize_multi_lookups(payload: Payload) -> bytes:
    """Replace verbose ``{"results": [...]}`` wrappers in an item payload."""
    raw = _as_bytes(payload)
    try:
        data = _loads(raw)
    except ValueError:
        return raw
    if not isinstance(data, dict):
        return raw
    return _dumps(normalize_multi_lookups_map(data))


def normalize_multi_lookups_map(item: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively unwrap ``{"results": ...}`` values in a mapping, in place."""
    for key, value in list(item.items()):
        if not isinstance(value, dict):
            continue
        results = value.get("results")
        if results is not None:
            item[key] = results
        current = item[key]
        if isinstance(current, dict):
            item[key] = normalize_multi_lookups_map(current)
        elif isinstance(current, list):
            for index, element in enumerate(current):
                if isinstance(element, dict):
                    current[index] = normalize_multi_lookups_map(element)
    return item


_ZONELESS_DATE_LENGTH = len("2019-12-03T12:19:45")


def fix_dates_in_response(data: Payload, date_fields: Iterable[str]) -> bytes:
    """Append a ``Z`` zone to zone-less date strings in the given fields."""
    raw = _as_bytes(data)
    try:
        metadata = _loads(raw)
    except ValueError:
        return raw
    if not isinstance(metadata, dict):
        return raw
    for name in date_fields:
        value = metadata.get(name)
        if isinstance(value, str) and len(value) == _ZONELESS_DATE_LENGTH:
            metadata[name] = value + "Z"
    return _dumps(metadata)