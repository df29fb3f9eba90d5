"""OData query modifiers and the base for queryable REST endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

from .utils import RequestConfig, trim_multiline

_VALID_PATH_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    "-_.~!$&'()*+,;=:@[]/%"
)


class ODataMods:
    """A set of OData query modifiers such as ``$select`` and ``$top``."""

    def __init__(self) -> None:
        self.mods: Dict[str, str] = {}

    def get(self) -> Dict[str, str]:
        """The modifiers map."""
        return self.mods

    def add_select(self, values: str) -> "ODataMods":
        self.mods["$select"] = values
        return self

    def add_expand(self, values: str) -> "ODataMods":
        self.mods["$expand"] = values
        return self

    def add_filter(self, values: str) -> "ODataMods":
        self.mods["$filter"] = values
        return self

    def add_skip(self, value: str) -> "ODataMods":
        self.mods["$skiptoken"] = value
        return self

    def add_top(self, value: int) -> "ODataMods":
        self.mods["$top"] = str(int(value))
        return self

    def add_order_by(self, order_by: str, ascending: bool = True) -> "ODataMods":
        """Append an ordering clause; several calls accumulate."""
        direction = "asc" if ascending else "desc"
        current = self.mods.get("$orderby", "")
        if current:
            current += ","
        self.mods["$orderby"] = f"{current}{order_by} {direction}"
        return self


def _escape_path(path: str) -> str:
    if all(char in _VALID_PATH_CHARS for char in path):
        return path
    return quote(unquote(path), safe="/-_.~$&+,:;=@")


def to_url(endpoint: str, modifiers: Optional[ODataMods]) -> str:
    """Endpoint with the modifiers merged into its query string, keys sorted."""
    try:
        parts = urlsplit(endpoint)
    except ValueError:
        return endpoint
    query: Dict[str, List[str]] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        query.setdefault(key, []).append(value)
    if modifiers is not None:
        for key, value in modifiers.get().items():
            query[key] = [trim_multiline(value)]
    pairs = [(key, value) for key in sorted(query) for value in query[key]]
    encoded = urlencode(pairs, safe="")
    return urlunsplit(
        (parts.scheme, parts.netloc, _escape_path(parts.path), encoded, parts.fragment)
    )


class Queryable:
    """A REST endpoint that carries a request config and OData modifiers."""

    def __init__(self, client: Any, endpoint: str, config: Optional[RequestConfig] = None) -> None:
        self.client = client
        self.endpoint = endpoint
        self.config = config
        self.modifiers = ODataMods()

    def to_url(self) -> str:
        """Endpoint URL including the current modifiers."""
        return to_url(self.endpoint, self.modifiers)

    def conf(self, config: Optional[RequestConfig]) -> "Queryable":
        self.config = config
        return self

    def select(self, props: str) -> "Queryable":
        self.modifiers.add_select(props)
        return self

    def expand(self, props: str) -> "Queryable":
        self.modifiers.add_expand(props)
        return self

    def filter(self, expression: str) -> "Queryable":
        self.modifiers.add_filter(expression)
        return self

    def top(self, value: int) -> "Queryable":
        self.modifiers.add_top(value)
        return self

    def skip(self, token: str) -> "Queryable":
        self.modifiers.add_skip(token)
        return self

    def order_by(self, field: str, ascending: bool = True) -> "Queryable":
        self.modifiers.add_order_by(field, ascending)
        return self