"""Site users: single user and user collection endpoints."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union
from urllib.parse import quote_plus

from .odata import Queryable
from .utils import normalize_odata_collection, normalize_odata_item, patch_metadata_type


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


def _bool(value: Any) -> bool:
    return value if isinstance(value, bool) else False


def _dump_item(item: Any) -> bytes:
    return json.dumps(item, ensure_ascii=False, separators=(",", ":"), sort_keys=True).encode("utf-8")


@dataclass
class UserInfo:
    """Site user properties."""

    email: str = ""
    id: int = 0
    is_hidden_in_ui: bool = False
    is_site_admin: bool = False
    login_name: str = ""
    principal_type: int = 0
    title: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "UserInfo":
        data = data or {}
        return cls(
            email=_str(data.get("Email")),
            id=_int(data.get("Id")),
            is_hidden_in_ui=_bool(data.get("IsHiddenInUI")),
            is_site_admin=_bool(data.get("IsSiteAdmin")),
            login_name=_str(data.get("LoginName")),
            principal_type=_int(data.get("PrincipalType")),
            title=_str(data.get("Title")),
        )


class UserResp(bytes):
    """Raw user response body with typed accessors."""

    def normalized(self) -> bytes:
        """Body with the verbose OData wrapper removed."""
        return normalize_odata_item(bytes(self))

    def data(self) -> UserInfo:
        """Typed user properties; an unparsable body gives empty ones."""
        try:
            payload = json.loads(self.normalized())
        except ValueError:
            return UserInfo()
        return UserInfo.from_dict(payload if isinstance(payload, dict) else None)


class UsersResp(bytes):
    """Raw users collection response body with typed accessors."""

    def normalized(self) -> bytes:
        """Body as a plain JSON array of items."""
        normalized, _ = normalize_odata_collection(bytes(self))
        return normalized

    def data(self) -> List[UserResp]:
        """The collection items as separate user responses."""
        try:
            items = json.loads(self.normalized())
        except ValueError:
            return []
        if not isinstance(items, list):
            return []
        return [UserResp(_dump_item(item)) for item in items]


class User(Queryable):
    """A single site user endpoint."""

    def get(self) -> UserResp:
        """Fetch this user's data."""
        return UserResp(self.client.get(self.to_url(), self.config))

    def update(self, body: Union[bytes, str]) -> UserResp:
        """Merge the JSON ``body`` into the user's properties."""
        payload = patch_metadata_type(body, "SP.User")
        return UserResp(self.client.update(self.endpoint, payload, self.config))


class Users(Queryable):
    """Site users collection endpoint."""

    def get(self) -> UsersResp:
        """Fetch the users collection."""
        return UsersResp(self.client.get(self.to_url(), self.config))

    def get_by_id(self, user_id: int) -> User:
        """User by numeric ID from the user information list."""
        return User(self.client, f"{self.endpoint}/GetById({int(user_id)})", self.config)

    def get_by_login_name(self, login_name: str) -> User:
        """User by login name."""
        return User(self.client, f"{self.endpoint}('{quote_plus(login_name)}')", self.config)

    def get_by_email(self, email: str) -> User:
        """User by e-mail address."""
        return User(self.client, f"{self.endpoint}/GetByEmail('{quote_plus(email)}')", self.config)