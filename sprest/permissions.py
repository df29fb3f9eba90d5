"""SharePoint base permissions and permission kinds."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Mapping, Optional

_UINT64_MASK = (1 << 64) - 1


class PermissionKind(IntEnum):
    """Permission kinds as used by SharePoint base permissions masks."""

    EMPTY_MASK = 0
    VIEW_LIST_ITEMS = 1
    ADD_LIST_ITEMS = 2
    EDIT_LIST_ITEMS = 3
    DELETE_LIST_ITEMS = 4
    APPROVE_ITEMS = 5
    OPEN_ITEMS = 6
    VIEW_VERSIONS = 7
    DELETE_VERSIONS = 8
    CANCEL_CHECKOUT = 9
    MANAGE_PERSONAL_VIEWS = 10
    MANAGE_LISTS = 12
    VIEW_FORM_PAGES = 13
    ANONYMOUS_SEARCH_ACCESS_LIST = 14
    OPEN = 17
    VIEW_PAGES = 18
    ADD_AND_CUSTOMIZE_PAGES = 19
    APPLY_THEME_AND_BORDER = 20
    APPLY_STYLE_SHEETS = 21
    VIEW_USAGE_DATA = 22
    CREATE_SSC_SITE = 23
    MANAGE_SUBWEBS = 24
    CREATE_GROUPS = 25
    MANAGE_PERMISSIONS = 26
    BROWSE_DIRECTORIES = 27
    BROWSE_USER_INFO = 28
    ADD_DEL_PRIVATE_WEB_PARTS = 29
    UPDATE_PERSONAL_WEB_PARTS = 30
    MANAGE_WEB = 31
    ANONYMOUS_SEARCH_ACCESS_WEB_LISTS = 32
    USE_CLIENT_INTEGRATION = 37
    USE_REMOTE_APIS = 38
    MANAGE_ALERTS = 39
    CREATE_ALERTS = 40
    EDIT_MY_USER_INFO = 41
    ENUMERATE_PERMISSIONS = 63
    FULL_MASK = 65


@dataclass
class BasePermissions:
    """Low/high pair of a base permissions mask."""

    high: int = 0
    low: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "BasePermissions":
        """Build from a REST payload, where both halves come as strings."""
        data = data or {}
        return cls(high=int(data.get("High") or 0), low=int(data.get("Low") or 0))


@dataclass
class RoleAssignment:
    """Role assignment: the member principal and its role definition bindings."""

    member_login_name: str = ""
    member_principal_type: int = 0
    role_definition_bindings: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "RoleAssignment":
        data = data or {}
        member = data.get("Member") or {}
        bindings = data.get("RoleDefinitionBindings") or []
        if isinstance(bindings, Mapping):
            bindings = bindings.get("results") or []
        return cls(
            member_login_name=member.get("LoginName") or "",
            member_principal_type=int(member.get("PrincipalType") or 0),
            role_definition_bindings=[dict(b) for b in bindings if isinstance(b, Mapping)],
        )


def has_permissions(base_permissions: BasePermissions, permission_kind: int) -> bool:
    """Whether the base permissions mask includes the given permission kind."""
    kind = int(permission_kind)
    if kind == 0:
        return True

    perm = (kind - 1) & _UINT64_MASK
    low = int(base_permissions.low) & _UINT64_MASK
    high = int(base_permissions.high) & _UINT64_MASK

    if kind == PermissionKind.FULL_MASK:
        return (high & 32767) == 32767 and low == 65535

    if perm < 32:
        return (low & (1 << perm)) != 0
    if perm < 64:
        num = ((1 << perm) - 32) & _UINT64_MASK
        return (high & num) != 0
    return False