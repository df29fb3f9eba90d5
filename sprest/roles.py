"""Role definitions and role assignments of securable objects."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Mapping, Optional

from .permissions import BasePermissions
from .utils import RequestConfig, normalize_odata_item, patch_config_headers

VERBOSE_HEADERS = {
    "Accept": "application/json;odata=verbose",
    "Content-Type": "application/json;odata=verbose;charset=utf-8",
}


class RoleTypeKind(IntEnum):
    """Standard role type kinds."""

    NONE = 0
    GUEST = 1
    READER = 2
    CONTRIBUTOR = 3
    WEB_DESIGNER = 4
    ADMINISTRATOR = 5
    EDITOR = 6
    SYSTEM = 7


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


def _load(payload: bytes) -> Any:
    try:
        return json.loads(payload)
    except ValueError as err:
        raise ValueError(f"can't parse response: {err}") from err


@dataclass
class RoleDefInfo:
    """Permissions role definition."""

    base_permissions: Optional[BasePermissions] = None
    description: str = ""
    hidden: bool = False
    id: int = 0
    name: str = ""
    order: int = 0
    role_type_kind: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "RoleDefInfo":
        data = data or {}
        perms = data.get("BasePermissions")
        return cls(
            base_permissions=BasePermissions.from_dict(perms) if isinstance(perms, Mapping) else None,
            description=_str(data.get("Description")),
            hidden=_bool(data.get("Hidden")),
            id=_int(data.get("Id")),
            name=_str(data.get("Name")),
            order=_int(data.get("Order")),
            role_type_kind=_int(data.get("RoleTypeKind")),
        )


class RoleDefinitions:
    """Role definitions collection endpoint."""

    def __init__(self, client: Any, endpoint: str, config: Optional[RequestConfig] = None) -> None:
        self.client = client
        self.endpoint = endpoint
        self.config = config

    def _get_role_def(self, endpoint: str) -> Optional[RoleDefInfo]:
        config = patch_config_headers(self.config, dict(VERBOSE_HEADERS))
        data = _load(self.client.post(endpoint, None, config))
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ValueError("can't parse role definition response")
        info = data.get("d")
        if info is None:
            return None
        if not isinstance(info, dict):
            raise ValueError("can't parse role definition response")
        return RoleDefInfo.from_dict(info)

    def get_by_id(self, role_def_id: int) -> Optional[RoleDefInfo]:
        """Role definition by its numeric ID."""
        return self._get_role_def(f"{self.endpoint}/GetById({int(role_def_id)})")

    def get_by_name(self, role_def_name: str) -> Optional[RoleDefInfo]:
        """Role definition by its name."""
        return self._get_role_def(f"{self.endpoint}/GetByName('{role_def_name}')")

    def get_by_type(self, role_type_kind: int) -> Optional[RoleDefInfo]:
        """Role definition by its role type kind."""
        return self._get_role_def(f"{self.endpoint}/GetByType({int(role_type_kind)})")

    def get(self) -> List[RoleDefInfo]:
        """All available role definitions (expects a verbose response)."""
        data = _load(self.client.get(self.endpoint, self.config))
        if data is None:
            return []
        if not isinstance(data, dict):
            raise ValueError("can't parse role definitions response")
        wrapper = data.get("d")
        if not isinstance(wrapper, dict):
            return []
        results = wrapper.get("results")
        if not isinstance(results, list):
            return []
        return [RoleDefInfo.from_dict(item) for item in results if isinstance(item, dict)]


class Roles:
    """Permissions of a securable object."""

    def __init__(self, client: Any, endpoint: str, config: Optional[RequestConfig] = None) -> None:
        self.client = client
        self.endpoint = endpoint
        self.config = config

    def has_unique_assignments(self) -> bool:
        """Whether the object has unique role assignments."""
        payload = self.client.post(f"{self.endpoint}/HasUniqueRoleAssignments", None, self.config)
        data = _load(normalize_odata_item(payload))
        if data is None:
            return False
        if not isinstance(data, dict):
            raise ValueError("can't parse unique role assignments response")
        result = False
        for key in ("HasUniqueRoleAssignments", "value"):
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, bool):
                raise ValueError(f"unexpected type of {key!r} in response")
            result = result or value
        return result

    def reset_inheritance(self) -> None:
        """Reset permissions inheritance for this object."""
        self.client.post(f"{self.endpoint}/ResetRoleInheritance", None, self.config)

    def break_inheritance(self, copy_role_assignments: bool, clear_sub_scopes: bool) -> None:
        """Break permissions inheritance, optionally copying parent assignments."""
        endpoint = (
            f"{self.endpoint}/BreakRoleInheritance("
            f"copyroleassignments={str(bool(copy_role_assignments)).lower()},"
            f"clearsubscopes={str(bool(clear_sub_scopes)).lower()})"
        )
        self.client.post(endpoint, None, self.config)

    def add_assignment(self, principal_id: int, role_def_id: int) -> None:
        """Grant a role definition to a principal on this object."""
        endpoint = (
            f"{self.endpoint}/RoleAssignments/AddRoleAssignment("
            f"principalid={int(principal_id)},roledefid={int(role_def_id)})"
        )
        self.client.post(endpoint, None, self.config)

    def remove_assignment(self, principal_id: int, role_def_id: int) -> None:
        """Remove a principal's role definition from this object."""
        endpoint = (
            f"{self.endpoint}/RoleAssignments/RemoveRoleAssignment("
            f"principalid={int(principal_id)},roledefid={int(role_def_id)})"
        )
        self.client.post(endpoint, None, self.config)