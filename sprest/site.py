"""Site collection endpoint."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from .odata import Queryable
from .recycle_bin import RecycleBin
from .user import User
from .utils import DecodedURL, StringValue, normalize_odata_item, patch_metadata_type


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


def _string_value(value: Any) -> Optional[StringValue]:
    return StringValue.from_dict(value) if isinstance(value, Mapping) else None


def _decoded_url(value: Any) -> Optional[DecodedURL]:
    return DecodedURL.from_dict(value) if isinstance(value, Mapping) else None


@dataclass
class SiteInfo:
    """Site collection properties."""

    allow_create_declarative_workflow: bool = False
    allow_designer: bool = False
    allow_master_page_editing: bool = False
    allow_revert_from_template: bool = False
    allow_save_declarative_workflow_as_template: bool = False
    allow_save_publish_declarative_workflow: bool = False
    allow_self_service_upgrade: bool = False
    allow_self_service_upgrade_evaluation: bool = False
    audit_log_trimming_retention: int = 0
    compatibility_level: int = 0
    current_change_token: Optional[StringValue] = None
    disable_app_views: bool = False
    disable_company_wide_sharing_links: bool = False
    disable_flows: bool = False
    external_sharing_tips_enabled: bool = False
    geo_location: str = ""
    group_id: str = ""
    hub_site_id: str = ""
    id: str = ""
    is_hub_site: bool = False
    max_items_per_throttled_operation: int = 0
    needs_b2b_upgrade: bool = False
    primary_uri: str = ""
    read_only: bool = False
    required_designer_version: str = ""
    resource_path: Optional[DecodedURL] = None
    sandboxed_code_activation_capability: int = 0
    sensitivity_label: str = ""
    sensitivity_label_id: str = ""
    server_relative_url: str = ""
    share_by_email_enabled: bool = False
    share_by_link_enabled: bool = False
    show_url_structure: bool = False
    trim_audit_log: bool = False
    ui_version_configuration_enabled: bool = False
    upgrade_reminder_date: str = ""
    upgrade_scheduled: bool = False
    upgrade_scheduled_date: str = ""
    upgrading: bool = False
    url: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SiteInfo":
        data = data or {}
        return cls(**{name: conv(data.get(key)) for name, (key, conv) in _SITE_FIELDS.items()})


_SITE_FIELDS: Dict[str, Tuple[str, Callable[[Any], Any]]] = {
    "allow_create_declarative_workflow": ("AllowCreateDeclarativeWorkflow", _bool),
    "allow_designer": ("AllowDesigner", _bool),
    "allow_master_page_editing": ("AllowMasterPageEditing", _bool),
    "allow_revert_from_template": ("AllowRevertFromTemplate", _bool),
    "allow_save_declarative_workflow_as_template": ("AllowSaveDeclarativeWorkflowAsTemplate", _bool),
    "allow_save_publish_declarative_workflow": ("AllowSavePublishDeclarativeWorkflow", _bool),
    "allow_self_service_upgrade": ("AllowSelfServiceUpgrade", _bool),
    "allow_self_service_upgrade_evaluation": ("AllowSelfServiceUpgradeEvaluation", _bool),
    "audit_log_trimming_retention": ("AuditLogTrimmingRetention", _int),
    "compatibility_level": ("CompatibilityLevel", _int),
    "current_change_token": ("CurrentChangeToken", _string_value),
    "disable_app_views": ("DisableAppViews", _bool),
    "disable_company_wide_sharing_links": ("DisableCompanyWideSharingLinks", _bool),
    "disable_flows": ("DisableFlows", _bool),
    "external_sharing_tips_enabled": ("ExternalSharingTipsEnabled", _bool),
    "geo_location": ("GeoLocation", _str),
    "group_id": ("GroupId", _str),
    "hub_site_id": ("HubSiteId", _str),
    "id": ("Id", _str),
    "is_hub_site": ("IsHubSite", _bool),
    "max_items_per_throttled_operation": ("MaxItemsPerThrottledOperation", _int),
    "needs_b2b_upgrade": ("NeedsB2BUpgrade", _bool),
    "primary_uri": ("PrimaryUri", _str),
    "read_only": ("ReadOnly", _bool),
    "required_designer_version": ("RequiredDesignerVersion", _str),
    "resource_path": ("ResourcePath", _decoded_url),
    "sandboxed_code_activation_capability": ("SandboxedCodeActivationCapability", _int),
    "sensitivity_label": ("SensitivityLabel", _str),
    "sensitivity_label_id": ("SensitivityLabelId", _str),
    "server_relative_url": ("ServerRelativeUrl", _str),
    "share_by_email_enabled": ("ShareByEmailEnabled", _bool),
    "share_by_link_enabled": ("ShareByLinkEnabled", _bool),
    "show_url_structure": ("ShowUrlStructure", _bool),
    "trim_audit_log": ("TrimAuditLog", _bool),
    "ui_version_configuration_enabled": ("UIVersionConfigurationEnabled", _bool),
    "upgrade_reminder_date": ("UpgradeReminderDate", _str),
    "upgrade_scheduled": ("UpgradeScheduled", _bool),
    "upgrade_scheduled_date": ("UpgradeScheduledDate", _str),
    "upgrading": ("Upgrading", _bool),
    "url": ("Url", _str),
}

assert set(_SITE_FIELDS) == {f.name for f in fields(SiteInfo)}


class SiteResp(bytes):
    """Raw site response body with typed accessors."""

    def normalized(self) -> bytes:
        """Body with the verbose OData wrapper removed."""
        return normalize_odata_item(bytes(self))

    def data(self) -> SiteInfo:
        """Typed site properties; an unparsable body gives empty ones."""
        try:
            payload = json.loads(self.normalized())
        except ValueError:
            return SiteInfo()
        return SiteInfo.from_dict(payload if isinstance(payload, dict) else None)


class Site(Queryable):
    """Site collection endpoint."""

    def from_url(self, url: str) -> "Site":
        """Site object for an API URL, dropping any query string."""
        return Site(self.client, url.split("?")[0], self.config)

    def get(self) -> SiteResp:
        """Fetch this site's data."""
        return SiteResp(self.client.get(self.to_url(), self.config))

    def update(self, body: Union[bytes, str]) -> SiteResp:
        """Merge the JSON ``body`` into the site's properties."""
        payload = patch_metadata_type(body, "SP.Site")
        return SiteResp(self.client.update(self.endpoint, payload, self.config))

    def delete(self) -> None:
        """Delete this site; it cannot be restored from a recycle bin."""
        self.client.delete(self.endpoint, self.config)

    def open_web_by_id(self, web_id: str) -> bytes:
        """Raw data of a web in this site found by its ID."""
        return self.client.post(f"{self.endpoint}/OpenWebById('{web_id}')", None, self.config)

    def recycle_bin(self) -> RecycleBin:
        """The site's recycle bin."""
        return RecycleBin(self.client, f"{self.endpoint}/RecycleBin", self.config)

    def owner(self) -> User:
        """The site's owner user."""
        return User(self.client, f"{self.endpoint}/Owner", self.config)