"""User profiles API: profile lookups and profile property updates."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence
from urllib.parse import quote_plus

from .odata import Queryable, to_url
from .utils import (
    TypedKeyValue,
    get_prior_endpoint,
    normalize_multi_lookups,
    normalize_odata_collection,
    normalize_odata_item,
)


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


def _strings(value: Any) -> List[str]:
    if isinstance(value, Mapping):
        value = value.get("results")
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _load_object(payload: bytes) -> Optional[Mapping[str, Any]]:
    try:
        data = json.loads(payload)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _dumps(value: Any) -> bytes:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), sort_keys=True).encode("utf-8")


@dataclass
class ProfileInfo:
    """User profile object properties."""

    account_name: str = ""
    display_name: str = ""
    follow_personal_site_url: str = ""
    is_default_document_library_blocked: bool = False
    is_people_list_public: bool = False
    is_privacy_setting_on: bool = False
    is_self: bool = False
    job_title: str = ""
    my_site_first_run_experience: int = 0
    my_site_host_url: str = ""
    o15_first_run_experience: int = 0
    personal_site_capabilities: int = 0
    personal_site_first_creation_error: str = ""
    personal_site_first_creation_time: str = ""
    personal_site_instantiation_state: int = 0
    personal_site_last_creation_time: str = ""
    personal_site_number_of_retries: int = 0
    picture_import_enabled: bool = False
    picture_url: str = ""
    public_url: str = ""
    sip_address: str = ""
    url_to_create_personal_site: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ProfileInfo":
        data = data or {}
        return cls(
            account_name=_str(data.get("AccountName")),
            display_name=_str(data.get("DisplayName")),
            follow_personal_site_url=_str(data.get("FollowPersonalSiteUrl")),
            is_default_document_library_blocked=_bool(data.get("IsDefaultDocumentLibraryBlocked")),
            is_people_list_public=_bool(data.get("IsPeopleListPublic")),
            is_privacy_setting_on=_bool(data.get("IsPrivacySettingOn")),
            is_self=_bool(data.get("IsSelf")),
            job_title=_str(data.get("JobTitle")),
            my_site_first_run_experience=_int(data.get("MySiteFirstRunExperience")),
            my_site_host_url=_str(data.get("MySiteHostUrl")),
            o15_first_run_experience=_int(data.get("O15FirstRunExperience")),
            personal_site_capabilities=_int(data.get("PersonalSiteCapabilities")),
            personal_site_first_creation_error=_str(data.get("PersonalSiteFirstCreationError")),
            personal_site_first_creation_time=_str(data.get("PersonalSiteFirstCreationTime")),
            personal_site_instantiation_state=_int(data.get("PersonalSiteInstantiationState")),
            personal_site_last_creation_time=_str(data.get("PersonalSiteLastCreationTime")),
            personal_site_number_of_retries=_int(data.get("PersonalSiteNumberOfRetries")),
            picture_import_enabled=_bool(data.get("PictureImportEnabled")),
            picture_url=_str(data.get("PictureUrl")),
            public_url=_str(data.get("PublicUrl")),
            sip_address=_str(data.get("SipAddress")),
            url_to_create_personal_site=_str(data.get("UrlToCreatePersonalSite")),
        )


@dataclass
class ProfilePropsInfo:
    """Person properties of a user profile."""

    account_name: str = ""
    direct_reports: List[str] = field(default_factory=list)
    display_name: str = ""
    email: str = ""
    extended_managers: List[str] = field(default_factory=list)
    extended_reports: List[str] = field(default_factory=list)
    peers: List[str] = field(default_factory=list)
    is_followed: bool = False
    personal_site_host_url: str = ""
    personal_url: str = ""
    picture_url: str = ""
    title: str = ""
    user_url: str = ""
    user_profile_properties: List[TypedKeyValue] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ProfilePropsInfo":
        data = data or {}
        props = data.get("UserProfileProperties")
        if isinstance(props, Mapping):
            props = props.get("results")
        if not isinstance(props, list):
            props = []
        return cls(
            account_name=_str(data.get("AccountName")),
            direct_reports=_strings(data.get("DirectReports")),
            display_name=_str(data.get("DisplayName")),
            email=_str(data.get("Email")),
            extended_managers=_strings(data.get("ExtendedManagers")),
            extended_reports=_strings(data.get("ExtendedReports")),
            peers=_strings(data.get("Peers")),
            is_followed=_bool(data.get("IsFollowed")),
            personal_site_host_url=_str(data.get("PersonalSiteHostUrl")),
            personal_url=_str(data.get("PersonalUrl")),
            picture_url=_str(data.get("PictureUrl")),
            title=_str(data.get("Title")),
            user_url=_str(data.get("UserUrl")),
            user_profile_properties=[
                TypedKeyValue.from_dict(p) for p in props if isinstance(p, Mapping)
            ],
        )


class ProfileResp(bytes):
    """Raw user profile response body with typed accessors."""

    def normalized(self) -> bytes:
        """Body with the verbose OData wrapper removed."""
        return normalize_odata_item(bytes(self))

    def data(self) -> ProfileInfo:
        """Typed profile properties; an unparsable body gives empty ones."""
        payload = normalize_multi_lookups(normalize_odata_item(bytes(self)))
        return ProfileInfo.from_dict(_load_object(payload))


class ProfilePropsResp(bytes):
    """Raw person properties response body with typed accessors."""

    def normalized(self) -> bytes:
        """Body normalized as an OData collection."""
        normalized, _ = normalize_odata_collection(bytes(self))
        return normalized

    def data(self) -> ProfilePropsInfo:
        """Typed person properties; an unparsable body gives empty ones."""
        payload = normalize_multi_lookups(normalize_odata_item(bytes(self)))
        return ProfilePropsInfo.from_dict(_load_object(payload))


class Profiles(Queryable):
    """People manager (user profiles) endpoint."""

    def _site_api(self, path: str) -> str:
        return get_prior_endpoint(self.endpoint, "/_api") + "/_api/" + path

    def get_my_properties(self) -> ProfilePropsResp:
        """Person properties of the current user."""
        url = to_url(f"{self.endpoint}/GetMyProperties", self.modifiers)
        return ProfilePropsResp(self.client.post(url, None, self.config))

    def get_properties_for(self, login_name: str) -> ProfilePropsResp:
        """Person properties of the user with the given login name."""
        endpoint = f"{self.endpoint}/GetPropertiesFor('{quote_plus(login_name)}')"
        return ProfilePropsResp(self.client.get(to_url(endpoint, self.modifiers), self.config))

    def get_user_profile_property_for(self, login_name: str, property_name: str) -> str:
        """Value of one profile property of the user with the given login name."""
        endpoint = (
            f"{self.endpoint}/GetUserProfilePropertyFor("
            f"accountname='{quote_plus(login_name)}',"
            f"propertyname='{quote_plus(property_name)}')"
        )
        data = normalize_odata_item(self.client.get(endpoint, self.config))
        try:
            res = json.loads(data)
        except ValueError as err:
            raise ValueError(f"can't parse profile property response: {err}") from err
        if res is None:
            res = {}
        if not isinstance(res, dict):
            raise ValueError("can't parse profile property response")
        values = {}
        for key in ("value", "GetUserProfilePropertyFor"):
            value = res.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"unexpected type of {key!r} in profile property response")
            values[key] = value or ""
        return values["value"] or values["GetUserProfilePropertyFor"]

    def get_owner_user_profile(self) -> ProfileResp:
        """Profile of the owner user."""
        url = to_url(self._site_api("sp.userprofiles.profileloader.getowneruserprofile"), self.modifiers)
        return ProfileResp(self.client.post(url, None, self.config))

    def user_profile(self) -> ProfileResp:
        """Profile object of the current user."""
        url = to_url(
            self._site_api("sp.userprofiles.profileloader.getprofileloader/GetUserProfile"),
            self.modifiers,
        )
        return ProfileResp(self.client.post(url, None, self.config))

    def set_single_value_profile_property(self, login_name: str, property_name: str, value: str) -> None:
        """Set a single-valued profile property of a user."""
        body = _dumps(
            {"accountName": login_name, "propertyName": property_name, "propertyValue": value}
        )
        self.client.post(f"{self.endpoint}/SetSingleValueProfileProperty", body, self.config)

    def set_multi_valued_profile_property(
        self, login_name: str, property_name: str, values: Sequence[str]
    ) -> None:
        """Set a multi-valued profile property of a user."""
        body = _dumps(
            {"accountName": login_name, "propertyName": property_name, "propertyValues": list(values)}
        )
        self.client.post(f"{self.endpoint}/SetMultiValuedProfileProperty", body, self.config)

    def hide_suggestion(self, login_name: str) -> bytes:
        """Remove a user from the current user's suggested people to follow."""
        endpoint = f"{self.endpoint}/HideSuggestion('{quote_plus(login_name)}')"
        return self.client.post(endpoint, None, self.config)