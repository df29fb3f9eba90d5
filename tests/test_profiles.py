import json

import pytest

from sprest.profiles import ProfilePropsResp, ProfileResp, Profiles

SITE = "https://contoso.sharepoint.com/sites/site"
ENDPOINT = SITE + "/_api/sp.userprofiles.peoplemanager"


class FakeClient:
    def __init__(self, response=b"{}"):
        self.response = response
        self.calls = []

    def get(self, url, config=None):
        self.calls.append(("GET", url, None, config))
        return self.response

    def post(self, url, body=None, config=None):
        self.calls.append(("POST", url, body, config))
        return self.response


def make(response=b"{}"):
    client = FakeClient(response)
    return client, Profiles(client, ENDPOINT)


def test_get_my_properties_posts_to_endpoint():
    client, profiles = make(b'{"d":{"AccountName":"user"}}')
    res = profiles.get_my_properties()
    method, url, body, _ = client.calls[0]
    assert (method, url, body) == ("POST", ENDPOINT + "/GetMyProperties", None)
    assert res.data().account_name == "user"


def test_get_my_properties_applies_modifiers():
    client, profiles = make()
    profiles.select("AccountName").get_my_properties()
    assert client.calls[0][1] == ENDPOINT + "/GetMyProperties?%24select=AccountName"


def test_get_properties_for_escapes_login():
    client, profiles = make()
    profiles.get_properties_for("i:0#.f|membership|user@example.com")
    method, url, _, _ = client.calls[0]
    assert method == "GET"
    assert url == ENDPOINT + "/GetPropertiesFor('i%3A0%23.f%7Cmembership%7Cuser%40example.com')"


@pytest.mark.parametrize(
    "payload",
    [
        b'{"d":{"GetUserProfilePropertyFor":"account"}}',
        b'{"value":"account"}',
        b'{"GetUserProfilePropertyFor":"other","value":"account"}',
    ],
)
def test_get_user_profile_property_for(payload):
    client, profiles = make(payload)
    assert profiles.get_user_profile_property_for("user", "AccountName") == "account"
    assert "propertyname='AccountName'" in client.calls[0][1]
    assert "accountname='user'" in client.calls[0][1]


def test_get_user_profile_property_for_invalid_json():
    _, profiles = make(b"not json")
    with pytest.raises(ValueError):
        profiles.get_user_profile_property_for("user", "AccountName")


def test_owner_and_user_profile_urls():
    client, profiles = make(b'{"AccountName":"owner"}')
    owner = profiles.get_owner_user_profile()
    profiles.user_profile()
    assert client.calls[0][1] == SITE + "/_api/sp.userprofiles.profileloader.getowneruserprofile"
    assert client.calls[1][1] == SITE + "/_api/sp.userprofiles.profileloader.getprofileloader/GetUserProfile"
    assert owner.data().account_name == "owner"


def test_set_single_value_property_body():
    client, profiles = make()
    profiles.set_single_value_profile_property("user@example.com", "AboutMe", "Updated")
    _, url, body, _ = client.calls[0]
    assert url == ENDPOINT + "/SetSingleValueProfileProperty"
    assert json.loads(body) == {
        "accountName": "user@example.com",
        "propertyName": "AboutMe",
        "propertyValue": "Updated",
    }


def test_set_multi_valued_property_body():
    client, profiles = make()
    tags = ["#ci", "#demo", "#test"]
    profiles.set_multi_valued_profile_property("user@example.com", "SPS-HashTags", tags)
    _, url, body, _ = client.calls[0]
    assert url == ENDPOINT + "/SetMultiValuedProfileProperty"
    assert json.loads(body)["propertyValues"] == tags


def test_hide_suggestion_returns_body():
    client, profiles = make(b"done")
    assert profiles.hide_suggestion("user") == b"done"
    assert client.calls[0][1] == ENDPOINT + "/HideSuggestion('user')"


def test_profile_props_resp_data_unwraps_results():
    payload = {
        "d": {
            "AccountName": "user",
            "DirectReports": {"results": ["a", "b"]},
            "UserProfileProperties": {
                "results": [{"Key": "AccountName", "Value": "user", "ValueType": "Edm.String"}]
            },
            "IsFollowed": True,
        }
    }
    info = ProfilePropsResp(json.dumps(payload).encode()).data()
    assert info.direct_reports == ["a", "b"]
    assert info.is_followed is True
    assert info.user_profile_properties[0].key == "AccountName"
    assert info.user_profile_properties[0].value == "user"


def test_profile_props_resp_normalized_collection():
    resp = ProfilePropsResp(b'{"d":{"results":[{"A":1}]}}')
    assert json.loads(resp.normalized()) == [{"A": 1}]


def test_profile_resp_normalized_and_invalid():
    resp = ProfileResp(b'{"d":{"AccountName":"user"}}')
    assert json.loads(resp.normalized()) == {"AccountName": "user"}
    assert ProfileResp(b"garbage").data().account_name == ""