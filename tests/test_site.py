import json

from sprest.recycle_bin import RecycleBin
from sprest.site import Site, SiteInfo, SiteResp
from sprest.user import User
from sprest.utils import DecodedURL, RequestConfig, SPClient, StringValue

SITE = "https://contoso.sharepoint.com/sites/site"
ENDPOINT = SITE + "/_api/Site"


class FakeTransport:
    def __init__(self, response=b"{}"):
        self.response = response
        self.calls = []

    def __call__(self, method, url, headers, body, timeout):
        self.calls.append({"method": method, "url": url, "headers": headers, "body": body})
        return self.response


def make_site(response=b"{}", config=None):
    transport = FakeTransport(response)
    return Site(SPClient(SITE, transport=transport), ENDPOINT, config), transport


def test_to_url_is_endpoint():
    site, _ = make_site()
    assert site.to_url() == ENDPOINT


def test_from_url():
    site, _ = make_site()
    assert site.from_url("site_url").endpoint == "site_url"


def test_from_url_drops_query_and_keeps_config():
    config = RequestConfig(headers={"Accept": "application/json"})
    site, _ = make_site(config=config)
    other = site.from_url(ENDPOINT + "?$select=Id")
    assert other.endpoint == ENDPOINT
    assert other.config is config


def test_get_url_property():
    site, transport = make_site(b'{"d":{"Url":"https://contoso.sharepoint.com/sites/site"}}')
    data = site.select("Url").get()
    assert transport.calls[0]["url"] == ENDPOINT + "?%24select=Url"
    assert data.data().url == SITE


def test_site_resp_nested_fields():
    payload = {
        "Id": "site-id",
        "ReadOnly": True,
        "CompatibilityLevel": 15,
        "CurrentChangeToken": {"StringValue": "1;1;abc"},
        "ResourcePath": {"DecodedUrl": SITE},
    }
    info = SiteResp(json.dumps(payload).encode()).data()
    assert info.id == "site-id"
    assert info.read_only is True
    assert info.compatibility_level == 15
    assert info.current_change_token == StringValue(string_value="1;1;abc")
    assert info.resource_path == DecodedURL(decoded_url=SITE)


def test_site_resp_garbage_gives_empty():
    assert SiteResp(b"nope").data() == SiteInfo()


def test_site_resp_normalized_unwraps():
    assert json.loads(SiteResp(b'{"d":{"Id":"x"}}').normalized()) == {"Id": "x"}


def test_update_patches_metadata():
    site, transport = make_site(b"")
    site.update(b'{"ShareByLinkEnabled":true}')
    call = transport.calls[0]
    assert call["headers"]["X-HTTP-Method"] == "MERGE"
    assert json.loads(call["body"]) == {"ShareByLinkEnabled": True, "__metadata": {"type": "SP.Site"}}


def test_delete_sends_delete():
    site, transport = make_site(b"")
    site.delete()
    assert transport.calls[0]["url"] == ENDPOINT
    assert transport.calls[0]["headers"]["X-HTTP-Method"] == "DELETE"


def test_open_web_by_id():
    site, transport = make_site(b'{"d":{"Id":"web-id"}}')
    raw = site.open_web_by_id("web-id")
    assert transport.calls[0]["method"] == "POST"
    assert transport.calls[0]["url"] == ENDPOINT + "/OpenWebById('web-id')"
    assert json.loads(raw) == {"d": {"Id": "web-id"}}


def test_owner_and_recycle_bin():
    site, _ = make_site()
    owner = site.owner()
    bin_ = site.recycle_bin()
    assert isinstance(owner, User)
    assert owner.endpoint == ENDPOINT + "/Owner"
    assert isinstance(bin_, RecycleBin)
    assert bin_.endpoint == ENDPOINT + "/RecycleBin"