import json

from sprest.user import User, UserInfo, UserResp, Users, UsersResp
from sprest.utils import SPClient

SITE = "https://contoso.sharepoint.com/sites/site"


class FakeTransport:
    def __init__(self, response=b"{}"):
        self.response = response
        self.calls = []

    def __call__(self, method, url, headers, body, timeout):
        self.calls.append({"method": method, "url": url, "headers": headers, "body": body})
        return self.response


def make_client(response=b"{}"):
    transport = FakeTransport(response)
    return SPClient(SITE, transport=transport), transport


def test_users_to_url_is_endpoint():
    client, _ = make_client()
    endpoint = SITE + "/_api/Web/SiteUsers"
    assert Users(client, endpoint).to_url() == endpoint


def test_user_to_url_is_endpoint():
    client, _ = make_client()
    endpoint = SITE + "/_api/Web/CurrentUser"
    assert User(client, endpoint).to_url() == endpoint


def test_users_get_with_modifiers():
    client, transport = make_client(b'{"d":{"results":[{"Id":1},{"Id":2}]}}')
    users = Users(client, SITE + "/_api/Web/SiteUsers")
    resp = users.select("Id").top(5).get()
    assert transport.calls[0]["method"] == "GET"
    assert transport.calls[0]["url"] == SITE + "/_api/Web/SiteUsers?%24select=Id&%24top=5"
    assert [item.data().id for item in resp.data()] == [1, 2]


def test_get_by_id_endpoint():
    client, _ = make_client()
    user = Users(client, SITE + "/_api/Web/SiteUsers").get_by_id(7)
    assert user.endpoint == SITE + "/_api/Web/SiteUsers/GetById(7)"


def test_get_by_login_name_escapes():
    client, _ = make_client()
    user = Users(client, SITE + "/_api/Web/SiteUsers").get_by_login_name("i:0#.f|membership|user@example.com")
    assert user.endpoint == SITE + "/_api/Web/SiteUsers('i%3A0%23.f%7Cmembership%7Cuser%40example.com')"


def test_get_by_email_escapes():
    client, _ = make_client()
    user = Users(client, SITE + "/_api/Web/SiteUsers").get_by_email("user@example.com")
    assert user.endpoint == SITE + "/_api/Web/SiteUsers/GetByEmail('user%40example.com')"


def test_user_resp_data_verbose():
    resp = UserResp(b'{"d":{"Id":12,"LoginName":"login","Email":"user@example.com","IsSiteAdmin":true}}')
    info = resp.data()
    assert info == UserInfo(email="user@example.com", id=12, is_site_admin=True, login_name="login")


def test_user_resp_data_minimal_matches_verbose():
    minimal = UserResp(b'{"Id":3,"Title":"Name"}')
    verbose = UserResp(b'{"d":{"Id":3,"Title":"Name"}}')
    assert minimal.data() == verbose.data()
    assert json.loads(verbose.normalized()) == {"Id": 3, "Title": "Name"}


def test_user_resp_garbage_gives_empty():
    assert UserResp(b"not json").data() == UserInfo()


def test_users_resp_normalized_forms_agree():
    verbose = UsersResp(b'{"d":{"results":[{"Id":1}]}}')
    minimal = UsersResp(b'{"value":[{"Id":1}]}')
    assert verbose.normalized() == minimal.normalized()
    assert json.loads(verbose.normalized()) == [{"Id": 1}]


def test_user_update_patches_metadata():
    client, transport = make_client(b"")
    User(client, SITE + "/_api/Web/CurrentUser").update(b'{"Title":"New"}')
    call = transport.calls[0]
    assert call["headers"]["X-HTTP-Method"] == "MERGE"
    body = json.loads(call["body"])
    assert body == {"Title": "New", "__metadata": {"type": "SP.User"}}