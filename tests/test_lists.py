import json

from sprest.lists import Lists, ListsResp
from sprest.utils import get_conf_headers

ENDPOINT = "https://contoso.example.com/sites/site/_api/Web/Lists"


class FakeClient:
    def __init__(self, response=b"{}"):
        self.response = response
        self.calls = []

    def get(self, url, config):
        self.calls.append(("get", url, None, config))
        return self.response

    def post(self, url, body, config):
        self.calls.append(("post", url, body, config))
        return self.response


def test_add_sets_defaults_and_metadata():
    client = FakeClient(b'{"d": {"Title": "Tasks"}}')
    result = Lists(client, ENDPOINT).add("Tasks")
    method, url, body, config = client.calls[0]
    assert method == "post"
    assert url == ENDPOINT
    sent = json.loads(body)
    assert sent["__metadata"] == {"type": "SP.List"}
    assert sent["Title"] == "Tasks"
    assert sent["BaseTemplate"] == 100
    assert sent["AllowContentTypes"] is False
    assert sent["ContentTypesEnabled"] is False
    assert result == b'{"d": {"Title": "Tasks"}}'


def test_add_keeps_given_metadata_and_sets_verbose_headers():
    client = FakeClient()
    Lists(client, ENDPOINT).add("Docs", {"BaseTemplate": 101, "Description": "d"})
    _, _, body, config = client.calls[0]
    sent = json.loads(body)
    assert sent["BaseTemplate"] == 101
    assert sent["Description"] == "d"
    headers = get_conf_headers(config)
    assert headers["Accept"] == "application/json;odata=verbose"
    assert headers["Content-Type"] == "application/json;odata=verbose;charset=utf-8"


def test_add_posts_to_bare_endpoint_despite_modifiers():
    client = FakeClient()
    lists = Lists(client, ENDPOINT)
    lists.select("Id,Title")
    lists.add("Tasks")
    assert client.calls[0][1] == ENDPOINT


def test_get_uses_modifiers():
    client = FakeClient(b"[]")
    lists = Lists(client, ENDPOINT)
    lists.top(1)
    lists.get()
    assert client.calls[0][0] == "get"
    assert client.calls[0][1] == lists.to_url()
    assert client.calls[0][1].startswith(ENDPOINT + "?")


def test_lists_resp_data_and_normalized():
    items = [{"Id": "a", "Title": "One"}, {"Id": "b", "Title": "Two"}]
    resp = ListsResp(json.dumps({"d": {"results": items}}).encode())
    assert json.loads(resp.normalized()) == items
    assert [json.loads(item) for item in resp.data()] == items


def test_lists_resp_minimal_metadata_matches_verbose():
    items = [{"Id": "a"}]
    verbose = ListsResp(json.dumps({"d": {"results": items}}).encode())
    minimal = ListsResp(json.dumps({"value": items}).encode())
    assert verbose.data() == minimal.data()