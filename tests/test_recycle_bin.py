import json
from datetime import datetime, timezone

from sprest.recycle_bin import (
    RecycleBin,
    RecycleBinItem,
    RecycleBinItemInfo,
    RecycleBinItemResp,
    RecycleBinResp,
)
from sprest.utils import DecodedURL, SPClient

SITE = "https://contoso.sharepoint.com/sites/site"
BIN = SITE + "/_api/Web/RecycleBin"


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


def test_get_by_id_endpoint():
    client, _ = make_client()
    item = RecycleBin(client, BIN).get_by_id("abc")
    assert isinstance(item, RecycleBinItem)
    assert item.endpoint == BIN + "('abc')"


def test_get_uses_modifiers():
    client, transport = make_client(b'{"d":{"results":[{"Id":"one"},{"Id":"two"}]}}')
    resp = RecycleBin(client, BIN).top(1).get()
    assert transport.calls[0]["url"] == BIN + "?%24top=1"
    assert [item.data().id for item in resp.data()] == ["one", "two"]


def test_item_get_ignores_modifiers():
    client, transport = make_client(b'{"Id":"abc"}')
    item = RecycleBin(client, BIN).get_by_id("abc")
    item.select("Id")
    assert item.get().data().id == "abc"
    assert transport.calls[0]["url"] == BIN + "('abc')"


def test_restore_posts():
    client, transport = make_client(b"")
    RecycleBin(client, BIN).get_by_id("abc").restore()
    call = transport.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == BIN + "('abc')/Restore()"


def test_item_resp_data_parses_fields():
    payload = {
        "d": {
            "Id": "abc",
            "LeafName": "file.txt",
            "Size": 42,
            "DeletedDate": "2019-01-01T08:00:00Z",
            "LeafNamePath": {"DecodedUrl": "file.txt"},
        }
    }
    info = RecycleBinItemResp(json.dumps(payload).encode()).data()
    assert info.id == "abc"
    assert info.leaf_name == "file.txt"
    assert info.size == 42
    assert info.deleted_date == datetime(2019, 1, 1, 8, 0, tzinfo=timezone.utc)
    assert info.leaf_name_path == DecodedURL(decoded_url="file.txt")
    assert info.dir_name_path is None


def test_item_resp_fractional_seconds():
    resp = RecycleBinItemResp(b'{"DeletedDate":"2019-01-01T08:00:00.5Z"}')
    assert resp.data().deleted_date == datetime(2019, 1, 1, 8, 0, 0, 500000, tzinfo=timezone.utc)


def test_item_resp_bad_date_is_none():
    assert RecycleBinItemResp(b'{"DeletedDate":"yesterday"}').data().deleted_date is None


def test_item_resp_garbage_gives_empty():
    assert RecycleBinItemResp(b"<html>").data() == RecycleBinItemInfo()


def test_collection_normalized_forms_agree():
    verbose = RecycleBinResp(b'{"d":{"results":[{"Id":"a"}]}}')
    minimal = RecycleBinResp(b'{"value":[{"Id":"a"}]}')
    assert verbose.normalized() == minimal.normalized()
    assert json.loads(minimal.normalized()) == [{"Id": "a"}]