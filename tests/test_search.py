import json

import pytest

from sprest.search import (
    Search,
    SearchQuery,
    SearchResp,
    SearchSort,
    build_search_request,
)
from sprest.utils import RequestConfig


class FakeClient:
    def __init__(self, response=b"{}"):
        self.response = response
        self.calls = []

    def post(self, url, body=None, config=None):
        self.calls.append((url, body, config))
        return self.response


def _search_payload(verbose):
    cells = [
        {"Key": "Title", "Value": "Doc", "ValueType": "Edm.String"},
        {"Key": "Path", "Value": "https://contoso/doc", "ValueType": "Edm.String"},
    ]
    rows = [{"Cells": {"results": cells} if verbose else cells}]
    body = {
        "ElapsedTime": 12,
        "SpellingSuggestion": "",
        "PrimaryQueryResult": {
            "QueryId": "q1",
            "RelevantResults": {
                "RowCount": 1,
                "TotalRows": 1,
                "Table": {"Rows": {"results": rows} if verbose else rows},
            },
        },
    }
    if verbose:
        body = {"d": body}
    return json.dumps(body).encode("utf-8")


def test_build_request_drops_empty_values_and_keeps_bools():
    request = build_search_request(SearchQuery(query_text="*", row_limit=10))
    assert request["Querytext"] == "*"
    assert request["RowLimit"] == 10
    assert request["__metadata"] == {
        "type": "Microsoft.Office.Server.Search.REST.SearchRequest"
    }
    assert "StartRow" not in request
    assert "QueryTemplate" not in request
    assert "SelectProperties" not in request
    assert request["EnableStemming"] is False


def test_build_request_wraps_lists_in_results():
    query = SearchQuery(
        query_text="*",
        select_properties=["Title", "Path"],
        sort_list=[SearchSort(property="Title", direction=1)],
    )
    request = build_search_request(query)
    assert request["SelectProperties"] == {"results": ["Title", "Path"]}
    assert request["SortList"] == {
        "results": [{"Property": "Title", "Direction": 1}]
    }


def test_post_query_sends_request_body_and_headers():
    client = FakeClient(b'{"ElapsedTime": 3}')
    search = Search(client, "https://contoso/_api/Search")
    resp = search.post_query(SearchQuery(query_text="*", row_limit=10))
    url, body, config = client.calls[0]
    assert url == "https://contoso/_api/Search/PostQuery"
    assert body.startswith(b'{ "request": ')
    parsed = json.loads(body)
    assert parsed["request"]["Querytext"] == "*"
    assert parsed["request"]["RowLimit"] == 10
    assert config.headers["Accept"] == "application/json"
    assert config.headers["Content-Type"] == "application/json;odata=verbose;charset=utf-8"
    assert isinstance(resp, SearchResp) and resp.data().elapsed_time == 3


def test_post_query_keeps_config_headers():
    client = FakeClient()
    search = Search(client, "https://contoso/_api/Search", RequestConfig(headers={"X-Custom": "1"}))
    search.post_query(SearchQuery(query_text="*"))
    config = client.calls[0][2]
    assert config.headers["X-Custom"] == "1"
    assert config.headers["Accept"] == "application/json"


@pytest.mark.parametrize("verbose", [True, False])
def test_results_rows_as_maps(verbose):
    resp = SearchResp(_search_payload(verbose))
    assert resp.results() == [{"Title": "Doc", "Path": "https://contoso/doc"}]
    data = resp.data()
    assert data.elapsed_time == 12
    assert data.primary_query_result.query_id == "q1"
    assert data.primary_query_result.relevant_results.total_rows == 1


def test_normalized_unwraps_verbose():
    resp = SearchResp(_search_payload(True))
    normalized = json.loads(resp.normalized())
    assert "d" not in normalized
    assert normalized["ElapsedTime"] == 12


def test_normalized_leaves_minimal_payload():
    raw = _search_payload(False)
    assert SearchResp(raw).normalized() == raw


def test_results_without_table_raises():
    resp = SearchResp(b'{"ElapsedTime": 1}')
    with pytest.raises(ValueError):
        resp.results()


def test_data_of_invalid_body_is_empty():
    data = SearchResp(b"not json").data()
    assert data.primary_query_result is None
    assert data.elapsed_time == 0