"""SharePoint search API: typed query parameters, request building and results."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .odata import Queryable
from .utils import (
    RequestConfig,
    TypedKeyValue,
    normalize_odata_item,
    patch_config_headers,
    trim_multiline,
)

SEARCH_REQUEST_TYPE = "Microsoft.Office.Server.Search.REST.SearchRequest"


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return 0
    return 0


def _list(value: Any) -> List[Any]:
    if isinstance(value, Mapping):
        value = value.get("results")
    return list(value) if isinstance(value, list) else []


def _key_values(value: Any) -> List[TypedKeyValue]:
    return [TypedKeyValue.from_dict(v) for v in _list(value) if isinstance(v, Mapping)]


@dataclass
class SearchSort:
    """Sort property; direction is 0 ascending, 1 descending, 2 FQL formula."""

    property: str = ""
    direction: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"Property": self.property, "Direction": self.direction}


@dataclass
class SearchPropertyValue:
    """Value of a search query property."""

    str_val: str = ""
    bool_val: bool = False
    int_val: int = 0
    str_array: Optional[List[str]] = None
    query_property_value_type_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "StrVal": self.str_val,
            "BoolVal": self.bool_val,
            "IntVal": self.int_val,
            "StrArray": None if self.str_array is None else list(self.str_array),
            "QueryPropertyValueTypeIndex": self.query_property_value_type_index,
        }


@dataclass
class SearchProperty:
    """Named property used to configure a search query."""

    name: str = ""
    value: SearchPropertyValue = field(default_factory=SearchPropertyValue)

    def to_dict(self) -> Dict[str, Any]:
        return {"Name": self.name, "Value": self.value.to_dict()}


@dataclass
class SearchReorderingRule:
    """Rule that boosts or demotes results matching a condition."""

    match_value: str = ""
    boost: int = 0
    match_type: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "MatchValue": self.match_value,
            "Boost": self.boost,
            "MatchType": self.match_type,
        }


@dataclass
class SearchQuery:
    """Parameters of a search query."""

    query_text: str = ""
    query_template: str = ""
    enable_interleaving: bool = False
    enable_stemming: bool = False
    trim_duplicates: bool = False
    enable_nicknames: bool = False
    enable_fql: bool = False
    enable_phonetic: bool = False
    bypass_result_types: bool = False
    process_best_bets: bool = False
    enable_query_rules: bool = False
    enable_sorting: bool = False
    generate_block_rank_log: bool = False
    source_id: str = ""
    ranking_model_id: str = ""
    start_row: int = 0
    row_limit: int = 0
    rows_per_page: int = 0
    select_properties: Optional[List[str]] = None
    culture: int = 0
    refinement_filters: Optional[List[str]] = None
    refiners: str = ""
    hidden_constraints: str = ""
    timeout: int = 0
    hit_highlighted_properties: Optional[List[str]] = None
    client_type: str = ""
    personalization_data: str = ""
    results_url: str = ""
    query_tag: str = ""
    process_personal_favorites: bool = False
    query_template_properties_url: str = ""
    hit_highlighted_multivalue_property_limit: int = 0
    enable_ordering_hit_highlighted_property: bool = False
    collapse_specification: str = ""
    ui_language: int = 0
    desired_snippet_length: int = 0
    max_snippet_length: int = 0
    summary_length: int = 0
    sort_list: Optional[List[SearchSort]] = None
    properties: Optional[List[SearchProperty]] = None
    reordering_rules: Optional[List[SearchReorderingRule]] = None

    def to_dict(self) -> Dict[str, Any]:
        """All parameters under their REST names; unset lists are ``None``."""

        def items(values: Optional[List[Any]]) -> Optional[List[Any]]:
            return None if values is None else [v.to_dict() for v in values]

        def strings(values: Optional[List[str]]) -> Optional[List[str]]:
            return None if values is None else list(values)

        return {
            "Querytext": self.query_text,
            "QueryTemplate": self.query_template,
            "EnableInterleaving": self.enable_interleaving,
            "EnableStemming": self.enable_stemming,
            "TrimDuplicates": self.trim_duplicates,
            "EnableNicknames": self.enable_nicknames,
            "EnableFQL": self.enable_fql,
            "EnablePhonetic": self.enable_phonetic,
            "BypassResultTypes": self.bypass_result_types,
            "ProcessBestBets": self.process_best_bets,
            "EnableQueryRules": self.enable_query_rules,
            "EnableSorting": self.enable_sorting,
            "GenerateBlockRankLog": self.generate_block_rank_log,
            "SourceId": self.source_id,
            "RankingModelId": self.ranking_model_id,
            "StartRow": self.start_row,
            "RowLimit": self.row_limit,
            "RowsPerPage": self.rows_per_page,
            "SelectProperties": strings(self.select_properties),
            "Culture": self.culture,
            "RefinementFilters": strings(self.refinement_filters),
            "Refiners": self.refiners,
            "HiddenConstraints": self.hidden_constraints,
            "Timeout": self.timeout,
            "HitHighlightedProperties": strings(self.hit_highlighted_properties),
            "ClientType": self.client_type,
            "PersonalizationData": self.personalization_data,
            "ResultsUrl": self.results_url,
            "QueryTag": self.query_tag,
            "ProcessPersonalFavorites": self.process_personal_favorites,
            "QueryTemplatePropertiesUrl": self.query_template_properties_url,
            "HitHighlightedMultivaluePropertyLimit": self.hit_highlighted_multivalue_property_limit,
            "EnableOrderingHitHighlightedProperty": self.enable_ordering_hit_highlighted_property,
            "CollapseSpecification": self.collapse_specification,
            "UIlanguage": self.ui_language,
            "DesiredSnippetLength": self.desired_snippet_length,
            "MaxSnippetLength": self.max_snippet_length,
            "SummaryLength": self.summary_length,
            "SortList": items(self.sort_list),
            "Properties": items(self.properties),
            "ReorderingRules": items(self.reordering_rules),
        }


@dataclass
class ResultTable:
    """One table of search results."""

    group_template_id: str = ""
    item_template_id: str = ""
    result_title: str = ""
    result_title_url: str = ""
    row_count: int = 0
    table_type: str = ""
    total_rows: int = 0
    total_rows_including_duplicates: int = 0
    properties: List[TypedKeyValue] = field(default_factory=list)
    rows: Optional[List[List[TypedKeyValue]]] = None
    refiners: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["ResultTable"]:
        if not isinstance(data, Mapping):
            return None
        rows: Optional[List[List[TypedKeyValue]]] = None
        table = data.get("Table")
        if isinstance(table, Mapping):
            rows = [
                _key_values(row.get("Cells"))
                for row in _list(table.get("Rows"))
                if isinstance(row, Mapping)
            ]
        refiners = [
            {
                "Name": _str(refiner.get("Name")),
                "Entries": [dict(e) for e in _list(refiner.get("Entries")) if isinstance(e, Mapping)],
            }
            for refiner in _list(data.get("Refiners"))
            if isinstance(refiner, Mapping)
        ]
        return cls(
            group_template_id=_str(data.get("GroupTemplateId")),
            item_template_id=_str(data.get("ItemTemplateId")),
            result_title=_str(data.get("ResultTitle")),
            result_title_url=_str(data.get("ResultTitleUrl")),
            row_count=_int(data.get("RowCount")),
            table_type=_str(data.get("TableType")),
            total_rows=_int(data.get("TotalRows")),
            total_rows_including_duplicates=_int(data.get("TotalRowsIncludingDuplicates")),
            properties=_key_values(data.get("Properties")),
            rows=rows,
            refiners=refiners,
        )


@dataclass
class ResultTableCollection:
    """Result tables produced by one query."""

    query_errors: Dict[str, Any] = field(default_factory=dict)
    query_id: str = ""
    query_rule_id: str = ""
    custom_results: Optional[ResultTable] = None
    refinement_results: Optional[ResultTable] = None
    relevant_results: Optional[ResultTable] = None
    special_term_results: Optional[ResultTable] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["ResultTableCollection"]:
        if not isinstance(data, Mapping):
            return None
        errors = data.get("QueryErrors")
        return cls(
            query_errors=dict(errors) if isinstance(errors, Mapping) else {},
            query_id=_str(data.get("QueryId")),
            query_rule_id=_str(data.get("QueryRuleId")),
            custom_results=ResultTable.from_dict(data.get("CustomResults")),
            refinement_results=ResultTable.from_dict(data.get("RefinementResults")),
            relevant_results=ResultTable.from_dict(data.get("RelevantResults")),
            special_term_results=ResultTable.from_dict(data.get("SpecialTermResults")),
        )


@dataclass
class SearchResults:
    """Search response."""

    elapsed_time: int = 0
    primary_query_result: Optional[ResultTableCollection] = None
    properties: List[TypedKeyValue] = field(default_factory=list)
    secondary_query_results: List[ResultTableCollection] = field(default_factory=list)
    spelling_suggestion: str = ""
    triggered_rules: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "SearchResults":
        if not isinstance(data, Mapping):
            return cls()
        secondary = [
            table
            for table in (ResultTableCollection.from_dict(v) for v in _list(data.get("SecondaryQueryResults")))
            if table is not None
        ]
        return cls(
            elapsed_time=_int(data.get("ElapsedTime")),
            primary_query_result=ResultTableCollection.from_dict(data.get("PrimaryQueryResult")),
            properties=_key_values(data.get("Properties")),
            secondary_query_results=secondary,
            spelling_suggestion=_str(data.get("SpellingSuggestion")),
            triggered_rules=_list(data.get("TriggeredRules")),
        )


class SearchResp(bytes):
    """Raw search response body with typed accessors."""

    def normalized(self) -> bytes:
        """Body with the verbose OData wrapper removed."""
        return normalize_odata_item(bytes(self))

    def data(self) -> SearchResults:
        """Typed search results; an unparsable body gives empty results."""
        try:
            payload = json.loads(self.normalized())
        except ValueError:
            payload = None
        return SearchResults.from_dict(payload)

    def results(self) -> List[Dict[str, str]]:
        """Relevant result rows as key/value mappings."""
        primary = self.data().primary_query_result
        relevant = primary.relevant_results if primary is not None else None
        if relevant is None or relevant.rows is None:
            raise ValueError("search response has no relevant results table")
        return [{cell.key: cell.value for cell in row} for row in relevant.rows]


def build_search_request(query: SearchQuery) -> Dict[str, Any]:
    """REST request object for a query: empty values dropped, lists wrapped."""
    request: Dict[str, Any] = dict(query.to_dict())
    request["__metadata"] = {"type": SEARCH_REQUEST_TYPE}
    for key, value in list(request.items()):
        if value is None:
            del request[key]
        elif isinstance(value, list):
            request[key] = {"results": value}
        elif isinstance(value, bool):
            continue
        elif isinstance(value, (int, float)) and value == 0:
            del request[key]
        elif isinstance(value, str) and value == "":
            del request[key]
    return request


class Search(Queryable):
    """Search API endpoint."""

    def post_query(self, query: SearchQuery) -> SearchResp:
        """Run a search query and return the response."""
        request = json.dumps(
            build_search_request(query),
            ensure_ascii=False,
            separators=(",", ":"),
            sort_keys=True,
        )
        body = trim_multiline('{ "request": ' + request + "}").encode("utf-8")
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json;odata=verbose;charset=utf-8",
        }
        config: RequestConfig = patch_config_headers(self.config, headers)
        return SearchResp(self.client.post(f"{self.endpoint}/PostQuery", body, config))