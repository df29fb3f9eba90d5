# sprest

Fluent helpers for the SharePoint REST API: OData query modifiers, response
normalisation, permission mask checks, managed metadata (CSOM) response
parsing, search, users, site collections, recycle bins, user profiles, list
webhook subscriptions, role definitions and assignments, lists and the
e-mail utility. The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The client

All requests go through `sprest.utils.SPClient`. It is bound to a site URL,
sends a fixed set of headers with every request and hands the exchange to a
transport. The default transport uses `urllib` and raises `RuntimeError` for
HTTP error responses.

```python
from sprest.utils import SPClient, RequestConfig

client = SPClient(
    "https://contoso.example.com/sites/dev",
    headers={"Authorization": "Bearer token"},
    timeout=30,
)
```

A custom transport is any callable
`transport(method, url, headers, body, timeout) -> bytes`. `SPClient` offers
`get`, `post`, `update` (a MERGE sent as POST with `X-HTTP-Method`) and
`delete`. Each takes an optional `RequestConfig(headers=..., timeout=...)`
whose headers override the defaults (verbose OData JSON).

## The object model

`sprest.sp.SP` is the entry point:

```python
from sprest.sp import SP

sp = SP(client, client.site_url)

site = sp.site().select("Id,Url")
info = site.get().data()          # SiteInfo
print(info.url)

owner = site.owner().get().data() # UserInfo
bin_items = site.recycle_bin().top(5).get().data()
```

`SP` also provides `search()`, `profiles()`, `utility()`, `metadata()`,
`to_url()` and `conf()`.

Queryable objects (`Site`, `User`, `Users`, `RecycleBin`, `RecycleBinItem`,
`Lists`, `Search`, `Profiles`) derive from `sprest.odata.Queryable` and offer
`select`, `expand`, `filter`, `top`, `skip`, `order_by` and `conf`; each
returns the object so calls can be chained, and `to_url()` shows the
resulting URL.

Responses such as `SiteResp`, `UserResp`, `UsersResp`, `RecycleBinResp`,
`ProfileResp` and `ListsResp` are `bytes` with `normalized()` and `data()`
accessors that return typed dataclasses or lists of item responses.

Other endpoint classes are built from a client and an endpoint URL:

- `sprest.user.Users` — `get_by_id`, `get_by_login_name`, `get_by_email`.
- `sprest.lists.Lists` — `get`, and `add(title, metadata)` which fills in
  `BaseTemplate=100`, `AllowContentTypes=False`, `ContentTypesEnabled=False`
  where not given.
- `sprest.subscriptions.Subscriptions` / `Subscription` — list webhooks:
  `add`, `get`, `get_by_id`, `update`, `set_expiration`,
  `set_notification_url`, `set_client_state`, `delete`.
- `sprest.roles.RoleDefinitions` — `get`, `get_by_id`, `get_by_name`,
  `get_by_type` (see `RoleTypeKind`); `sprest.roles.Roles` —
  `has_unique_assignments`, `break_inheritance`, `reset_inheritance`,
  `add_assignment`, `remove_assignment`.
- `sprest.profiles.Profiles` — `get_my_properties`, `get_properties_for`,
  `get_user_profile_property_for`, `get_owner_user_profile`,
  `user_profile`, `set_single_value_profile_property`,
  `set_multi_valued_profile_property`, `hide_suggestion`.

## Building queries

```python
from sprest.odata import ODataMods, to_url

mods = ODataMods().add_select("Id,Title").add_top(5).add_order_by("Created", False)
to_url("https://contoso.example.com/_api/Web/Lists", mods)
# 'https://contoso.example.com/_api/Web/Lists?%24orderby=Created+desc&%24select=Id%2CTitle&%24top=5'
```

Query keys are sorted; repeated `add_order_by` calls accumulate.

## Normalising OData payloads

Verbose (`{"d": ...}`) and minimal-metadata responses are reduced to the
same shape, with `{"results": [...]}` wrappers unwrapped:

```python
from sprest.utils import normalize_odata_item, normalize_odata_collection

normalize_odata_item(b'{"d":{"prop":"val"}}')   # b'{"prop":"val"}'
items, next_url = normalize_odata_collection(payload)
```

`sprest.utils` also has endpoint helpers (`get_prior_endpoint`,
`get_include_endpoint`, `check_get_relative_url`, `escape_path_uri`),
`patch_metadata_type`, `extract_entity_uri` and `fix_dates_in_response`.

## Permissions

```python
from sprest.permissions import BasePermissions, PermissionKind, has_permissions

perms = BasePermissions(high=432, low=1011030767)
has_permissions(perms, PermissionKind.EDIT_LIST_ITEMS)   # True
```

## Search

```python
from sprest.search import SearchQuery

resp = sp.search().post_query(SearchQuery(query_text="*", row_limit=10))
for row in resp.results():
    print(row.get("Title"))
```

`build_search_request` shows the request body: empty strings, zero numbers
and unset lists are dropped and lists are wrapped as `{"results": [...]}`.

## E-mail

```python
from sprest.utility import EmailProps

sp.utility().send_email(EmailProps(
    subject="Hello",
    body="Sent from sprest",
    to=["someone@example.com"],
))
```

## Managed metadata responses

`sprest.taxonomy` reads CSOM process-query responses:
`parse_csom_response` returns the last object of the response and
`csom_child_items` its child items (optionally under a property); both raise
`CsomResponseError` for responses they cannot read, including
`"object not found"`. `append_taxonomy_prop` and `trim_taxonomy_guid` help
with property lists and `/Guid(...)/` identifiers.

## What the package does not do

- It has no authentication strategies; supply the headers or a transport
  that signs requests for your site.
- It does not build or send CSOM requests: there are no term store, term
  group, term set or term objects, only the response helpers above.
- There are no web, list, list item, folder, file, field or property bag
  objects; `Lists` covers only reading the collection and adding a list.
- There is no command-line interface.