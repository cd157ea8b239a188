"""
Tests for the Jobber connector and its actions, against a mocked GraphQL endpoint.
"""

import json

import httpx
import pytest

from connectors.exceptions import ConfigurationError, PaginationError
from connectors.jobber import JobberConnector
from tools.jobber_tools import create_client, list_clients, list_properties


class GraphQLStub:
    """httpx handler returning queued JSON bodies and recording requests."""

    def __init__(self, *bodies, status_code=200):
        self.bodies = list(bodies)
        self.status_code = status_code
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.bodies[len(self.requests) - 1])

    def payload(self, index=0):
        return json.loads(self.requests[index].content)


def _connector(stub):
    return JobberConnector("tok-123", transport=httpx.MockTransport(stub))


def _clients_page(ids, has_next, cursor=None):
    return {
        "data": {
            "clients": {
                "nodes": [{"id": i, "firstName": "F", "lastName": "L"} for i in ids],
                "pageInfo": {"hasNextPage": has_next, "endCursor": cursor},
            }
        }
    }


class TestJobberRequests:
    @pytest.mark.asyncio
    async def test_post_sends_auth_and_version_headers(self):
        stub = GraphQLStub({"data": {"ok": True}})
        body = await _connector(stub).post("query { ok }")

        req = stub.requests[0]
        assert req.method == "POST"
        assert str(req.url) == "https://api.getjobber.com/api/graphql"
        assert req.headers["Authorization"] == "Bearer tok-123"
        assert req.headers["X-JOBBER-GRAPHQL-VERSION"] == "2025-01-20"
        assert stub.payload() == {"query": "query { ok }"}
        assert body == {"data": {"ok": True}}

    @pytest.mark.asyncio
    async def test_graphql_errors_raise_configuration_error(self):
        stub = GraphQLStub({"errors": [{"message": "Field 'x' doesn't exist"}, {"message": "other"}]})
        with pytest.raises(ConfigurationError, match="Field 'x' doesn't exist"):
            await _connector(stub).post("query { x }")

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        stub = GraphQLStub({"message": "unauthorized"}, status_code=401)
        with pytest.raises(httpx.HTTPStatusError):
            await _connector(stub).post("query { ok }")

    def test_is_configured(self):
        assert JobberConnector("tok").is_configured()
        assert not JobberConnector("").is_configured()


class TestJobberPagination:
    @pytest.mark.asyncio
    async def test_paginate_unwraps_data_and_forwards_cursor(self):
        stub = GraphQLStub(
            _clients_page(["1", "2"], True, "abc"),
            _clients_page(["3"], False),
        )
        connector = _connector(stub)
        ids = [n["id"] async for n in connector.paginate("q", resource_key="clients", max_items=10)]

        assert ids == ["1", "2", "3"]
        assert stub.payload(0)["variables"] == {"after": None, "first": 10}
        assert stub.payload(1)["variables"] == {"after": "abc", "first": 10}

    @pytest.mark.asyncio
    async def test_get_paginated_resources(self):
        stub = GraphQLStub(_clients_page(["1", "2"], True, "abc"), _clients_page(["3"], False))
        items = await _connector(stub).get_paginated_resources(
            "q", resource_key="clients", max_items=2
        )
        assert [n["id"] for n in items] == ["1", "2"]
        assert len(stub.requests) == 1

    @pytest.mark.asyncio
    async def test_list_clients_action(self):
        stub = GraphQLStub(_clients_page(["1"], False))
        items = await list_clients(_connector(stub), max_items=5)
        assert items[0]["id"] == "1"
        assert "clients(first: $first, after: $after)" in stub.payload()["query"]

    @pytest.mark.asyncio
    async def test_list_properties_filters_by_client(self):
        stub = GraphQLStub({
            "data": {
                "properties": {
                    "nodes": [{"id": "p1", "address": {"street": "1 Main St"}}],
                    "pageInfo": {"hasNextPage": False, "endCursor": None},
                }
            }
        })
        items = await list_properties(_connector(stub), client_id="c9")

        assert items == [{"id": "p1", "address": {"street": "1 Main St"}}]
        assert stub.payload()["variables"]["filter"] == {"clientId": "c9"}

    @pytest.mark.asyncio
    async def test_body_without_data_is_pagination_error(self):
        stub = GraphQLStub({"extensions": {}})
        with pytest.raises(PaginationError):
            await _connector(stub).get_paginated_resources("q", resource_key="clients", max_items=1)


class TestJobberOptions:
    @pytest.mark.asyncio
    async def test_client_options_prefer_company_name(self):
        stub = GraphQLStub({
            "data": {
                "clients": {
                    "nodes": [
                        {"id": "1", "firstName": "Ada", "lastName": "Lovelace", "companyName": None},
                        {"id": "2", "firstName": "Bo", "lastName": "Li", "companyName": "Acme"},
                    ]
                }
            }
        })
        options = await _connector(stub).load_options("client_id")

        assert [(o.value, o.label) for o in options] == [("1", "Ada Lovelace"), ("2", "Acme")]

    @pytest.mark.asyncio
    async def test_property_options_with_client_filter(self):
        stub = GraphQLStub({
            "data": {"properties": {"nodes": [{"id": "p1", "address": {"street": "Elm"}}]}}
        })
        options = await _connector(stub).load_options("property_id", client_id="42")

        assert options[0].label == "Elm"
        assert stub.payload()["variables"] == {"filter": {"clientId": "42"}}

    @pytest.mark.asyncio
    async def test_client_id_never_enters_query_text(self):
        stub = GraphQLStub({"data": {"properties": {"nodes": []}}})
        sneaky = '42" }) { nodes { id } } clients { nodes { id'
        await _connector(stub).load_options("property_id", client_id=sneaky)

        sent = stub.payload()
        assert sneaky not in sent["query"]
        assert sent["variables"]["filter"]["clientId"] == sneaky

    @pytest.mark.asyncio
    async def test_property_options_without_client(self):
        stub = GraphQLStub({"data": {"properties": {"nodes": []}}})
        options = await _connector(stub).load_options("property_id")

        assert options == []
        assert stub.payload()["variables"] == {}

    @pytest.mark.asyncio
    async def test_client_label_skips_missing_name_parts(self):
        stub = GraphQLStub({
            "data": {
                "clients": {
                    "nodes": [
                        {"id": "1", "firstName": None, "lastName": "Li", "companyName": None},
                        {"id": "2", "firstName": None, "lastName": None, "companyName": None},
                    ]
                }
            }
        })
        options = await _connector(stub).load_options("client_id")

        assert [o.label for o in options] == ["Li", "2"]

    @pytest.mark.asyncio
    async def test_unknown_prop(self):
        with pytest.raises(ConfigurationError):
            await JobberConnector("tok").load_options("nope")


class TestJobberMutations:
    @pytest.mark.asyncio
    async def test_create_client(self):
        stub = GraphQLStub({
            "data": {
                "clientCreate": {
                    "client": {"id": "c1", "firstName": "Ada", "lastName": "L", "companyName": "Acme"},
                    "userErrors": [],
                }
            }
        })
        client = await create_client(
            _connector(stub), "Ada", "L", company_name="Acme", email="ada@example.com"
        )

        assert client["id"] == "c1"
        sent = stub.payload()["variables"]["input"]
        assert sent["companyName"] == "Acme"
        assert sent["isCompany"] is True
        assert sent["emails"][0]["address"] == "ada@example.com"

    @pytest.mark.asyncio
    async def test_user_errors_raise(self):
        stub = GraphQLStub({
            "data": {"clientCreate": {"client": None, "userErrors": [{"message": "Name is required"}]}}
        })
        with pytest.raises(ConfigurationError, match="Name is required"):
            await create_client(_connector(stub), "", "")
