"""Tests for fpp_api/clients/graphql_client.py"""

import json
from unittest.mock import patch

import pytest

from fpp_api.clients.graphql_client import GraphqlClient
from fpp_api.errors import MissingRequiredArgument

SHOP = "test-shop.myfunpinpin.com"


class TestInit:
    def test_requires_token_for_public_app(self, context):
        with pytest.raises(MissingRequiredArgument):
            GraphqlClient(SHOP, context)

    def test_private_app_needs_no_token(self, context):
        context.is_private_app = True
        assert GraphqlClient(SHOP, context).access_token is None

    def test_base_path_uses_api_version(self, context):
        client = GraphqlClient(SHOP, context, access_token="tok")
        assert client.base_path == "/admin/api/2022-04/graphql.json"


class TestQuery:
    def test_string_query(self, context, make_response):
        client = GraphqlClient(SHOP, context, access_token="tok")
        with patch.object(client.session, "request", return_value=make_response(body={"data": {}})) as mock_request:
            result = client.query("{ shop { name } }")

        assert result.body == {"data": {}}
        args, kwargs = mock_request.call_args
        assert args == ("POST", f"https://{SHOP}/admin/api/2022-04/graphql.json")
        assert kwargs["headers"]["Content-Type"] == "application/graphql"
        assert kwargs["headers"]["X-Fpp-Access-Token"] == "tok"
        assert kwargs["data"] == "{ shop { name } }"

    def test_dict_query_sent_as_json(self, context, make_response):
        client = GraphqlClient(SHOP, context, access_token="tok")
        data = {"query": "query($id: ID!) { node(id: $id) { id } }", "variables": {"id": "1"}}
        with patch.object(client.session, "request", return_value=make_response()) as mock_request:
            client.query(data)

        kwargs = mock_request.call_args[1]
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert json.loads(kwargs["data"]) == data

    def test_private_app_sends_secret(self, context, make_response):
        context.is_private_app = True
        client = GraphqlClient(SHOP, context)
        with patch.object(client.session, "request", return_value=make_response()) as mock_request:
            client.query("{ shop { name } }")

        assert mock_request.call_args[1]["headers"]["X-Fpp-Access-Token"] == context.api_secret_key

    def test_extra_headers_kept(self, context, make_response):
        client = GraphqlClient(SHOP, context, access_token="tok")
        with patch.object(client.session, "request", return_value=make_response()) as mock_request:
            client.query("{ shop { name } }", extra_headers={"X-Extra": "1"})

        headers = mock_request.call_args[1]["headers"]
        assert headers["X-Extra"] == "1"
        assert headers["X-Fpp-Access-Token"] == "tok"
