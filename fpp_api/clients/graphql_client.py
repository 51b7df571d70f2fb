"""
Fpp GraphQL Client

Admin API GraphQL endpoint on top of HttpClient.
"""

from typing import Dict, Optional, Union

from ..common.constants import ACCESS_TOKEN_HEADER
from ..common.network import DataType
from ..errors import MissingRequiredArgument
from .http_client import HttpClient
from .types import RequestReturn


class GraphqlClient(HttpClient):
    """
    Client for the Admin API GraphQL endpoint of one shop.

    Usage:
        client = GraphqlClient("my-store.myfunpinpin.com", context, access_token="tok")
        result = client.query("{ shop { name } }")
    """

    def __init__(self, domain: str, context, access_token: Optional[str] = None, **kwargs):
        super().__init__(domain, context, **kwargs)
        if not access_token and not context.is_private_app:
            raise MissingRequiredArgument("Missing access token when creating GraphQL client")
        self.access_token = access_token

    @property
    def base_path(self) -> str:
        return f"/admin/api/{self.context.api_version.value}/graphql.json"

    def query(
        self,
        data: Union[str, Dict],
        query: Optional[Dict] = None,
        extra_headers: Optional[Dict[str, str]] = None,
        tries: int = 1,
    ) -> RequestReturn:
        """
        Send a GraphQL document.

        Args:
            data: Query string (sent as application/graphql) or a
                {"query": ..., "variables": ...} dict (sent as JSON)
            query: URL query parameters
            extra_headers: Additional request headers
            tries: Maximum number of attempts
        """
        headers = dict(extra_headers or {})
        headers[ACCESS_TOKEN_HEADER] = (
            self.context.api_secret_key if self.context.is_private_app else self.access_token
        )
        data_type = DataType.GRAPHQL if isinstance(data, str) else DataType.JSON
        return self.post(
            self.base_path, data=data, type=data_type, query=query,
            extra_headers=headers, tries=tries,
        )
