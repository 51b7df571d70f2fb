"""
Clients for the Fpp Admin API.

Modules:
    http_client - Base HTTPS client with retries and error classification
    graphql_client - Admin API GraphQL client
    types - Request/response descriptors
"""

from .graphql_client import GraphqlClient
from .http_client import DeprecationNoticeLog, HttpClient
from .types import RequestParams, RequestReturn

__all__ = [
    'DeprecationNoticeLog',
    'GraphqlClient',
    'HttpClient',
    'RequestParams',
    'RequestReturn',
]
