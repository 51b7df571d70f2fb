"""
Fpp API Library

Authenticate a third-party app against Fpp shops, keep per-shop sessions,
call the Admin API with retries, and register and receive webhooks.

Modules:
    context   - App configuration (Context, ApiVersion)
    errors    - Error taxonomy
    models    - Session data models
    auth      - OAuth flow, session tokens, session storage
    clients   - HTTP and GraphQL clients
    webhooks  - Webhook registry
    common    - Shared utilities (config loader, logging, validators, cookies)
"""

from .context import ApiVersion, Context
from .auth import CustomSessionStorage, MemorySessionStorage, OAuth, SessionStorage
from .clients import GraphqlClient, HttpClient
from .common.config_loader import load_context
from .common.network import IncomingRequest, ServerResponse
from .models import Session
from .webhooks import DeliveryMethod, WebhookRegistry

__all__ = [
    'ApiVersion',
    'Context',
    'load_context',
    'OAuth',
    'SessionStorage',
    'MemorySessionStorage',
    'CustomSessionStorage',
    'HttpClient',
    'GraphqlClient',
    'IncomingRequest',
    'ServerResponse',
    'Session',
    'DeliveryMethod',
    'WebhookRegistry',
]
