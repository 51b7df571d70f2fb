"""
Webhooks: subscription registration and verified delivery dispatch.

Modules:
    registry - WebhookRegistry (add handlers, register, process deliveries)
    queries - GraphQL documents and response parsing
    types - Delivery methods, registry entries, endpoint union
"""

from .registry import WebhookRegistry, normalize_topic
from .types import DeliveryMethod, RegisterResult, WebhookRegistryEntry

__all__ = [
    'WebhookRegistry',
    'normalize_topic',
    'DeliveryMethod',
    'RegisterResult',
    'WebhookRegistryEntry',
]
