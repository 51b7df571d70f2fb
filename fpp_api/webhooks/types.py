"""Webhook registry types and the subscription endpoint union."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Union

# handler(topic, shop_domain, raw_body)
WebhookHandler = Callable[[str, str, bytes], Any]


class DeliveryMethod(str, Enum):
    HTTP = "http"
    EVENT_BRIDGE = "eventbridge"
    PUB_SUB = "pubsub"


@dataclass
class WebhookRegistryEntry:
    path: str
    handler: WebhookHandler


@dataclass
class RegisterResult:
    success: bool
    result: Any = field(default_factory=dict)


@dataclass
class HttpEndpoint:
    callback_url: str

    @property
    def address(self) -> str:
        return self.callback_url


@dataclass
class EventBridgeEndpoint:
    arn: str

    @property
    def address(self) -> str:
        return self.arn


@dataclass
class PubSubEndpoint:
    project: str
    topic: str

    @property
    def address(self) -> str:
        return f"pubsub://{self.project}:{self.topic}"


WebhookEndpoint = Union[HttpEndpoint, EventBridgeEndpoint, PubSubEndpoint]


@dataclass
class ExistingSubscription:
    """A subscription already registered on the platform for a topic."""
    id: str
    endpoint: WebhookEndpoint
