"""
GraphQL documents for webhook subscriptions and parsing of their responses.

API versions before 2022-01 only know HTTP subscriptions and expose the
callback URL directly on the node (legacy shape); later versions expose a
typed ``endpoint`` per delivery method.
"""

import json
from typing import Any, Dict, Optional

from ..common.validators import version_compatible
from ..context import ApiVersion
from ..errors import UnsupportedClientType
from .types import (
    DeliveryMethod,
    EventBridgeEndpoint,
    ExistingSubscription,
    HttpEndpoint,
    PubSubEndpoint,
)

_MUTATION_PREFIX = {
    DeliveryMethod.HTTP: "webhookSubscription",
    DeliveryMethod.EVENT_BRIDGE: "eventBridgeWebhookSubscription",
    DeliveryMethod.PUB_SUB: "pubSubWebhookSubscription",
}


def version_supports_endpoint_field(api_version) -> bool:
    return version_compatible(ApiVersion.JANUARY_22, api_version)


def version_supports_pub_sub(api_version) -> bool:
    return version_compatible(ApiVersion.JANUARY_22, api_version)


def validate_delivery_method(delivery_method: DeliveryMethod, api_version) -> None:
    """
    Raises:
        UnsupportedClientType: The delivery method needs a newer API version
    """
    version = getattr(api_version, "value", api_version)
    if delivery_method == DeliveryMethod.EVENT_BRIDGE and not version_supports_endpoint_field(api_version):
        raise UnsupportedClientType(
            f'EventBridge webhooks are not supported in API version "{version}".'
        )
    if delivery_method == DeliveryMethod.PUB_SUB and not version_supports_pub_sub(api_version):
        raise UnsupportedClientType(
            f'Pub/Sub webhooks are not supported in API version "{version}".'
        )


def build_check_query(topic: str, api_version) -> str:
    """Query for the first existing subscription on a topic."""
    if not version_supports_endpoint_field(api_version):
        return f"""{{
  webhookSubscriptions(first: 1, topics: {topic}) {{
    edges {{
      node {{
        id
        callbackUrl
      }}
    }}
  }}
}}"""

    pub_sub_fragment = ""
    if version_supports_pub_sub(api_version):
        pub_sub_fragment = """
          ... on WebhookPubSubEndpoint {
            pubSubProject
            pubSubTopic
          }"""

    return f"""{{
  webhookSubscriptions(first: 1, topics: {topic}) {{
    edges {{
      node {{
        id
        endpoint {{
          __typename
          ... on WebhookHttpEndpoint {{
            callbackUrl
          }}
          ... on WebhookEventBridgeEndpoint {{
            arn
          }}{pub_sub_fragment}
        }}
      }}
    }}
  }}
}}"""


def mutation_name(delivery_method: DeliveryMethod, webhook_id: Optional[str] = None) -> str:
    return _MUTATION_PREFIX[delivery_method] + ("Update" if webhook_id else "Create")


def build_query(
    topic: str,
    address: str,
    api_version,
    delivery_method: DeliveryMethod = DeliveryMethod.HTTP,
    webhook_id: Optional[str] = None,
) -> str:
    """Create (no webhook_id) or update mutation for a subscription."""
    validate_delivery_method(delivery_method, api_version)

    identifier = f"id: {json.dumps(webhook_id)}" if webhook_id else f"topic: {topic}"

    if delivery_method == DeliveryMethod.HTTP:
        subscription_args = f"{{callbackUrl: {json.dumps(address)}}}"
    elif delivery_method == DeliveryMethod.EVENT_BRIDGE:
        subscription_args = f"{{arn: {json.dumps(address)}}}"
    else:
        if address.startswith("pubsub://"):
            address = address[len("pubsub://"):]
        project, _, pub_sub_topic = address.partition(":")
        subscription_args = (
            f"{{pubSubProject: {json.dumps(project)}, pubSubTopic: {json.dumps(pub_sub_topic)}}}"
        )

    return f"""
mutation webhookSubscription {{
  {mutation_name(delivery_method, webhook_id)}({identifier}, webhookSubscription: {subscription_args}) {{
    userErrors {{
      field
      message
    }}
    webhookSubscription {{
      id
    }}
  }}
}}
"""


def parse_check_response(body: Dict[str, Any]) -> Optional[ExistingSubscription]:
    """
    Extract the existing subscription from a check-query response.

    Returns None when the topic has no subscription. Endpoint types this
    library cannot register yield an HttpEndpoint with an empty address,
    so they never match and get updated.
    """
    edges = (((body or {}).get("data") or {}).get("webhookSubscriptions") or {}).get("edges") or []
    if not edges:
        return None

    node = edges[0]["node"]
    if "endpoint" not in node:
        return ExistingSubscription(id=node["id"], endpoint=HttpEndpoint(node.get("callbackUrl", "")))

    endpoint = node["endpoint"] or {}
    typename = endpoint.get("__typename")
    if typename == "WebhookHttpEndpoint":
        parsed = HttpEndpoint(endpoint.get("callbackUrl", ""))
    elif typename == "WebhookEventBridgeEndpoint":
        parsed = EventBridgeEndpoint(endpoint.get("arn", ""))
    elif typename == "WebhookPubSubEndpoint":
        parsed = PubSubEndpoint(endpoint.get("pubSubProject", ""), endpoint.get("pubSubTopic", ""))
    else:
        parsed = HttpEndpoint("")
    return ExistingSubscription(id=node["id"], endpoint=parsed)


def is_success(body: Dict[str, Any], delivery_method: DeliveryMethod, webhook_id: Optional[str] = None) -> bool:
    """True if the mutation response holds the created/updated subscription."""
    data = (body or {}).get("data") or {}
    payload = data.get(mutation_name(delivery_method, webhook_id)) or {}
    return bool(payload.get("webhookSubscription"))
