"""
Webhook registry.

Maps topics to handlers, registers subscriptions with the platform and
verifies and dispatches inbound deliveries. Populate it at startup, before
traffic arrives; mutations are still locked so late additions are safe.
"""

import base64
import hashlib
import hmac
import logging
import threading
from typing import Dict, List, Optional

from ..clients.graphql_client import GraphqlClient
from ..common.constants import DOMAIN_HEADER, HMAC_HEADER, TOPIC_HEADER
from ..common.network import IncomingRequest, ServerResponse, StatusCode
from ..common.validators import safe_compare
from ..errors import FppError, InvalidWebhookError
from .queries import (
    build_check_query,
    build_query,
    is_success,
    parse_check_response,
    validate_delivery_method,
)
from .types import DeliveryMethod, RegisterResult, WebhookHandler, WebhookRegistryEntry

logger = logging.getLogger(__name__)


def normalize_topic(topic: str) -> str:
    """'products/create' -> 'PRODUCTS_CREATE'"""
    return topic.upper().replace("/", "_")


class WebhookRegistry:
    """
    Topic -> handler registry for one app Context.

    Usage:
        registry = WebhookRegistry(context)
        registry.add_handler("PRODUCTS_CREATE", "/webhooks", on_product_create)

        # after OAuth
        registry.register_all(access_token=session.access_token, shop=session.shop)

        # POST /webhooks
        registry.process(request, response)
    """

    def __init__(self, context):
        self.context = context
        self._registry: Dict[str, WebhookRegistryEntry] = {}
        self._lock = threading.Lock()

    def add_handler(self, topic: str, path: str, handler: WebhookHandler) -> None:
        with self._lock:
            self._registry[normalize_topic(topic)] = WebhookRegistryEntry(path=path, handler=handler)

    def add_handlers(self, handlers: Dict[str, WebhookRegistryEntry]) -> None:
        for topic, entry in handlers.items():
            self.add_handler(topic, entry.path, entry.handler)

    def get_handler(self, topic: str) -> Optional[WebhookRegistryEntry]:
        with self._lock:
            return self._registry.get(normalize_topic(topic))

    def get_topics(self) -> List[str]:
        with self._lock:
            return list(self._registry)

    def is_webhook_path(self, path: str) -> bool:
        with self._lock:
            return any(entry.path == path for entry in self._registry.values())

    def register(
        self,
        topic: str,
        path: str,
        access_token: str,
        shop: str,
        delivery_method: DeliveryMethod = DeliveryMethod.HTTP,
    ) -> Dict[str, RegisterResult]:
        """
        Create or update the platform subscription for a topic.

        If the topic is already subscribed at the same address, nothing is
        sent and the registration reports success.

        Args:
            topic: Webhook topic (e.g. PRODUCTS_CREATE or products/create)
            path: Path on the app host (HTTP), ARN (EventBridge) or
                pubsub://project:topic address (Pub/Sub)
            access_token: Shop access token
            shop: Shop domain
            delivery_method: Delivery transport

        Returns:
            {topic: RegisterResult}

        Raises:
            UnsupportedClientType: Delivery method unsupported in the configured API version
        """
        api_version = self.context.api_version
        validate_delivery_method(delivery_method, api_version)
        topic = normalize_topic(topic)

        if delivery_method == DeliveryMethod.HTTP:
            address = f"https://{self.context.host_name}{path}"
        else:
            address = path

        client = GraphqlClient(shop, self.context, access_token=access_token)
        try:
            check_result = client.query(data=build_check_query(topic, api_version))
            existing = parse_check_response(check_result.body)

            webhook_id = None
            if existing:
                webhook_id = existing.id
                if existing.endpoint.address == address:
                    logger.debug("Webhook %s already registered at %s for %s", topic, address, shop)
                    return {topic: RegisterResult(success=True, result={})}

            result = client.query(
                data=build_query(topic, address, api_version, delivery_method, webhook_id)
            )
        finally:
            client.close()

        success = is_success(result.body, delivery_method, webhook_id)
        if success:
            logger.info("%s webhook %s for %s", "Updated" if webhook_id else "Created", topic, shop)
        else:
            logger.warning("Failed to register webhook %s for %s: %s", topic, shop, result.body)
        return {topic: RegisterResult(success=success, result=result.body)}

    def register_all(
        self,
        access_token: str,
        shop: str,
        delivery_method: DeliveryMethod = DeliveryMethod.HTTP,
    ) -> Dict[str, RegisterResult]:
        """
        Register every topic in the registry.

        A failing topic is reported as unsuccessful and does not stop the
        remaining registrations.
        """
        validate_delivery_method(delivery_method, self.context.api_version)

        results: Dict[str, RegisterResult] = {}
        for topic in self.get_topics():
            entry = self.get_handler(topic)
            if entry is None:
                continue
            try:
                results.update(self.register(topic, entry.path, access_token, shop, delivery_method))
            except FppError as e:
                logger.warning("Failed to register webhook %s for %s: %s", topic, shop, e)
                results[topic] = RegisterResult(success=False, result={"error": str(e)})
        return results

    def process(self, request: IncomingRequest, response: ServerResponse) -> None:
        """
        Verify an inbound delivery and dispatch it to its handler.

        The response is always written before any error is raised:
        400 for a missing body or headers, 403 for a bad signature or
        unknown topic, 500 if the handler raised, 200 otherwise.

        Raises:
            InvalidWebhookError: Missing data, bad signature or unknown topic
            Exception: Whatever the handler raised
        """
        body = request.body
        if not body:
            self._respond(response, StatusCode.BAD_REQUEST)
            raise InvalidWebhookError("No body was received when processing webhook")

        hmac_header = request.headers.get(HMAC_HEADER)
        topic = request.headers.get(TOPIC_HEADER)
        domain = request.headers.get(DOMAIN_HEADER)

        missing = [
            name for name, value in
            ((HMAC_HEADER, hmac_header), (TOPIC_HEADER, topic), (DOMAIN_HEADER, domain))
            if not value
        ]
        if missing:
            self._respond(response, StatusCode.BAD_REQUEST)
            raise InvalidWebhookError(
                "Missing one or more of the required HTTP headers to process webhooks: "
                f"[{', '.join(missing)}]"
            )

        generated_hash = base64.b64encode(
            hmac.new(self.context.api_secret_key.encode("utf-8"), body, hashlib.sha256).digest()
        ).decode("ascii")

        if not safe_compare(generated_hash, hmac_header):
            logger.warning("Rejected webhook %s from %s: invalid HMAC", topic, domain)
            self._respond(response, StatusCode.FORBIDDEN)
            raise InvalidWebhookError(f"Could not validate request for topic {topic}")

        graphql_topic = normalize_topic(topic)
        entry = self.get_handler(graphql_topic)
        if entry is None:
            logger.warning("Rejected webhook %s from %s: no handler", topic, domain)
            self._respond(response, StatusCode.FORBIDDEN)
            raise InvalidWebhookError(f"No webhook is registered for topic {topic}")

        try:
            entry.handler(graphql_topic, domain, body)
        except Exception:
            self._respond(response, StatusCode.INTERNAL_SERVER_ERROR)
            raise

        self._respond(response, StatusCode.OK)

    @staticmethod
    def _respond(response: ServerResponse, status: StatusCode) -> None:
        response.write_head(status)
        response.end()
