#!/usr/bin/env python3
"""
Fpp Webhook Registration Script

Registers webhook subscriptions for a shop, using the app configuration
from config/app.yaml (or FPP_* environment variables).

Usage:
    python3 scripts/register_webhooks.py \\
        --shop my-store.myfunpinpin.com \\
        --topic PRODUCTS_CREATE:/webhooks \\
        --topic APP_UNINSTALLED:/webhooks \\
        [--delivery-method http] \\
        [--token tok_xxx]   # or set FPP_ACCESS_TOKEN env var

Exit codes:
    0 = every topic registered (or already registered)
    1 = at least one topic failed
"""

import argparse
import logging
import os
import sys
from typing import Dict, List, Optional, Tuple

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fpp_api.common.config_loader import load_context
from fpp_api.common.log_config import setup_logging
from fpp_api.webhooks import DeliveryMethod, RegisterResult, WebhookRegistry

logger = logging.getLogger(__name__)


def parse_topic(value: str) -> Tuple[str, str]:
    """Parse TOPIC:PATH. For Pub/Sub the path itself contains colons."""
    topic, sep, path = value.partition(":")
    if not sep or not topic or not path:
        raise argparse.ArgumentTypeError(f"Expected TOPIC:PATH, got '{value}'")
    return topic, path


def _ignore_delivery(topic: str, shop: str, body: bytes) -> None:
    logger.debug("Delivery for %s from %s ignored by the registration script", topic, shop)


def register_topics(
    registry: WebhookRegistry,
    topics: List[Tuple[str, str]],
    access_token: str,
    shop: str,
    delivery_method: DeliveryMethod,
) -> Dict[str, RegisterResult]:
    """Add a placeholder handler per topic and register them all."""
    for topic, path in topics:
        registry.add_handler(topic, path, _ignore_delivery)
    return registry.register_all(access_token=access_token, shop=shop, delivery_method=delivery_method)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Register Fpp webhook subscriptions for a shop")
    parser.add_argument("--shop", "-s", required=True, help="Shop domain (e.g. my-store.myfunpinpin.com)")
    parser.add_argument(
        "--topic", "-t",
        action="append",
        required=True,
        type=parse_topic,
        metavar="TOPIC:PATH",
        help="Topic and path/address to register (repeatable)",
    )
    parser.add_argument(
        "--delivery-method",
        choices=[m.value for m in DeliveryMethod],
        default=DeliveryMethod.HTTP.value,
    )
    parser.add_argument("--token", help="Shop access token (default: reads FPP_ACCESS_TOKEN env var)")
    parser.add_argument("--config", default="app.yaml", help="Config file (default: app.yaml)")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    context = load_context(args.config)
    token = args.token or os.environ.get("FPP_ACCESS_TOKEN")
    if not token and not context.is_private_app:
        print("ERROR: No access token. Use --token or set FPP_ACCESS_TOKEN.")
        return 1

    results = register_topics(
        WebhookRegistry(context),
        args.topic,
        token,
        args.shop,
        DeliveryMethod(args.delivery_method),
    )

    failed = 0
    for topic, result in results.items():
        status = "OK" if result.success else "FAILED"
        if not result.success:
            failed += 1
        print(f"  {status:<7} {topic}")

    print(f"\n{len(results) - failed}/{len(results)} topics registered for {args.shop}")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
