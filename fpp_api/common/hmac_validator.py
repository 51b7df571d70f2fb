"""
OAuth callback HMAC validation.

The platform signs the callback query with the app secret. The signature
covers the sorted ``code``, ``host``, ``shop``, ``state`` and ``timestamp``
parameters, urlencoded, as a hex HMAC-SHA256.
"""

import hashlib
import hmac
from typing import Dict, Optional
from urllib.parse import urlencode

from ..errors import InvalidHmacError
from .validators import safe_compare

SIGNED_QUERY_KEYS = ("code", "host", "shop", "state", "timestamp")


def stringify_query(query: Dict[str, Optional[str]]) -> str:
    """Urlencode the query with keys in alphabetical order; None values encode as ``key=``."""
    ordered = sorted((key, "" if value is None else value) for key, value in query.items())
    return urlencode(ordered)


def generate_local_hmac(query: Dict[str, Optional[str]], secret: str) -> str:
    signed = {key: query.get(key) for key in SIGNED_QUERY_KEYS}
    if not signed["host"]:
        signed.pop("host")
    return hmac.new(
        secret.encode("utf-8"),
        stringify_query(signed).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def validate_hmac(query: Dict[str, Optional[str]], secret: str) -> bool:
    """
    Validate the HMAC of an OAuth callback query.

    Raises:
        InvalidHmacError: If the query carries no hmac parameter
    """
    provided = query.get("hmac")
    if not provided:
        raise InvalidHmacError("Query does not contain an HMAC value.")
    return safe_compare(str(provided), generate_local_hmac(query, secret))
