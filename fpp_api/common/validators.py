"""
Validation helpers: shop domains, constant-time comparison, API versions.
"""

import hmac
import json
import re
from typing import Any

from ..errors import SafeCompareError

SHOP_DOMAIN_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9-]*\.myfunpinpin\.(com|top)[/]*$")

# Versions that compare as newer than any dated release
_ALWAYS_COMPATIBLE = {"unstable", "unversioned"}


def validate_shop(shop: str) -> bool:
    """Return True if shop is a well-formed platform shop domain."""
    if not shop or not isinstance(shop, str):
        return False
    return bool(SHOP_DOMAIN_RE.match(shop))


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    return json.dumps(value).encode("utf-8")


def safe_compare(a: Any, b: Any) -> bool:
    """
    Compare two values in constant time.

    Strings and bytes are compared directly; lists and dicts are compared
    through their JSON encoding.

    Raises:
        SafeCompareError: If the operands are of different types
    """
    if type(a) is not type(b):
        raise SafeCompareError(
            f"Mismatched data types provided: {type(a).__name__} and {type(b).__name__}"
        )
    return hmac.compare_digest(_to_bytes(a), _to_bytes(b))


def _numeric_version(version: str) -> int:
    return int(str(version).replace("-", ""))


def version_compatible(reference_version: str, current_version: str) -> bool:
    """
    Check whether current_version is at least reference_version.

    Args:
        reference_version: Oldest version that supports a feature (e.g. "2022-01")
        current_version: Version the app is configured with
    """
    current = getattr(current_version, "value", current_version)
    reference = getattr(reference_version, "value", reference_version)
    if current in _ALWAYS_COMPATIBLE:
        return True
    return _numeric_version(current) >= _numeric_version(reference)
