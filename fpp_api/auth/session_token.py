"""
Embedded-app session tokens.

The admin hands embedded apps a short-lived HS256 JWT signed with the app
secret. Claims: iss, dest, aud, sub, exp, nbf, iat, jti, sid.
"""

import logging
from typing import Any, Dict

import jwt

from ..common.validators import validate_shop
from ..errors import InvalidJwtError

logger = logging.getLogger(__name__)

JWT_PERMITTED_CLOCK_TOLERANCE = 5  # seconds


def shop_from_dest(dest: str) -> str:
    return dest[len("https://"):] if dest.startswith("https://") else dest


def decode_session_token(context, token: str) -> Dict[str, Any]:
    """
    Verify and decode a session token.

    Args:
        context: App Context (api key is the expected audience, secret the key)
        token: Encoded JWT from the Authorization header

    Returns:
        Decoded claims

    Raises:
        InvalidJwtError: Bad signature, expired, wrong audience or invalid shop
    """
    try:
        payload = jwt.decode(
            token,
            context.api_secret_key,
            algorithms=["HS256"],
            leeway=JWT_PERMITTED_CLOCK_TOLERANCE,
            options={"verify_aud": False},
        )
    except jwt.PyJWTError as e:
        logger.warning("Rejected session token: %s", e)
        raise InvalidJwtError(f"Failed to parse session token '{token}': {e}") from e

    if payload.get("aud") != context.api_key:
        raise InvalidJwtError("Session token had invalid API key")

    if not validate_shop(shop_from_dest(str(payload.get("dest", "")))):
        raise InvalidJwtError("Session token had invalid shop")

    return payload
