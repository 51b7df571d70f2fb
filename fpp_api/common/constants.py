"""
Shared constants for the library.

Header names are defined by the Fpp platform and must match exactly
(comparisons are case-insensitive).
"""

LIBRARY_VERSION = "1.2.0"

# Cookie carrying the session id between begin_auth and the callback
SESSION_COOKIE_NAME = "fpp_app_session"

# Platform headers
ACCESS_TOKEN_HEADER = "X-Fpp-Access-Token"
HMAC_HEADER = "X-Fpp-Hmac-Sha256"
TOPIC_HEADER = "X-Fpp-Topic"
DOMAIN_HEADER = "X-Fpp-Shop-Domain"
DEPRECATION_HEADER = "X-Fpp-API-Deprecated-Reason"
REQUEST_ID_HEADER = "X-Request-Id"
