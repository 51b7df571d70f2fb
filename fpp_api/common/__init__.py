"""
Shared utilities.

Modules:
    config_loader - YAML + environment configuration -> Context
    constants - Header names, cookie name, library version
    cookies - Signed cookie jar
    hmac_validator - OAuth callback query HMAC
    log_config - setup_logging()
    network - Framework-neutral request/response primitives
    validators - Shop domains, constant-time comparison, API versions
"""

from .cookies import SignedCookies
from .hmac_validator import generate_local_hmac, validate_hmac
from .log_config import setup_logging
from .network import DataType, IncomingRequest, Method, ServerResponse, StatusCode, parse_cookie_header
from .validators import safe_compare, validate_shop, version_compatible

__all__ = [
    'SignedCookies',
    'generate_local_hmac',
    'validate_hmac',
    'setup_logging',
    'DataType',
    'IncomingRequest',
    'Method',
    'ServerResponse',
    'StatusCode',
    'parse_cookie_header',
    'safe_compare',
    'validate_shop',
    'version_compatible',
]
