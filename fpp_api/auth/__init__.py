"""
Authentication: OAuth flow, session tokens and session storage.

Modules:
    oauth - Authorization-code flow and session id resolution
    session_token - Embedded-app session token verification
    session_storage - Storage contract plus memory and callback backends
    session_utils - Load/delete/store helpers for request handlers
"""

from .oauth import OAuth
from .session_storage import CustomSessionStorage, MemorySessionStorage, SessionStorage
from .session_token import decode_session_token
from .session_utils import (
    delete_current_session,
    delete_offline_session,
    load_current_session,
    load_offline_session,
    store_session,
)

__all__ = [
    'OAuth',
    'SessionStorage',
    'MemorySessionStorage',
    'CustomSessionStorage',
    'decode_session_token',
    'load_current_session',
    'load_offline_session',
    'delete_current_session',
    'delete_offline_session',
    'store_session',
]
