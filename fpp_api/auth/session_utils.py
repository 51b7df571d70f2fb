"""
Session helpers for request handlers.

Thin wrappers that resolve the current session id for a request (or the
offline id for a shop) and delegate to the Context's session storage.
"""

from datetime import datetime, timezone
from typing import Optional

from ..common.network import IncomingRequest, ServerResponse
from ..errors import SessionNotFound
from ..models import Session
from .oauth import OAuth


def load_current_session(
    context,
    request: IncomingRequest,
    response: ServerResponse,
    is_online: bool = True,
) -> Optional[Session]:
    """Load the session the request belongs to, or None if it carries no session id."""
    context.throw_if_uninitialized()

    session_id = OAuth(context).get_current_session_id(request, response, is_online)
    if not session_id:
        return None

    return context.session_storage.load_session(session_id)


def load_offline_session(context, shop: str, include_expired: bool = False) -> Optional[Session]:
    """
    Load a shop's offline session.

    Args:
        context: App Context
        shop: Shop domain
        include_expired: Return the session even if it has expired
    """
    context.throw_if_uninitialized()

    session = context.session_storage.load_session(OAuth.get_offline_session_id(shop))
    if session and not include_expired and session.is_expired(datetime.now(timezone.utc)):
        return None

    return session


def delete_current_session(
    context,
    request: IncomingRequest,
    response: ServerResponse,
    is_online: bool = True,
) -> bool:
    context.throw_if_uninitialized()

    session_id = OAuth(context).get_current_session_id(request, response, is_online)
    if not session_id:
        raise SessionNotFound("No active session found.")

    return context.session_storage.delete_session(session_id)


def delete_offline_session(context, shop: str) -> bool:
    context.throw_if_uninitialized()

    return context.session_storage.delete_session(OAuth.get_offline_session_id(shop))


def store_session(context, session: Session) -> bool:
    context.throw_if_uninitialized()

    return context.session_storage.store_session(session)
