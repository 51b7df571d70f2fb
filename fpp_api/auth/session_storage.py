"""
Session storage contract and built-in implementations.

The library only relies on store/load/delete being atomic per id;
no multi-key transactions are assumed.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from ..errors import SessionStorageError
from ..models import Session


class SessionStorage(ABC):
    """Durable id -> Session mapping."""

    @abstractmethod
    def store_session(self, session: Session) -> bool:
        """Persist the session. Return True only if it was durably stored."""

    @abstractmethod
    def load_session(self, id: str) -> Optional[Session]:
        """Return the stored session or None."""

    @abstractmethod
    def delete_session(self, id: str) -> bool:
        """Delete the session. Return True on success."""


class MemorySessionStorage(SessionStorage):
    """In-process storage, for development and tests."""

    def __init__(self):
        self.sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def store_session(self, session: Session) -> bool:
        with self._lock:
            self.sessions[session.id] = session
        return True

    def load_session(self, id: str) -> Optional[Session]:
        with self._lock:
            return self.sessions.get(id)

    def delete_session(self, id: str) -> bool:
        with self._lock:
            self.sessions.pop(id, None)
        return True


class CustomSessionStorage(SessionStorage):
    """
    Storage backed by user callables.

    Usage:
        storage = CustomSessionStorage(
            store_callback=lambda session: db.save(session.to_dict()),
            load_callback=lambda id: db.get(id),
            delete_callback=lambda id: db.delete(id),
        )

    The load callback may return a Session, a dict produced by
    Session.to_dict(), or None.
    """

    def __init__(
        self,
        store_callback: Callable[[Session], bool],
        load_callback: Callable[[str], Any],
        delete_callback: Callable[[str], bool],
    ):
        self.store_callback = store_callback
        self.load_callback = load_callback
        self.delete_callback = delete_callback

    def store_session(self, session: Session) -> bool:
        try:
            return bool(self.store_callback(session))
        except Exception as e:
            raise SessionStorageError(
                f"CustomSessionStorage failed to store a session. Error details: {e}"
            ) from e

    def load_session(self, id: str) -> Optional[Session]:
        try:
            result = self.load_callback(id)
        except Exception as e:
            raise SessionStorageError(
                f"CustomSessionStorage failed to load a session. Error details: {e}"
            ) from e

        if result is None or isinstance(result, Session):
            return result
        if isinstance(result, dict):
            return Session.from_dict(result)

        raise SessionStorageError(
            f"Expected return to be a Session, dict or None, but received {type(result).__name__}"
        )

    def delete_session(self, id: str) -> bool:
        try:
            return bool(self.delete_callback(id))
        except Exception as e:
            raise SessionStorageError(
                f"CustomSessionStorage failed to delete a session. Error details: {e}"
            ) from e
