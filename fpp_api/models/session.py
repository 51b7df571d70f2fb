"""
Session data models.

A Session holds the authorization state for one shop (offline) or one
shop and user (online). Online sessions carry the associated user
payload returned by the token exchange.
"""

from dataclasses import asdict, dataclass, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in data.items() if key in names}


@dataclass
class AssociatedUser:
    """User an online access token belongs to."""
    id: int
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    email_verified: bool = False
    account_owner: bool = False
    locale: str = ""
    collaborator: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssociatedUser":
        return cls(**_known_fields(cls, data))


@dataclass
class OnlineAccessInfo:
    """Everything the token endpoint returns for an online token besides the token itself."""
    expires_in: int
    associated_user_scope: str
    associated_user: AssociatedUser
    session: str = ""
    account_number: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OnlineAccessInfo":
        values = _known_fields(cls, data)
        user = values.get("associated_user") or {}
        if isinstance(user, dict):
            values["associated_user"] = AssociatedUser.from_dict(user)
        values.setdefault("associated_user_scope", "")
        return cls(**values)


@dataclass
class Session:
    """
    Identity and authorization state for a shop.

    Offline sessions use the id ``offline_<shop>`` and never expire.
    Online sessions are user-scoped; embedded apps rekey them to
    ``<shop>_<user id>`` once the token exchange completes.
    """

    id: str
    shop: str
    state: str
    is_online: bool = False
    scope: Optional[str] = None
    expires: Optional[datetime] = None
    access_token: Optional[str] = None
    online_access_info: Optional[OnlineAccessInfo] = None

    @staticmethod
    def clone(session: "Session", new_id: str) -> "Session":
        return replace(session, id=new_id)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires is None:
            return False
        now = now or datetime.now(timezone.utc)
        return self.expires <= now

    def is_active(self, scopes: List[str]) -> bool:
        """True if the session has a token for exactly these scopes and is not expired."""
        granted = {s.strip() for s in (self.scope or "").split(",") if s.strip()}
        return (
            bool(self.access_token)
            and granted == {s.strip() for s in scopes}
            and not self.is_expired()
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["expires"] = self.expires.isoformat() if self.expires else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        values = _known_fields(cls, data)
        expires = values.get("expires")
        if isinstance(expires, str):
            values["expires"] = datetime.fromisoformat(expires)
        info = values.get("online_access_info")
        if isinstance(info, dict):
            values["online_access_info"] = OnlineAccessInfo.from_dict(info)
        return cls(**values)
