"""
Application context.

A Context holds the app's configuration and the shared objects built from
it. Create one at startup (directly or with common.config_loader.load_context)
and pass it to every component.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .auth.session_storage import MemorySessionStorage, SessionStorage
from .clients.http_client import DeprecationNoticeLog
from .errors import PrivateAppError, UninitializedContextError


class ApiVersion(str, Enum):
    APRIL_21 = "2021-04"
    JULY_21 = "2021-07"
    OCTOBER_21 = "2021-10"
    JANUARY_22 = "2022-01"
    APRIL_22 = "2022-04"
    UNSTABLE = "unstable"
    UNVERSIONED = "unversioned"


@dataclass
class Context:
    """
    Process-wide app configuration.

    Attributes:
        api_key: App API key (OAuth client id, session token audience)
        api_secret_key: App secret (signs cookies, tokens and webhooks)
        scopes: Access scopes requested during OAuth
        host_name: Public host of the app, used for redirect and webhook URLs
        api_version: Admin API version used for GraphQL calls
        is_embedded_app: App renders inside the admin and uses session tokens
        is_private_app: Private apps authenticate with the secret, no OAuth
        session_storage: Backend for Session records
        user_agent_prefix: Prepended to the library User-Agent
        log_file: File for API deprecation notices (logger when unset)
    """

    api_key: str
    api_secret_key: str
    scopes: List[str]
    host_name: str
    api_version: ApiVersion = ApiVersion.APRIL_22
    is_embedded_app: bool = True
    is_private_app: bool = False
    session_storage: SessionStorage = field(default_factory=MemorySessionStorage)
    user_agent_prefix: Optional[str] = None
    log_file: Optional[str] = None
    deprecation_log: DeprecationNoticeLog = field(default_factory=DeprecationNoticeLog)

    def __post_init__(self):
        self.api_version = ApiVersion(self.api_version)
        if isinstance(self.scopes, str):
            self.scopes = [s.strip() for s in self.scopes.split(",") if s.strip()]

    @property
    def initialized(self) -> bool:
        return all([self.api_key, self.api_secret_key, self.scopes, self.host_name])

    def throw_if_uninitialized(self) -> None:
        if not self.initialized:
            raise UninitializedContextError(
                "Context has not been properly initialized. "
                "Please provide api_key, api_secret_key, scopes and host_name."
            )

    def throw_if_private_app(self, message: str) -> None:
        if self.is_private_app:
            raise PrivateAppError(message)
