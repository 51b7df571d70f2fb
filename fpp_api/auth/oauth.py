"""
OAuth authorization-code flow.

begin_auth stores a pending Session and redirects the merchant to the
platform's consent screen; validate_auth_callback exchanges the returned
code for an access token and finalizes the Session. The pending session id
travels in a short-lived signed cookie between the two steps.
"""

import logging
import re
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from urllib.parse import urlencode

from ..clients.http_client import HttpClient
from ..common.constants import SESSION_COOKIE_NAME
from ..common.cookies import SignedCookies
from ..common.hmac_validator import validate_hmac
from ..common.network import DataType, IncomingRequest, ServerResponse
from ..common.validators import safe_compare, validate_shop
from ..errors import (
    CookieNotFound,
    InvalidOAuthError,
    InvalidShopError,
    MissingJwtTokenError,
    SessionNotFound,
    SessionStorageError,
)
from ..models import OnlineAccessInfo, Session
from .session_token import decode_session_token, shop_from_dest

logger = logging.getLogger(__name__)

BEARER_RE = re.compile(r"^Bearer (.+)$")


class OAuth:
    """
    OAuth flow and session-id resolution for one app Context.

    Usage:
        oauth = OAuth(context)

        # GET /auth?shop=...
        url = oauth.begin_auth(request, response, shop, "/auth/callback", is_online=True)

        # GET /auth/callback?code=...&shop=...&state=...&hmac=...
        session = oauth.validate_auth_callback(request, response, request.query)
    """

    SESSION_COOKIE_NAME = SESSION_COOKIE_NAME
    PENDING_COOKIE_TTL = 60  # seconds

    def __init__(self, context):
        self.context = context

    def _cookies(self, request: IncomingRequest, response: ServerResponse) -> SignedCookies:
        return SignedCookies(request, response, keys=[self.context.api_secret_key], secure=True)

    def begin_auth(
        self,
        request: IncomingRequest,
        response: ServerResponse,
        shop: str,
        redirect_path: str,
        is_online: bool = True,
    ) -> str:
        """
        Start OAuth for a shop.

        Args:
            request: Inbound request
            response: Response that receives the session cookie
            shop: Shop domain
            redirect_path: Callback path on this app's host
            is_online: Request a user-scoped (online) token

        Returns:
            Authorization URL to redirect the merchant to

        Raises:
            InvalidShopError: Malformed shop domain
            SessionStorageError: The pending session could not be stored
        """
        self.context.throw_if_uninitialized()
        self.context.throw_if_private_app("Cannot perform OAuth for private apps")

        if not validate_shop(shop):
            raise InvalidShopError(f"Shop {shop} is not valid")

        state = secrets.token_urlsafe(16)
        session = Session(
            id=str(uuid.uuid4()) if is_online else self.get_offline_session_id(shop),
            shop=shop,
            state=state,
            is_online=is_online,
        )

        if not self.context.session_storage.store_session(session):
            raise SessionStorageError(
                "OAuth Session could not be saved. Please check your session storage functionality."
            )

        self._cookies(request, response).set(
            self.SESSION_COOKIE_NAME,
            session.id,
            expires=datetime.now(timezone.utc) + timedelta(seconds=self.PENDING_COOKIE_TTL),
            signed=True,
            same_site="lax",
            secure=True,
        )

        query = {
            "client_id": self.context.api_key,
            "scope": ",".join(self.context.scopes),
            "redirect_uri": f"https://{self.context.host_name}{redirect_path}",
            "state": state,
            "response_type": "code",
        }
        logger.debug("Beginning %s OAuth for %s", "online" if is_online else "offline", shop)
        return f"https://{shop}/admin/oauth/authorize?{urlencode(query)}"

    def validate_auth_callback(
        self,
        request: IncomingRequest,
        response: ServerResponse,
        query: Dict[str, str],
    ) -> Session:
        """
        Complete OAuth: exchange the code for a token and finalize the session.

        Raises:
            CookieNotFound: No signed session cookie on the request
            SessionNotFound: The cookie's session is not in storage
            InvalidOAuthError: The callback query failed validation
            SessionStorageError: Storage refused a delete or store
        """
        self.context.throw_if_uninitialized()
        self.context.throw_if_private_app("Cannot perform OAuth for private apps")

        cookies = self._cookies(request, response)
        shop = query.get("shop")

        session_id = self.get_cookie_session_id(request, response)
        if not session_id:
            raise CookieNotFound(
                f"Cannot complete OAuth process. Could not find an OAuth cookie for shop url: {shop}"
            )

        current = self.context.session_storage.load_session(session_id)
        if not current:
            raise SessionNotFound(
                f"Cannot complete OAuth process. No session found for the specified shop url: {shop}"
            )

        if not self._valid_query(query, current):
            raise InvalidOAuthError("Invalid OAuth callback.")

        body = {
            "client_id": self.context.api_key,
            "client_secret": self.context.api_secret_key,
            "code": query.get("code"),
        }
        client = HttpClient(current.shop, self.context)
        try:
            token_response = client.post("/admin/oauth/access_token", data=body, type=DataType.JSON)
        finally:
            client.close()

        token_body = dict(token_response.body)
        access_token = token_body.pop("access_token", None)
        scope = token_body.pop("scope", None)

        current.access_token = access_token
        current.scope = scope

        if current.is_online:
            current.expires = datetime.now(timezone.utc) + timedelta(
                seconds=int(token_body.get("expires_in", 0))
            )
            current.online_access_info = OnlineAccessInfo.from_dict(token_body)

            if self.context.is_embedded_app:
                jwt_session_id = self.get_jwt_session_id(
                    current.shop, str(current.online_access_info.associated_user.id)
                )
                jwt_session = Session.clone(current, jwt_session_id)

                if not self.context.session_storage.delete_session(current.id):
                    raise SessionStorageError(
                        "OAuth Session could not be deleted. Please check your session storage functionality."
                    )
                current = jwt_session

        cookies.set(
            self.SESSION_COOKIE_NAME,
            current.id,
            expires=datetime.now(timezone.utc) if self.context.is_embedded_app else current.expires,
            signed=True,
            same_site="lax",
            secure=True,
        )

        if not self.context.session_storage.store_session(current):
            raise SessionStorageError(
                "OAuth Session could not be saved. Please check your session storage functionality."
            )

        logger.info("Completed %s OAuth for %s", "online" if current.is_online else "offline", current.shop)
        return current

    def _valid_query(self, query: Dict[str, str], session: Session) -> bool:
        if not query.get("hmac") or not query.get("state"):
            return False
        return (
            validate_hmac(query, self.context.api_secret_key)
            and validate_shop(query.get("shop", ""))
            and query.get("shop") == session.shop
            and safe_compare(str(query["state"]), session.state)
        )

    def get_cookie_session_id(self, request: IncomingRequest, response: ServerResponse) -> Optional[str]:
        return self._cookies(request, response).get(self.SESSION_COOKIE_NAME, signed=True)

    @staticmethod
    def get_jwt_session_id(shop: str, user_id: str) -> str:
        return f"{shop}_{user_id}"

    @staticmethod
    def get_offline_session_id(shop: str) -> str:
        return f"offline_{shop}"

    def get_current_session_id(
        self,
        request: IncomingRequest,
        response: ServerResponse,
        is_online: bool = True,
    ) -> Optional[str]:
        """
        Resolve the session id for a request.

        Embedded apps look at the bearer session token first; everything
        falls back to the signed session cookie. Returns None when neither
        identifies a session.

        Raises:
            MissingJwtTokenError: Authorization header is not a bearer token
            InvalidJwtError: The bearer token failed verification
        """
        session_id = None

        if self.context.is_embedded_app:
            auth_header = request.headers.get("Authorization")
            if auth_header:
                match = BEARER_RE.match(auth_header)
                if not match:
                    raise MissingJwtTokenError("Missing Bearer token in authorization header")

                payload = decode_session_token(self.context, match.group(1))
                shop = shop_from_dest(payload["dest"])
                if is_online:
                    session_id = self.get_jwt_session_id(shop, str(payload.get("sub", "")))
                else:
                    session_id = self.get_offline_session_id(shop)

        if not session_id:
            session_id = self.get_cookie_session_id(request, response)

        return session_id
