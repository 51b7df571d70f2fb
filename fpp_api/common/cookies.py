"""
Signed cookies.

A signed cookie ``name=value`` travels with a companion ``name.sig`` cookie
holding the base64url HMAC-SHA1 of ``name=value`` (keygrip format). The
first key signs; any key verifies, so secrets can be rotated.
"""

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from email.utils import format_datetime
from http.cookies import SimpleCookie
from typing import List, Optional

from .network import IncomingRequest, ServerResponse
from .validators import safe_compare


def sign(data: str, key: str) -> str:
    digest = hmac.new(key.encode("utf-8"), data.encode("utf-8"), hashlib.sha1).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


class SignedCookies:
    """Read and write (optionally signed) cookies for a request/response pair."""

    def __init__(
        self,
        request: IncomingRequest,
        response: ServerResponse,
        keys: List[str],
        secure: bool = True,
    ):
        if not keys:
            raise ValueError("At least one signing key is required")
        self.request = request
        self.response = response
        self.keys = keys
        self.secure = secure

    def get(self, name: str, signed: bool = True) -> Optional[str]:
        cookies = self.request.cookies
        value = cookies.get(name)
        if value is None or not signed:
            return value

        signature = cookies.get(f"{name}.sig")
        if not signature:
            return None

        data = f"{name}={value}"
        for key in self.keys:
            if safe_compare(signature, sign(data, key)):
                return value
        return None

    def set(
        self,
        name: str,
        value: str,
        expires: Optional[datetime] = None,
        signed: bool = True,
        same_site: str = "lax",
        secure: Optional[bool] = None,
        http_only: bool = True,
    ) -> None:
        secure = self.secure if secure is None else secure
        self.response.add_header(
            "Set-Cookie",
            self._serialize(name, value, expires, same_site, secure, http_only),
        )
        if signed:
            self.response.add_header(
                "Set-Cookie",
                self._serialize(
                    f"{name}.sig", sign(f"{name}={value}", self.keys[0]),
                    expires, same_site, secure, http_only,
                ),
            )

    @staticmethod
    def _serialize(name, value, expires, same_site, secure, http_only) -> str:
        jar = SimpleCookie()
        jar[name] = value
        morsel = jar[name]
        morsel["path"] = "/"
        if expires is not None:
            if expires.tzinfo is None:
                expires = expires.replace(tzinfo=timezone.utc)
            morsel["expires"] = format_datetime(expires.astimezone(timezone.utc), usegmt=True)
        if same_site:
            morsel["samesite"] = same_site
        if secure:
            morsel["secure"] = True
        if http_only:
            morsel["httponly"] = True
        return morsel.OutputString()
