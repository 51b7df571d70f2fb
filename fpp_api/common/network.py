"""
Framework-neutral HTTP primitives.

IncomingRequest and ServerResponse are the minimal request/response
surface the OAuth flow and the webhook registry need. Adapt your web
framework's objects to them at the edge of your app.
"""

from enum import Enum, IntEnum
from typing import Dict, List, Mapping, Optional, Tuple, Union

from requests.structures import CaseInsensitiveDict


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class StatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    FORBIDDEN = 403
    TOO_MANY_REQUESTS = 429
    INTERNAL_SERVER_ERROR = 500


class DataType(str, Enum):
    """Request body encodings, named by their content type."""
    JSON = "application/json"
    GRAPHQL = "application/graphql"
    URL_ENCODED = "application/x-www-form-urlencoded"


def parse_cookie_header(header: str) -> Dict[str, str]:
    """
    Parse a Cookie request header into name -> value.

    Each pair is read on its own, so one malformed cookie set by another
    app on the same domain does not hide the others.
    """
    cookies: Dict[str, str] = {}
    for pair in (header or "").split(";"):
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        cookies.setdefault(name, value)
    return cookies


class IncomingRequest:
    """
    Inbound HTTP request.

    Args:
        method: HTTP method
        path: Request path without query string
        headers: Request headers (looked up case-insensitively)
        body: Raw request body
        query: Parsed query parameters
    """

    def __init__(
        self,
        method: str = "GET",
        path: str = "/",
        headers: Optional[Mapping[str, str]] = None,
        body: Union[bytes, str] = b"",
        query: Optional[Dict[str, str]] = None,
    ):
        self.method = method
        self.path = path
        self.headers = CaseInsensitiveDict(headers or {})
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        self.query = dict(query or {})

    @property
    def cookies(self) -> Dict[str, str]:
        """Cookie header pairs; malformed pairs are skipped, the first occurrence of a name wins."""
        return parse_cookie_header(self.headers.get("Cookie", ""))


class ServerResponse:
    """Outbound HTTP response, recorded until the caller's framework sends it."""

    def __init__(self):
        self.status_code: Optional[int] = None
        self.headers: List[Tuple[str, str]] = []
        self.body = b""
        self.finished = False

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def get_headers(self, name: str) -> List[str]:
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]

    def write_head(self, status: int, headers: Optional[Mapping[str, str]] = None) -> None:
        self.status_code = int(status)
        for name, value in (headers or {}).items():
            self.add_header(name, value)

    def end(self, body: Union[bytes, str] = b"") -> None:
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        self.finished = True
