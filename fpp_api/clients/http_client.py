"""
Fpp HTTP Client

Base client for authenticated HTTPS calls to a shop's domain.
Handles body encoding, retries with backoff, error classification and
API deprecation notices.
"""

import hashlib
import json
import logging
import platform
import threading
import time
import traceback
from datetime import datetime
from typing import Dict, Optional, Union
from urllib.parse import urlencode

import requests
from requests.structures import CaseInsensitiveDict

from ..common.constants import DEPRECATION_HEADER, LIBRARY_VERSION, REQUEST_ID_HEADER
from ..common.network import DataType, Method, StatusCode
from ..common.validators import validate_shop
from ..errors import (
    FppError,
    HttpInternalError,
    HttpMaxRetriesError,
    HttpRequestError,
    HttpResponseError,
    HttpThrottlingError,
    InvalidShopError,
)
from .types import RequestParams, RequestReturn

logger = logging.getLogger(__name__)


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class DeprecationNoticeLog:
    """
    Remembers when each deprecation notice was last reported.

    Identical notices (same message and URL) are reported at most once per
    ALERT_DELAY seconds. Safe to share between threads.
    """

    ALERT_DELAY = 300

    def __init__(self):
        self._logged: Dict[str, float] = {}
        self._lock = threading.Lock()

    @staticmethod
    def notice_hash(deprecation: dict) -> str:
        return hashlib.md5(json.dumps(deprecation, sort_keys=True).encode("utf-8")).hexdigest()

    def should_log(self, deprecation: dict, now: Optional[float] = None) -> bool:
        """Return True (and record the time) if this notice is due to be reported."""
        now = time.time() if now is None else now
        key = self.notice_hash(deprecation)
        with self._lock:
            last = self._logged.get(key)
            if last is not None and now - last < self.ALERT_DELAY:
                return False
            self._logged[key] = now
        return True


class HttpClient:
    """
    Client for one shop domain.

    Handles:
    - JSON, URL-encoded and GraphQL request bodies
    - Retries of throttled (429) and internal (5xx) responses
    - Error classification into the library's error kinds
    - Rate-limited reporting of deprecation notices

    Usage:
        with HttpClient("my-store.myfunpinpin.com", context) as client:
            result = client.post("/admin/oauth/access_token", data={...}, tries=3)
            print(result.body)
    """

    RETRY_WAIT_TIME = 1  # seconds
    DEFAULT_TIMEOUT = 30

    def __init__(self, domain: str, context, timeout: int = DEFAULT_TIMEOUT):
        """
        Initialize the client.

        Args:
            domain: Shop domain (e.g. my-store.myfunpinpin.com)
            context: App Context (user agent prefix, deprecation log)
            timeout: Per-attempt request timeout in seconds

        Raises:
            InvalidShopError: If domain is not a valid shop domain
        """
        if not validate_shop(domain):
            raise InvalidShopError(f"Domain {domain} is not valid")

        self.domain = domain
        self.context = context
        self.timeout = timeout
        self.session = requests.Session()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def get(self, path: str, query: Optional[dict] = None,
            extra_headers: Optional[dict] = None, tries: int = 1) -> RequestReturn:
        return self.request(RequestParams(
            method=Method.GET, path=path, query=query,
            extra_headers=extra_headers or {}, tries=tries,
        ))

    def post(self, path: str, data: Union[dict, str], type: DataType = DataType.JSON,
             query: Optional[dict] = None, extra_headers: Optional[dict] = None,
             tries: int = 1) -> RequestReturn:
        return self.request(RequestParams(
            method=Method.POST, path=path, type=type, data=data, query=query,
            extra_headers=extra_headers or {}, tries=tries,
        ))

    def put(self, path: str, data: Union[dict, str], type: DataType = DataType.JSON,
            query: Optional[dict] = None, extra_headers: Optional[dict] = None,
            tries: int = 1) -> RequestReturn:
        return self.request(RequestParams(
            method=Method.PUT, path=path, type=type, data=data, query=query,
            extra_headers=extra_headers or {}, tries=tries,
        ))

    def delete(self, path: str, query: Optional[dict] = None,
               extra_headers: Optional[dict] = None, tries: int = 1) -> RequestReturn:
        return self.request(RequestParams(
            method=Method.DELETE, path=path, query=query,
            extra_headers=extra_headers or {}, tries=tries,
        ))

    def request(self, params: RequestParams) -> RequestReturn:
        """
        Make a request, retrying retriable failures.

        Throttled responses wait for their Retry-After hint, other retriable
        failures wait RETRY_WAIT_TIME seconds.

        Raises:
            HttpRequestError: Invalid tries, transport or parse failure
            HttpResponseError: Non-retriable error response
            HttpMaxRetriesError: Retriable failures exhausted all tries (tries > 1)
            HttpInternalError, HttpThrottlingError: Retriable failure with tries == 1
        """
        max_tries = 1 if params.tries is None else params.tries
        if max_tries <= 0:
            raise HttpRequestError(f"Number of tries must be >= 1, got {max_tries}")

        method = Method(params.method)
        headers = self._build_headers(params)
        body = self._encode_body(params)

        url = f"https://{self.domain}{self._request_path(params.path)}"
        if params.query:
            url = f"{url}?{urlencode(params.query, doseq=True)}"

        tries = 0
        while True:
            try:
                return self._do_request(method, url, headers, body)
            except FppError as error:
                tries += 1
                if not error.retriable:
                    raise

                if tries < max_tries:
                    wait_time = self.RETRY_WAIT_TIME
                    retry_after = getattr(error, "retry_after", None)
                    if retry_after is not None:
                        wait_time = retry_after
                    logger.debug("%s on %s %s, retry %d/%d in %ss",
                                 error.kind.value, method.value, params.path,
                                 tries, max_tries - 1, wait_time)
                    time.sleep(wait_time)
                    continue

                if max_tries > 1:
                    raise HttpMaxRetriesError(
                        f"Exceeded maximum retry count of {max_tries}. Last message: {error}"
                    ) from error
                raise

    def _build_headers(self, params: RequestParams) -> CaseInsensitiveDict:
        user_agent = f"Fpp API Library v{LIBRARY_VERSION} | Python {platform.python_version()}"
        if self.context.user_agent_prefix:
            user_agent = f"{self.context.user_agent_prefix} | {user_agent}"

        extra_headers = CaseInsensitiveDict(params.extra_headers or {})
        caller_agent = extra_headers.pop("User-Agent", None)
        if caller_agent:
            user_agent = f"{caller_agent} | {user_agent}"

        headers = CaseInsensitiveDict()
        if params.method in (Method.POST, Method.PUT) and params.data:
            headers["Content-Type"] = (params.type or DataType.JSON).value
        headers.update(extra_headers)
        headers["User-Agent"] = user_agent
        return headers

    @staticmethod
    def _encode_body(params: RequestParams) -> Optional[str]:
        if params.method not in (Method.POST, Method.PUT) or not params.data:
            return None

        data = params.data
        data_type = params.type or DataType.JSON
        if isinstance(data, str):
            return data
        if data_type == DataType.URL_ENCODED:
            return urlencode(data)
        if data_type == DataType.GRAPHQL:
            raise HttpRequestError("GraphQL request bodies must be strings")
        return json.dumps(data)

    @staticmethod
    def _request_path(path: str) -> str:
        return "/" + path.lstrip("/")

    def _do_request(self, method: Method, url: str, headers, body) -> RequestReturn:
        try:
            response = self.session.request(
                method.value, url, headers=headers, data=body, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise HttpRequestError(f"Failed to make Fpp HTTP request: {e}") from e

        response_headers = CaseInsensitiveDict(response.headers)

        if 200 <= response.status_code < 300:
            try:
                response_body = response.json()
            except ValueError as e:
                raise HttpRequestError(f"Failed to parse Fpp HTTP response: {e}") from e

            self._check_deprecation(response_headers, url)
            return RequestReturn(body=response_body, headers=response_headers)

        raise self._error_for(response, response_headers)

    @staticmethod
    def _error_for(response, headers) -> FppError:
        try:
            body = response.json()
        except ValueError:
            body = {}

        error_messages = []
        if isinstance(body, dict) and body.get("errors"):
            error_messages.append(json.dumps(body["errors"], indent=2))
        request_id = headers.get(REQUEST_ID_HEADER)
        if request_id:
            error_messages.append(f"If you report this error, please include this id: {request_id}")
        error_message = ":\n" + "\n".join(error_messages) if error_messages else ""

        status = response.status_code
        if status == StatusCode.TOO_MANY_REQUESTS:
            return HttpThrottlingError(
                f"Fpp is throttling requests{error_message}",
                _parse_retry_after(headers.get("Retry-After")),
            )
        if status >= StatusCode.INTERNAL_SERVER_ERROR:
            return HttpInternalError(f"Fpp internal error{error_message}")

        reason = response.reason or ""
        return HttpResponseError(
            f"Received an error response ({status} {reason}) from Fpp{error_message}",
            status,
            reason,
        )

    def _check_deprecation(self, headers, url: str) -> None:
        reason = headers.get(DEPRECATION_HEADER)
        if not reason:
            return

        deprecation = {"message": reason, "path": url}
        if not self.context.deprecation_log.should_log(deprecation):
            return

        if self.context.log_file:
            stack = "".join(traceback.format_stack())
            with open(self.context.log_file, "a", encoding="utf-8") as f:
                f.write(
                    f"API Deprecation Notice {datetime.now().isoformat()} : "
                    f"{json.dumps(deprecation)}\n    Stack Trace: {stack}\n"
                )
        else:
            logger.warning("API Deprecation Notice: %s", deprecation)
