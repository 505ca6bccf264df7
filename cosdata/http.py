# cosdata/http.py
"""
Request gateway for the Cosdata HTTP API.

Every call made by the client goes through this module so that headers,
TLS settings and response validation behave the same everywhere:

    - Headers are ``Content-type: application/json`` plus a bearer token
      once the session has one.
    - Each call names the status codes it accepts. Anything else raises
      the operation's error type with the raw response body attached.
    - Transport failures (connection refused, timeouts) raise the same
      operation error, chained from the httpx exception.

No retries happen here or anywhere else in the package.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence, Type
from urllib.parse import quote

import httpx

from cosdata.exceptions import APIError
from cosdata.logging import get_logger
from cosdata.logging_tags import HTTP

if TYPE_CHECKING:
    from cosdata.auth import Session

logger = get_logger(__name__)

# =============================================================================
# Constants
# =============================================================================

API_PREFIX = "/vectordb"

DEFAULT_HEADERS = {
    "Content-type": "application/json",
}

# Accepted status codes per kind of call
OK = (200,)
CREATED = (200, 201)
NO_CONTENT = (200, 204)


# =============================================================================
# Helpers
# =============================================================================


def build_headers(token: Optional[str] = None) -> Dict[str, str]:
    """Build request headers, adding the bearer token when one is set."""
    headers = dict(DEFAULT_HEADERS)

    if token:
        headers["Authorization"] = f"Bearer {token}"

    return headers


def api_path(*segments: Any) -> str:
    """
    Build a path under the /vectordb prefix.

    Example:
        >>> api_path("collections", "docs", "transactions")
        '/vectordb/collections/docs/transactions'
    """
    parts = [quote(str(s), safe="") for s in segments]
    return "/".join([API_PREFIX, *parts])


def create_http_client(
    host: str,
    verify_ssl: bool = False,
    timeout: float = 30.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    Create the httpx client shared by all calls of one Client.

    Args:
        host: Server URL (scheme, host and port)
        verify_ssl: Verify TLS certificates; False accepts self-signed ones
        timeout: Request timeout in seconds
        transport: Optional transport (e.g. httpx.MockTransport in tests)
    """
    kwargs: Dict[str, Any] = {}
    if transport is not None:
        kwargs["transport"] = transport

    client = httpx.Client(
        base_url=host.rstrip("/"),
        verify=verify_ssl,
        timeout=timeout,
        **kwargs,
    )

    logger.debug(f"{HTTP} Created HTTP client for {host} (verify_ssl={verify_ssl}, timeout={timeout}s)")

    return client


def decode_body(response: httpx.Response) -> Any:
    """Decode a JSON body; empty bodies (e.g. 204) decode to None."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def send(
    http_client: httpx.Client,
    method: str,
    path: str,
    *,
    headers: Dict[str, str],
    json: Any = None,
    error: Type[APIError] = APIError,
    message: str = "Request failed",
) -> httpx.Response:
    """
    Send one request, converting transport failures into ``error``.

    HTTP error statuses are NOT checked here; see check_response().
    """
    logger.debug(f"{HTTP} {method} {path}")

    try:
        response = http_client.request(method, path, headers=headers, json=json)
    except httpx.HTTPError as exc:
        raise error(message=message, endpoint=path, details=str(exc)) from exc

    logger.debug(f"{HTTP} {method} {path} -> {response.status_code}")
    return response


def check_response(
    response: httpx.Response,
    expected: Sequence[int],
    error: Type[APIError],
    message: str,
    endpoint: str = "",
) -> Any:
    """
    Validate the status code and return the decoded body.

    Raises:
        error: If the status is not one of ``expected``; the raw response
            body is kept in ``details``.
    """
    if response.status_code not in expected:
        raise error(
            message=message,
            status_code=response.status_code,
            endpoint=endpoint,
            details=response.text or None,
        )

    return decode_body(response)


# =============================================================================
# Gateway
# =============================================================================


class Gateway:
    """
    Authenticated request path used by collections, indexes and transactions.

    Holds no state of its own beyond the shared httpx client and the
    session whose token goes into every request.
    """

    def __init__(self, http_client: httpx.Client, session: "Session"):
        self.http_client = http_client
        self.session = session

    def request(
        self,
        method: str,
        path: str,
        *,
        expected: Sequence[int],
        error: Type[APIError],
        message: str,
        json: Any = None,
    ) -> Any:
        """
        Send an authenticated request and validate it.

        Logs in first if the session has no token yet.

        Returns:
            Decoded JSON body, or None for empty responses
        """
        self.session.ensure_authenticated()

        response = send(
            self.http_client,
            method,
            path,
            headers=self.session.headers(),
            json=json,
            error=error,
            message=message,
        )
        return check_response(response, expected, error, message, endpoint=path)

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)
