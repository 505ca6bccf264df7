# cosdata/auth.py
"""Session login and bearer-token storage."""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from cosdata.exceptions import AuthenticationError
from cosdata.http import OK, build_headers, check_response, send
from cosdata.logging import get_logger
from cosdata.logging_tags import AUTH

logger = get_logger(__name__)

LOGIN_PATH = "/auth/create-session"


class Session:
    """
    Bearer-token session for one Client.

    The token is obtained lazily on the first authenticated request and
    reused for the lifetime of the object. There is no expiry tracking:
    a 401 later on surfaces as the failing operation's error.
    """

    def __init__(self, http_client: httpx.Client, username: str, password: str):
        self.http_client = http_client
        self.username = username
        self._password = password
        self._token: Optional[str] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def login(self) -> str:
        """
        Authenticate with the server and store the access token.

        Returns:
            The access token

        Raises:
            AuthenticationError: If the server rejects the credentials or
                returns no token
        """
        message = "Authentication failed"
        response = send(
            self.http_client,
            "POST",
            LOGIN_PATH,
            headers=self.headers(),
            json={"username": self.username, "password": self._password},
            error=AuthenticationError,
            message=message,
        )
        session = check_response(response, OK, AuthenticationError, message, endpoint=LOGIN_PATH)

        token = session.get("access_token") if isinstance(session, dict) else None
        if not token:
            raise AuthenticationError(
                message="Authentication response has no access_token",
                status_code=response.status_code,
                endpoint=LOGIN_PATH,
                details=response.text or None,
            )

        self._token = token
        logger.info(f"{AUTH} Logged in as '{self.username}'")
        return token

    def ensure_authenticated(self) -> None:
        """Log in if no token is cached yet."""
        if not self._token:
            self.login()

    def headers(self) -> Dict[str, str]:
        """Headers for the next request, with the current token if any."""
        return build_headers(self._token)
