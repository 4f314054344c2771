"""Authenticated HTTP transport with status classification."""

import logging
from typing import Any, Optional

import requests

from src.adapters.endpoints import DEFAULT_BASE_URL, Endpoint
from src.core.credential_store import CredentialStore
from src.core.exceptions import (
    DecodeError,
    HttpStatusError,
    NetworkError,
    UnauthorizedError,
)

logger = logging.getLogger("moltview")

_APP_VERSION = "1.0.0"


class HttpTransport:
    """Issues GET requests for endpoints and classifies the response.

    200-299 returns the parsed JSON body, 401 raises UnauthorizedError, any
    other status raises HttpStatusError and failures below HTTP raise
    NetworkError. No retries, no caching.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self._credentials = credentials
        self._base_url = base_url
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "User-Agent": f"MoltView/{_APP_VERSION}",
            "Accept": "application/json",
        })

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._credentials.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, endpoint: Endpoint) -> Any:
        """Fetch an endpoint and return its decoded JSON body.

        Raises:
            InvalidRequestError: endpoint could not be turned into a URL
            UnauthorizedError: HTTP 401
            HttpStatusError: any other non-2xx status
            NetworkError: connection, DNS or timeout failure
            DecodeError: 2xx body is not JSON
        """
        url = endpoint.url(self._base_url)
        logger.debug(f"GET {url}")

        try:
            response = self._session.request(
                "GET", url, headers=self.build_headers(), timeout=self._timeout
            )
        except requests.RequestException as e:
            logger.warning(f"Request failed for {endpoint.path}: {e}")
            raise NetworkError(str(e), cause=e) from e

        status = response.status_code
        if status == 401:
            raise UnauthorizedError()
        if not (200 <= status <= 299):
            logger.warning(f"HTTP {status} for {endpoint.path}")
            raise HttpStatusError(status)

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response body is not JSON: {e}") from e
