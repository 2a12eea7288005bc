"""
HTTP client wrapper for the Twenty CRM REST API.

Every request goes through TwentyHttpClient.request(), which adds the
authentication headers, decodes JSON and maps failures to SDK errors.
"""

import json
import logging
from typing import Any

import httpx

from ..auth.base import Authentication
from ..core.models import APIError, AuthenticationError

logger = logging.getLogger(__name__)


class TwentyHttpClient:
    """
    Authenticated JSON client for one Twenty workspace.

    Features:
    - Bearer authentication via an Authentication strategy
    - JSON request and response bodies
    - 401 responses raised as AuthenticationError, other failures as APIError
    - One attempt per call; callers decide whether to retry
    """

    def __init__(
        self,
        base_url: str,
        auth: Authentication,
        http_client: httpx.Client | None = None,
        timeout_seconds: float = 30.0,
    ):
        """
        Initialize the HTTP client.

        Args:
            base_url: REST API root, e.g. "https://api.twenty.com/rest/"
            auth: Authentication strategy providing request headers
            http_client: Optional httpx client (created if None)
            timeout_seconds: Request timeout in seconds
        """
        self.base_url = base_url
        self.auth = auth
        self.timeout_seconds = timeout_seconds

        # Track if we own the HTTP client (for cleanup)
        self._owns_client = http_client is None

        if http_client is None:
            self.http_client = httpx.Client(timeout=timeout_seconds)
        else:
            self.http_client = http_client

    def close(self) -> None:
        """Close the HTTP client if we created it."""
        if self._owns_client and self.http_client:
            self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def build_url(self, path: str) -> str:
        """
        Build full URL from base URL and path.

        Args:
            path: API path (e.g., "/people" or "metadata/objects")

        Returns:
            Full URL
        """
        base_url = self.base_url.rstrip("/")
        path = path.lstrip("/")
        return f"{base_url}/{path}"

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> dict[str, Any]:
        """
        Make an authenticated HTTP request.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            path: API path relative to the base URL
            params: Query parameters
            json_body: JSON request body

        Returns:
            Response JSON as dict ({} for an empty body)

        Raises:
            AuthenticationError: On a 401 response
            APIError: On any other non-2xx response, a transport failure or
                a response that is not valid JSON
        """
        url = self.build_url(path)

        headers = self.auth.build_auth_headers()
        headers["Content-Type"] = "application/json"
        headers["Accept"] = "application/json"

        kwargs: dict[str, Any] = {}
        if params:
            kwargs["params"] = params
        if json_body:
            kwargs["json"] = json_body

        logger.debug(f"{method} {url} params={params or {}}")

        try:
            response = self.http_client.request(
                method=method,
                url=url,
                headers=headers,
                **kwargs,
            )
        except httpx.RequestError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise APIError(f"Request failed: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")

        if response.status_code == 401:
            logger.error(f"{method} {url} rejected: invalid or expired API token")
            raise AuthenticationError(
                "Authentication failed: check your Twenty API token",
                status_code=response.status_code,
                response_body=response.text,
            )

        if not 200 <= response.status_code < 300:
            logger.error(f"{method} {url} failed: {response.status_code}")
            raise APIError(
                f"API request failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                response_body=response.text,
            )

        if not response.content:
            return {}

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"{method} {url} returned invalid JSON")
            raise APIError(
                f"Invalid JSON response: {e}",
                response_body=response.text,
            ) from e

    def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return self.request("GET", path, params=params)

    def post(self, path: str, json_body: Any = None) -> dict[str, Any]:
        return self.request("POST", path, json_body=json_body)

    def patch(self, path: str, json_body: Any = None) -> dict[str, Any]:
        return self.request("PATCH", path, json_body=json_body)

    def delete(self, path: str) -> dict[str, Any]:
        return self.request("DELETE", path)
