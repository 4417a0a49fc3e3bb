"""
HTTP Transport for main-branch.

Handles HTTP communication with the GitHub REST API: bearer authentication,
pagination, retry of reads, and error handling.
"""

import random
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import httpx

from main_branch.auth import TokenProvider
from main_branch.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    GatewayError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UnprocessableError,
)
from main_branch.logging import log_http_request, log_http_response

GITHUB_API_VERSION = "2022-11-28"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    # Mutations are never retried
    retry_methods: list[str] = field(default_factory=lambda: ["GET"])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    HTTP transport layer for the GitHub REST API.

    Handles:
    - Bearer token authentication (token resolved once, on first use)
    - Exponential backoff with jitter for retried reads
    - Retry-After header respect for rate limiting
    - Link header pagination
    - Error response parsing into typed exceptions
    """

    DEFAULT_BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token_provider: TokenProvider,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            token_provider: Source of the bearer token
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            http_transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self._token: str | None = None

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=http_transport,
            follow_redirects=True,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request.

        Args:
            method: HTTP method
            path: API path (e.g., "/repos/acme/widgets")
            params: Query parameters
            body: JSON request body

        Returns:
            Parsed JSON response, or an empty dict for empty responses

        Raises:
            GatewayError: On API errors
        """
        response = self._execute_with_retry(
            method, lambda: self._send(method, path, params=params, body=body)
        )
        return self._decode(response)

    def request_page(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> tuple[Any, str | None]:
        """
        Fetch one page of a paginated listing.

        Returns:
            Tuple of (parsed JSON page, URL of the next page or None)
        """
        response = self._execute_with_retry(
            "GET", lambda: self._send("GET", path, params=params)
        )
        return self._decode(response), self._next_url(response)

    def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Iterator[Any]:
        """
        Lazily iterate over every item of a paginated listing.

        The next page is only requested once the items of the current page
        have been consumed.
        """
        page, next_url = self.request_page(path, params)
        yield from page

        while next_url:
            url = next_url
            response = self._execute_with_retry(
                "GET", lambda: self._send("GET", url)
            )
            next_url = self._next_url(response)
            yield from self._decode(response)

    def _authorization(self) -> str:
        if self._token is None:
            self._token = self.token_provider.get_token()
        return f"Bearer {self._token}"

    def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        headers = {"Authorization": self._authorization()}
        log_http_request(method, path, headers=headers, body=body)

        start = time.monotonic()
        response = self._client.request(
            method, path, params=params, json=body, headers=headers
        )
        log_http_response(
            response.status_code, path, elapsed_ms=(time.monotonic() - start) * 1000
        )
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    @staticmethod
    def _next_url(response: httpx.Response) -> str | None:
        return response.links.get("next", {}).get("url")

    def _execute_with_retry(
        self, method: str, request_fn: Callable[[], httpx.Response]
    ) -> httpx.Response:
        """
        Execute a request, retrying retryable errors for retryable methods.

        Args:
            method: HTTP method of the request
            request_fn: Function that makes the HTTP request

        Returns:
            Successful HTTP response

        Raises:
            GatewayError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                response = request_fn()

                if response.status_code < 400:
                    return response

                error = self._parse_error_response(response)

                if not self._should_retry(method, response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                time.sleep(self._get_backoff_time(attempt, retry_after))

            except httpx.RequestError as e:
                # Network errors are retryable for reads only
                if (
                    method.upper() not in self.retry_config.retry_methods
                    or attempt >= self.retry_config.max_retries
                ):
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                time.sleep(self._get_backoff_time(attempt, None))

        if last_error:
            if isinstance(last_error, GatewayError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, method: str, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            method: HTTP method
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        if method.upper() not in self.retry_config.retry_methods:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        wait_time = base_wait + random.uniform(-jitter_range, jitter_range)

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> GatewayError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate GatewayError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        message = data.get("message", f"HTTP {response.status_code}")
        request_id = response.headers.get("X-GitHub-Request-Id")

        status_code = response.status_code

        if status_code == 429 or (
            status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            return RateLimitedError(
                "RATE_LIMITED", message, self._retry_after(response), request_id
            )
        elif status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, request_id)
        elif status_code == 403:
            return AuthorizationError("FORBIDDEN", message, request_id)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, request_id)
        elif status_code == 409:
            return ConflictError("CONFLICT", message, request_id)
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, request_id)
        else:
            return UnprocessableError("UNPROCESSABLE", message, request_id)

    @staticmethod
    def _retry_after(response: httpx.Response) -> int:
        retry_after_str = response.headers.get("Retry-After")
        if retry_after_str is not None:
            try:
                return int(retry_after_str)
            except ValueError:
                return 60

        reset = response.headers.get("X-RateLimit-Reset")
        if reset is not None:
            try:
                return max(int(reset) - int(time.time()), 0)
            except ValueError:
                pass
        return 60
