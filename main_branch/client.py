"""
main-branch client.

Wires the HTTP transport, the GitHub gateway and the orchestrator together.
"""

import os
from typing import Any

from main_branch.auth import (
    ChainTokenProvider,
    EnvTokenProvider,
    FileTokenProvider,
    TokenProvider,
)
from main_branch.exceptions import ConfigurationError
from main_branch.gateway import GitHubGateway
from main_branch.logging import LogSink, logging_sink
from main_branch.orchestrator import DEFAULT_SETTLE_DELAY, Orchestrator
from main_branch.transport import HTTPTransport, RetryConfig


class MainBranchClient:
    """
    Main entry point for running branch migrations against GitHub.

    Example:
        ```python
        from main_branch import MainBranchClient, StaticTokenProvider

        client = MainBranchClient(token_provider=StaticTokenProvider("ghp_..."))

        # Or create from environment variables
        client = MainBranchClient.from_env()

        outcome = client.orchestrator.replace("acme/widgets")
        client.close()
        ```
    """

    DEFAULT_BASE_URL = HTTPTransport.DEFAULT_BASE_URL
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token_provider: TokenProvider,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        sink: LogSink = logging_sink,
    ) -> None:
        """
        Initialize the client.

        Args:
            token_provider: Source of the GitHub personal access token
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            settle_delay: Seconds to wait before verifying a branch write
            sink: Receives every operation log entry
        """
        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(
            token_provider=token_provider,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
        )
        self.gateway = GitHubGateway(self._transport)
        self.orchestrator = Orchestrator(
            self.gateway, sink=sink, settle_delay=settle_delay
        )

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        sink: LogSink = logging_sink,
        token_provider: TokenProvider | None = None,
    ) -> "MainBranchClient":
        """
        Create a client from environment variables.

        Environment variables:
            MAIN_BRANCH_TOKEN / GITHUB_TOKEN: Personal access token (optional
                when the token file exists)
            MAIN_BRANCH_TOKEN_FILE: Token file (optional, default:
                ~/.config/main-branch/github-personal-access-token)
            MAIN_BRANCH_API_URL: Base URL for API (optional, default: https://api.github.com)
            MAIN_BRANCH_SETTLE_DELAY: Seconds to wait before verifying writes
                (optional, default: 1.0)

        Args:
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            sink: Receives every operation log entry
            token_provider: Overrides the token sources above

        Returns:
            Configured MainBranchClient instance

        Raises:
            ConfigurationError: If an environment variable has an invalid value
        """
        base_url = os.environ.get("MAIN_BRANCH_API_URL", cls.DEFAULT_BASE_URL)

        settle_delay_str = os.environ.get("MAIN_BRANCH_SETTLE_DELAY")
        settle_delay = DEFAULT_SETTLE_DELAY
        if settle_delay_str:
            try:
                settle_delay = float(settle_delay_str)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid MAIN_BRANCH_SETTLE_DELAY: {settle_delay_str}. Must be a number of seconds"
                ) from None
            if settle_delay < 0:
                raise ConfigurationError("MAIN_BRANCH_SETTLE_DELAY must not be negative")

        if token_provider is None:
            token_provider = ChainTokenProvider(EnvTokenProvider(), FileTokenProvider())

        return cls(
            token_provider=token_provider,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
            settle_delay=settle_delay,
            sink=sink,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "MainBranchClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
