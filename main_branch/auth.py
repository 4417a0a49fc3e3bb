"""
Credential providers for main-branch.

Every GitHub request carries one bearer token (a personal access token).
Providers only know how to obtain it; the transport asks once and keeps it.
"""

import os
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from main_branch.exceptions import ConfigurationError
from main_branch.logging import get_logger

DEFAULT_TOKEN_PATH = Path.home() / ".config" / "main-branch" / "github-personal-access-token"
TOKEN_ENV_VARS = ("MAIN_BRANCH_TOKEN", "GITHUB_TOKEN")

logger = get_logger("auth")


def default_token_path() -> Path:
    """Token file location, overridable with MAIN_BRANCH_TOKEN_FILE."""
    return Path(os.environ.get("MAIN_BRANCH_TOKEN_FILE", DEFAULT_TOKEN_PATH))


class TokenProvider(ABC):
    """Abstract base class for bearer token sources."""

    @abstractmethod
    def get_token(self) -> str:
        """Return the token, or raise ConfigurationError if there is none."""
        pass


class StaticTokenProvider(TokenProvider):
    """A token known up front."""

    def __init__(self, token: str) -> None:
        if not token:
            raise ConfigurationError("Token must not be empty")
        self._token = token

    def get_token(self) -> str:
        return self._token


class EnvTokenProvider(TokenProvider):
    """Reads the token from the first non-empty environment variable."""

    def __init__(self, names: tuple[str, ...] = TOKEN_ENV_VARS) -> None:
        self.names = names

    def get_token(self) -> str:
        for name in self.names:
            value = os.environ.get(name, "").strip()
            if value:
                return value
        raise ConfigurationError(
            f"None of the environment variables {', '.join(self.names)} is set"
        )


class FileTokenProvider(TokenProvider):
    """
    Reads the token from a plain-text file.

    When the file is missing and a ``prompt`` callable was given, the token
    is requested interactively and saved to the file for later runs.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        prompt: Callable[[], str] | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            path: Token file; only its first line is read (default:
                default_token_path())
            prompt: Optional callable asking the user for a token
        """
        self.path = Path(path) if path is not None else default_token_path()
        self.prompt = prompt

    def get_token(self) -> str:
        if self.path.exists():
            token = self.path.read_text(encoding="utf-8").split("\n", 1)[0].strip()
            if not token:
                raise ConfigurationError(f"Token file is empty: {self.path}")
            return token

        if self.prompt is None:
            raise ConfigurationError(f"No personal access token found at: {self.path}")

        token = self.prompt().strip()
        if not token:
            raise ConfigurationError("No personal access token was entered")
        self._store(token)
        return token

    def _store(self, token: str) -> None:
        logger.info("Saving personal access token at: %s", self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(token + "\n")


class ChainTokenProvider(TokenProvider):
    """Tries each provider in order; the first one with a token wins."""

    def __init__(self, *providers: TokenProvider) -> None:
        self.providers = providers

    def get_token(self) -> str:
        for provider in self.providers:
            try:
                return provider.get_token()
            except ConfigurationError as e:
                logger.debug("%s has no token: %s", type(provider).__name__, e.message)
        raise ConfigurationError("No personal access token is configured")
