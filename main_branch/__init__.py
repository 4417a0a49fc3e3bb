"""main-branch - migrate a GitHub repository's default branch."""

from main_branch.auth import (
    ChainTokenProvider,
    EnvTokenProvider,
    FileTokenProvider,
    StaticTokenProvider,
    TokenProvider,
)
from main_branch.branch import Branch
from main_branch.client import MainBranchClient
from main_branch.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    GatewayError,
    MainBranchError,
    MalformedIdentityError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UnprocessableError,
    ValidationFailure,
)
from main_branch.gateway import GitHubGateway, RepositoryGateway
from main_branch.logging import LogEntry, LogType, configure_logging, get_logger
from main_branch.orchestrator import Orchestrator
from main_branch.outcome import Outcome
from main_branch.repository import Repository
from main_branch.transport import HTTPTransport, RetryConfig
from main_branch.types import PullRequest, RepositoryIdentity, RepositoryInfo
from main_branch.validator import Validator

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main entry points
    "MainBranchClient",
    "Orchestrator",
    "Outcome",
    # Entities
    "Repository",
    "Branch",
    "Validator",
    # Types
    "RepositoryIdentity",
    "RepositoryInfo",
    "PullRequest",
    # Gateway
    "RepositoryGateway",
    "GitHubGateway",
    # Credentials
    "TokenProvider",
    "StaticTokenProvider",
    "EnvTokenProvider",
    "FileTokenProvider",
    "ChainTokenProvider",
    # Exceptions
    "MainBranchError",
    "ConfigurationError",
    "MalformedIdentityError",
    "ValidationFailure",
    "GatewayError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "UnprocessableError",
    "RateLimitedError",
    "ServerError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "LogType",
    "LogEntry",
    "configure_logging",
    "get_logger",
]
