"""main-branch exception classes."""


class MainBranchError(Exception):
    """Base exception for all main-branch errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(MainBranchError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class MalformedIdentityError(MainBranchError):
    """Raised when a repository identity does not parse."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(
            "MALFORMED_IDENTITY",
            f"Invalid repo specification (expected `owner/repo` format): {text}",
        )


class GatewayError(MainBranchError):
    """Base class for failures reported by the remote repository service."""

    pass


class AuthenticationError(GatewayError):
    """Raised when the token is missing or rejected."""

    pass


class AuthorizationError(GatewayError):
    """Raised when access is denied."""

    pass


class NotFoundError(GatewayError):
    """Raised when a resource is not found."""

    pass


class ConflictError(GatewayError):
    """Raised on conflicts."""

    pass


class UnprocessableError(GatewayError):
    """Raised when the service rejects a request (422 and other 4xx)."""

    pass


class RateLimitedError(GatewayError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ServerError(GatewayError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class ValidationFailure(Exception):
    """
    Raised by a precondition check that did not hold.

    The reason is logged before raising. Operations catch this exact type
    and turn it into ``Outcome.FAILURE``. It does not derive
    from ``MainBranchError``.
    """

    pass
