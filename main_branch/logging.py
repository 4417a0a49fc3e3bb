"""
main-branch logging utilities.

Operations report progress as structured ``LogEntry`` values handed to a
sink; rendering is the caller's business. HTTP traffic is logged at DEBUG
with the bearer token masked.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

_package_logger = logging.getLogger("main_branch")
_ops_logger = logging.getLogger("main_branch.ops")
_http_logger = logging.getLogger("main_branch.http")

# Patterns for credentials that should be masked
_SENSITIVE_PATTERNS = [
    # Authorization header values
    (re.compile(r"Bearer\s+[A-Za-z0-9_\-\.]+", re.IGNORECASE), "Bearer [REDACTED]"),
    # GitHub personal access tokens (classic and fine-grained)
    (re.compile(r"gh[pousr]_[A-Za-z0-9]{20,}"), "[TOKEN_REDACTED]"),
    (re.compile(r"github_pat_[A-Za-z0-9_]{20,}"), "[TOKEN_REDACTED]"),
    # Secret/token assignments
    (re.compile(r"(secret|token|password|authorization)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_SENSITIVE_KEYS = {"authorization", "token", "secret", "password"}


class LogType(Enum):
    """Severity of an operation log entry."""

    PLAN = "plan"
    INFO = "info"
    SUCCESS = "success"
    OK = "ok"
    ERROR = "error"
    WARNING = "warning"
    SEPARATOR = "separator"


@dataclass(frozen=True)
class LogEntry:
    """One message emitted by an operation."""

    repository: str
    operation: str
    log_type: LogType
    messages: tuple[Any, ...] = ()

    @property
    def text(self) -> str:
        return " ".join(str(m) for m in self.messages)


LogSink = Callable[[LogEntry], None]

_LEVELS = {
    LogType.ERROR: logging.ERROR,
    LogType.WARNING: logging.WARNING,
}


def logging_sink(entry: LogEntry) -> None:
    """Forward a log entry to the ``main_branch.ops`` logger."""
    level = _LEVELS.get(entry.log_type, logging.INFO)
    if not _ops_logger.isEnabledFor(level):
        return
    _ops_logger.log(
        level,
        "[%s] [%s] %s",
        entry.repository,
        entry.operation,
        entry.text,
        extra={
            "repository": entry.repository,
            "operation": entry.operation,
            "log_type": entry.log_type.value,
        },
    )


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure main-branch logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from main_branch.logging import configure_logging

        # Show every GitHub request
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter(format_string))

    _package_logger.setLevel(level)
    _package_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a main-branch logger.

    Args:
        name: Logger name suffix (e.g., "http", "ops"). If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _package_logger
    return logging.getLogger(f"main_branch.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask credentials in a string.

    Args:
        text: Text that may contain a token

    Returns:
        Text with tokens replaced by redacted placeholders
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Keys to mask (default: authorization, token, secret, password)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log an HTTP request at DEBUG level with credentials masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(mask_sensitive_data(" | ".join(log_parts)))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """Log an HTTP response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


__all__ = [
    "LogType",
    "LogEntry",
    "LogSink",
    "logging_sink",
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
]
