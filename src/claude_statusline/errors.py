"""Categorized error handling with actionable messages.

Every failure the usage subsystem can produce is one of the types below.
The usage orchestrator turns them into values; the CLI decides how they
are presented on the status line.
"""

from __future__ import annotations

from enum import IntEnum
from typing import ClassVar


class ExitCode(IntEnum):
    """Exit codes for scripting integration.

    Standard categories:
    - 0: Success
    - 1-9: Usage/config errors (user can fix)
    - 10-19: Credential errors
    - 20-29: Network errors
    - 30-39: API errors
    - 50-59: Cache/data errors
    """

    SUCCESS = 0

    # Usage/config errors (1-9)
    USAGE_ERROR = 1
    CONFIG_ERROR = 2

    # Credential errors (10-19)
    CREDENTIALS_UNREADABLE = 10
    CREDENTIALS_INVALID = 11
    CREDENTIALS_MISSING = 12

    # Network errors (20-29)
    NETWORK_ERROR = 20
    NETWORK_TIMEOUT = 21
    REQUEST_INVALID = 22

    # API errors (30-39)
    API_ERROR = 30
    API_RATE_LIMIT = 31
    API_AUTH = 32
    API_DECODE = 33

    # Cache/data errors (50-59)
    CACHE_MISSING = 50
    CACHE_CORRUPT = 51
    CACHE_UNREADABLE = 52
    CACHE_WRITE = 53
    SESSION_INPUT = 54


class StatuslineError(Exception):
    """Base exception for claude-statusline with structured error info.

    Attributes:
        message: Human-readable error message.
        code: Exit code for scripting.
        suggestion: Actionable recovery suggestion.
        details: Optional additional context.
    """

    code: ClassVar[ExitCode] = ExitCode.USAGE_ERROR
    suggestion: ClassVar[str] = ""

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: str | None = None,
    ):
        self.message = message
        self._suggestion = suggestion
        self.details = details
        super().__init__(message)

    def get_suggestion(self) -> str:
        """Get the recovery suggestion."""
        return self._suggestion or self.suggestion

    def format_full(self) -> str:
        """Format the complete error message with suggestion."""
        parts = [f"Error: {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        suggestion = self.get_suggestion()
        if suggestion:
            parts.append(f"Suggestion: {suggestion}")
        return "\n".join(parts)


# Configuration Errors


class ConfigDirUnresolvableError(StatuslineError):
    """Neither CLAUDE_CONFIG_DIR nor the home directory could be resolved."""

    code = ExitCode.CONFIG_ERROR
    suggestion = "Set CLAUDE_CONFIG_DIR or ensure the home directory is accessible."


# Credential Errors


class CredentialsError(StatuslineError):
    """Base class for OAuth credential lookup failures."""

    code = ExitCode.CREDENTIALS_UNREADABLE


class CredentialsUnreadableError(CredentialsError):
    """Credentials file is missing or cannot be read."""

    code = ExitCode.CREDENTIALS_UNREADABLE
    suggestion = "Run 'claude' and sign in so the credentials file is created."


class CredentialsUnparseableError(CredentialsError):
    """Credentials file is not valid JSON."""

    code = ExitCode.CREDENTIALS_INVALID
    suggestion = (
        "Your credentials appear corrupted. "
        "Try running 'claude' to re-authenticate."
    )


class CredentialsEmptyError(CredentialsError):
    """Credentials file has no OAuth access token."""

    code = ExitCode.CREDENTIALS_MISSING
    suggestion = "Sign in to Claude Code with a Claude.ai subscription account."


# Network Errors


class RequestBuildError(StatuslineError):
    """The usage request could not be constructed."""

    code = ExitCode.REQUEST_INVALID
    suggestion = "Check the configured usage endpoint URL."


class NetworkError(StatuslineError):
    """Transport-level failure talking to the usage API."""

    code = ExitCode.NETWORK_ERROR
    suggestion = "Check your internet connection and try again."


class NetworkTimeoutError(NetworkError):
    """Request exceeded its time budget."""

    code = ExitCode.NETWORK_TIMEOUT
    suggestion = "The request timed out. Try again, or raise the limit with --timeout."


# API Errors


class HTTPStatusError(StatuslineError):
    """Usage API answered with a non-200 status.

    Only the numeric status is kept; the response body is never attached
    because it can contain account data.
    """

    code = ExitCode.API_ERROR
    suggestion = "Try again later. If the problem persists, check Anthropic's status page."

    def __init__(self, status: int, suggestion: str | None = None):
        self.status = status
        super().__init__(f"usage API returned status {status}", suggestion=suggestion)


class DecodeError(StatuslineError):
    """Usage payload is not a valid usage document."""

    code = ExitCode.API_DECODE
    suggestion = "The usage API format may have changed. Check for a newer release."


# Cache Errors


class CacheError(StatuslineError):
    """Base class for usage cache failures."""

    code = ExitCode.CACHE_UNREADABLE


class CacheNotFoundError(CacheError):
    """No cache file exists yet."""

    code = ExitCode.CACHE_MISSING


class CacheUnreadableError(CacheError):
    """Cache file exists but cannot be read."""

    code = ExitCode.CACHE_UNREADABLE
    suggestion = "Check permissions on the cache file."


class CacheUnparseableError(CacheError):
    """Cache file content is not a valid cache record."""

    code = ExitCode.CACHE_CORRUPT
    suggestion = (
        "The cache file appears corrupted. "
        "It is replaced on the next successful fetch."
    )


class CacheWriteError(CacheError):
    """Writing the cache failed at a given stage.

    Attributes:
        stage: One of 'serialize', 'create', 'write', 'chmod', 'rename'.
    """

    code = ExitCode.CACHE_WRITE
    suggestion = "Check that the configuration directory is writable."

    STAGES: ClassVar[tuple[str, ...]] = ("serialize", "create", "write", "chmod", "rename")

    def __init__(self, stage: str, message: str, details: str | None = None):
        self.stage = stage
        super().__init__(message, details=details)


# Session Input Errors


class SessionInputError(StatuslineError):
    """Session JSON on stdin could not be parsed."""

    code = ExitCode.SESSION_INPUT


def categorize_http_status(status: int) -> HTTPStatusError:
    """Build an HTTPStatusError with a suggestion matching the status.

    Args:
        status: HTTP status code.

    Returns:
        HTTPStatusError carrying only the numeric status.
    """
    if status == 401:
        return HTTPStatusError(
            status,
            suggestion="Your session may have expired. Run 'claude' to sign in again.",
        )
    if status == 403:
        return HTTPStatusError(
            status,
            suggestion="This account may not have access to usage data.",
        )
    if status == 429:
        return HTTPStatusError(
            status,
            suggestion="Rate limited. Cached data is shown until the next refresh.",
        )
    return HTTPStatusError(status)


def format_error_for_user(error: Exception, verbose: bool = False) -> str:
    """Format any exception for user display.

    Args:
        error: Exception to format.
        verbose: If True, include details and suggestions.

    Returns:
        Formatted error message string.
    """
    if isinstance(error, StatuslineError):
        if verbose:
            return error.format_full()
        return f"Error: {error.message}"
    return f"Error: {error}"


def get_exit_code(error: Exception) -> int:
    """Get the exit code for an exception.

    Args:
        error: Exception to get code for.

    Returns:
        Integer exit code.
    """
    if isinstance(error, StatuslineError):
        return error.code
    if isinstance(error, OSError):
        return ExitCode.CONFIG_ERROR
    return ExitCode.USAGE_ERROR


__all__ = [
    "ExitCode",
    "StatuslineError",
    "ConfigDirUnresolvableError",
    "CredentialsError",
    "CredentialsUnreadableError",
    "CredentialsUnparseableError",
    "CredentialsEmptyError",
    "RequestBuildError",
    "NetworkError",
    "NetworkTimeoutError",
    "HTTPStatusError",
    "DecodeError",
    "CacheError",
    "CacheNotFoundError",
    "CacheUnreadableError",
    "CacheUnparseableError",
    "CacheWriteError",
    "SessionInputError",
    "categorize_http_status",
    "format_error_for_user",
    "get_exit_code",
]
