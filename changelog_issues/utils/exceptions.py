"""
Changelog Issues Custom Exceptions
==================================

Exception hierarchy for the changelog-to-issues sync with error codes,
context information, and user-friendly error messages.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"

    # Feed ingestion errors (F001-F099)
    FEED_HTTP_STATUS = "F001"
    FEED_FETCH_TIMEOUT = "F002"
    FEED_PARSE_ERROR = "F003"
    FEED_NETWORK_ERROR = "F004"
    FEED_INVALID_STRUCTURE = "F005"

    # Marker store errors (S001-S099)
    STORE_READ_FAILED = "S001"
    STORE_WRITE_FAILED = "S002"

    # GitHub API errors (G001-G099)
    GITHUB_API_ERROR = "G001"
    GITHUB_NOT_FOUND = "G002"
    GITHUB_AUTHENTICATION = "G003"

    # Unexpected errors (U001-U099)
    UNEXPECTED = "U001"


class ChangelogIssuesError(Exception):
    """Base exception for all changelog-issues errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize error.

        Args:
            message: Technical error message, kept verbatim in str(error)
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }


class ConfigurationError(ChangelogIssuesError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            **kwargs: Additional arguments for ChangelogIssuesError
        """
        context = kwargs.pop("context", None) or {}
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.pop("user_message", f"Configuration error: {message}"),
            **kwargs,
        )


class FeedError(ChangelogIssuesError):
    """Feed ingestion and parsing errors."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        """Initialize feed error.

        Args:
            message: Error message
            feed_url: Feed URL that caused the error
            **kwargs: Additional arguments for ChangelogIssuesError
        """
        context = kwargs.pop("context", None) or {}
        if feed_url:
            context["feed_url"] = feed_url

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.FEED_PARSE_ERROR),
            context=context,
            user_message=kwargs.pop("user_message", f"Feed processing failed: {message}"),
            recoverable=kwargs.pop("recoverable", False),
            **kwargs,
        )


class FeedFetchError(FeedError):
    """RSS feed fetching errors."""

    pass


class FetchStatusError(FeedFetchError):
    """The feed server answered with a status other than 200."""

    def __init__(self, status_code: int, feed_url: Optional[str] = None, **kwargs):
        self.status_code = status_code
        context = kwargs.pop("context", None) or {}
        context["status_code"] = status_code

        super().__init__(
            f"Failed to fetch feed: {status_code}",
            feed_url=feed_url,
            error_code=ErrorCode.FEED_HTTP_STATUS,
            context=context,
            recoverable=status_code >= 500,
            **kwargs,
        )


class FetchTimeoutError(FeedFetchError, TimeoutError):
    """The feed request did not complete within the configured timeout.

    Also a builtin TimeoutError, so generic ``except TimeoutError`` handlers
    see it.
    """

    def __init__(self, timeout: float, feed_url: Optional[str] = None, **kwargs):
        self.timeout = timeout
        super().__init__(
            f"Request timed out after {timeout:g} seconds",
            feed_url=feed_url,
            error_code=ErrorCode.FEED_FETCH_TIMEOUT,
            recoverable=True,
            **kwargs,
        )


class NetworkError(FeedFetchError):
    """Transport-level failure; the message is the underlying error's own."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            feed_url=feed_url,
            error_code=ErrorCode.FEED_NETWORK_ERROR,
            user_message=kwargs.pop("user_message", "Network connection failed"),
            recoverable=True,
            **kwargs,
        )


class InvalidFeedStructureError(FeedError):
    """The document is not an rss > channel > item tree."""

    def __init__(self, message: str = "Invalid RSS feed structure", **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.FEED_INVALID_STRUCTURE,
            **kwargs,
        )


class FeedParseError(FeedError):
    """Any failure while turning feed XML into changelog entries."""

    def __init__(self, original_message: str, **kwargs):
        self.original_message = original_message
        super().__init__(
            f"Failed to parse RSS feed: {original_message}",
            error_code=ErrorCode.FEED_PARSE_ERROR,
            **kwargs,
        )


class GuidStoreError(ChangelogIssuesError):
    """Reading or writing the last processed GUID marker failed."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or {}
        if path:
            context["path"] = path

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.STORE_WRITE_FAILED),
            context=context,
            user_message=kwargs.pop("user_message", "Could not update the changelog marker file"),
            **kwargs,
        )


class GitHubAPIError(ChangelogIssuesError):
    """GitHub REST API errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        **kwargs,
    ):
        """Initialize GitHub API error.

        Args:
            message: Error message
            status_code: HTTP status returned by the API, if any
            endpoint: API path that was called
            **kwargs: Additional arguments for ChangelogIssuesError
        """
        self.status_code = status_code
        context = kwargs.pop("context", None) or {}
        if status_code is not None:
            context["status_code"] = status_code
        if endpoint:
            context["endpoint"] = endpoint

        if status_code == 404:
            default_code = ErrorCode.GITHUB_NOT_FOUND
        elif status_code in (401, 403):
            default_code = ErrorCode.GITHUB_AUTHENTICATION
        else:
            default_code = ErrorCode.GITHUB_API_ERROR

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", default_code),
            context=context,
            user_message=kwargs.pop("user_message", "GitHub operation failed"),
            recoverable=kwargs.pop("recoverable", status_code is None or status_code >= 500),
            **kwargs,
        )


# Exception handling utilities


def handle_exception(
    exception: Exception,
    logger,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
) -> ChangelogIssuesError:
    """Convert generic exceptions to project exceptions with proper logging.

    Args:
        exception: Original exception
        logger: Logger instance for error logging
        operation: Operation that was being performed
        context: Additional context information

    Returns:
        ChangelogIssuesError with proper categorization
    """
    context = context or {}
    context["operation"] = operation
    context["original_exception_type"] = type(exception).__name__

    if isinstance(exception, ChangelogIssuesError):
        logger.error(f"Operation '{operation}' failed", extra=exception.to_dict())
        return exception

    elif isinstance(exception, (ConnectionError, TimeoutError)):
        error = ChangelogIssuesError(
            message=str(exception),
            error_code=ErrorCode.FEED_NETWORK_ERROR,
            context=context,
            user_message="Network connection failed",
            recoverable=True,
        )

    elif isinstance(exception, PermissionError):
        error = GuidStoreError(
            message=f"Permission denied during {operation}: {exception}",
            context=context,
            user_message="Access denied",
        )

    else:
        error = ChangelogIssuesError(
            message=f"Unexpected error during {operation}: {exception}",
            error_code=ErrorCode.UNEXPECTED,
            context=context,
            user_message="An unexpected error occurred",
        )

    logger.error(f"Operation '{operation}' failed", extra=error.to_dict())
    return error


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception.

    Args:
        exception: Exception to get message for

    Returns:
        User-friendly error message
    """
    if isinstance(exception, ChangelogIssuesError):
        return exception.user_message

    return "An unexpected error occurred. Please try again later."
