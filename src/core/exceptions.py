"""
Exceptions module.

Contains the exception hierarchy for the episode resolver.
All custom exceptions inherit from ResolverError for consistent handling.
"""

from typing import Any, Dict, Optional


class ResolverError(Exception):
    """
    Base exception for all resolver errors.

    All custom exceptions in the application should inherit from this class
    to enable consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
        context: Additional context information for debugging.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or 'UNKNOWN_ERROR'
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.context:
            return f'[{self.code}] {self.message} - Context: {self.context}'
        return f'[{self.code}] {self.message}'


# Metadata service exceptions

class MetadataServiceError(ResolverError):
    """
    Exception raised when the remote metadata service fails.

    Network errors, timeouts and server-side failures are transient; the
    caller may retry the whole resolution later.

    Attributes:
        status_code: HTTP status code, if a response was received.
        url: The requested URL.
        retryable: Whether retrying the call may succeed.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        retryable: bool = True,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if status_code is not None:
            ctx['status_code'] = status_code
        if url:
            ctx['url'] = url
        super().__init__(message, 'METADATA_SERVICE_ERROR', ctx)
        self.status_code = status_code
        self.url = url
        self.retryable = retryable


# Resolution exceptions

class ResolutionCancelledError(ResolverError):
    """
    Exception raised when a resolution is cancelled by the caller.

    A cancelled resolution is not a confirmed absence of metadata and must
    never be reported as "no match".
    """

    def __init__(
        self,
        message: str = 'Episode resolution was cancelled',
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, 'RESOLUTION_CANCELLED', context)


# Parse exceptions

class ParseError(ResolverError):
    """Base exception for parsing errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'PARSE_ERROR', context)


class MalformedEpisodeError(ParseError):
    """
    Exception raised when a catalogue episode entry cannot be parsed.

    Attributes:
        raw: The raw entry that failed to parse.
    """

    def __init__(
        self,
        message: str,
        raw: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if raw:
            ctx['episode_id'] = raw.get('id')
            ctx['sort'] = raw.get('sort')
        super().__init__(message, 'MALFORMED_EPISODE', ctx)
        self.raw = raw


class OverrideParseError(ParseError):
    """
    Exception raised when a directory override file holds an invalid value.

    Attributes:
        file_path: Path of the override file.
        key: The offending key.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if file_path:
            ctx['file_path'] = file_path
        if key:
            ctx['key'] = key
        super().__init__(message, 'OVERRIDE_PARSE_ERROR', ctx)
        self.file_path = file_path
        self.key = key


# Configuration exceptions

class ConfigError(ResolverError):
    """Base exception for configuration errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'CONFIG_ERROR', context)


class ConfigValidationError(ConfigError):
    """
    Exception raised when configuration validation fails.

    Attributes:
        field_name: Name of the field that failed validation.
        field_value: The invalid value.
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if field_name:
            ctx['field_name'] = field_name
        if field_value is not None:
            ctx['field_value'] = str(field_value)
        super().__init__(message, 'CONFIG_VALIDATION_ERROR', ctx)
        self.field_name = field_name
        self.field_value = field_value
