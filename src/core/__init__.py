"""
Core layer module.

Contains domain models, interfaces, and exception definitions.
"""

from src.core.exceptions import (
    ConfigError,
    ConfigValidationError,
    MalformedEpisodeError,
    MetadataServiceError,
    OverrideParseError,
    ParseError,
    ResolutionCancelledError,
    ResolverError,
)

__all__ = [
    # Exceptions
    'ResolverError',
    'MetadataServiceError',
    'ResolutionCancelledError',
    'ParseError',
    'MalformedEpisodeError',
    'OverrideParseError',
    'ConfigError',
    'ConfigValidationError',
]
