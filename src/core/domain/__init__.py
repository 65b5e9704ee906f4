"""
Domain layer module.

Contains value objects and entities that represent the core business concepts.
"""

from src.core.domain.entities import (
    EpisodeMetadata,
    EpisodeQuery,
    EpisodeRecord,
    RelatedSubject,
    Subject,
)
from src.core.domain.value_objects import (
    ClassificationResult,
    EpisodeType,
    LocalOverride,
    NamingTokens,
    SeasonCursor,
)

__all__ = [
    # Value Objects - Enums
    'EpisodeType',
    # Value Objects - Data Classes
    'ClassificationResult',
    'LocalOverride',
    'NamingTokens',
    'SeasonCursor',
    # Entities
    'EpisodeRecord',
    'Subject',
    'RelatedSubject',
    'EpisodeQuery',
    'EpisodeMetadata',
]
