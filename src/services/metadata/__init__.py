"""
Metadata services module.

Contains the service producing host-facing episode metadata.
"""

from src.services.metadata.metadata_service import EpisodeMetadataService

__all__ = [
    'EpisodeMetadataService',
]
