"""
Services layer module.

Contains business logic services that orchestrate domain operations.
Services coordinate between adapters and domain entities.

Directory structure:
- resolution/  : Episode resolution pipeline and its components
- metadata/    : Host-facing episode metadata
"""

# Metadata services
from src.services.metadata.metadata_service import EpisodeMetadataService

# Resolution services
from src.services.resolution.candidate_matcher import CandidateMatcher
from src.services.resolution.episode_resolver import EpisodeResolution, EpisodeResolver
from src.services.resolution.filename_classifier import FilenameClassifier
from src.services.resolution.index_extractor import IndexExtractor
from src.services.resolution.override_resolver import OverrideResolver
from src.services.resolution.season_continuity import SeasonContinuityResolver
from src.services.resolution.title_synthesizer import TitleSynthesizer

__all__ = [
    # Metadata services
    'EpisodeMetadataService',
    # Resolution services
    'CandidateMatcher',
    'EpisodeResolution',
    'EpisodeResolver',
    'FilenameClassifier',
    'IndexExtractor',
    'OverrideResolver',
    'SeasonContinuityResolver',
    'TitleSynthesizer',
]
