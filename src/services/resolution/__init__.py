"""
Resolution services module.

Contains the components of the episode resolution pipeline.
"""

from src.services.resolution.candidate_matcher import (
    CandidateMatcher,
    MatchContext,
    MatchOutcome,
    find_by_order,
)
from src.services.resolution.episode_resolver import EpisodeResolution, EpisodeResolver
from src.services.resolution.filename_classifier import FilenameClassifier
from src.services.resolution.index_extractor import IndexExtractor
from src.services.resolution.override_resolver import OverrideResolver
from src.services.resolution.rules import Rule, RuleOutcome, RuleRunner
from src.services.resolution.season_continuity import SeasonContinuityResolver
from src.services.resolution.title_synthesizer import TitleSynthesizer

__all__ = [
    'CandidateMatcher',
    'EpisodeResolution',
    'EpisodeResolver',
    'FilenameClassifier',
    'IndexExtractor',
    'MatchContext',
    'MatchOutcome',
    'OverrideResolver',
    'Rule',
    'RuleOutcome',
    'RuleRunner',
    'SeasonContinuityResolver',
    'TitleSynthesizer',
    'find_by_order',
]
