"""
Episode resolver module.

Runs the resolution pipeline for one media file: classification, index
extraction, override application, candidate matching, season continuity
and title synthesis.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from src.core.config import ResolverConfig
from src.core.domain.entities import EpisodeQuery, EpisodeRecord
from src.core.domain.value_objects import ClassificationResult, LocalOverride, NamingTokens
from src.core.interfaces import INamingTokenizer
from src.core.utils.cancellation import CancellationToken, ensure_token
from src.services.resolution.candidate_matcher import CandidateMatcher, MatchContext, max_order
from src.services.resolution.filename_classifier import FilenameClassifier
from src.services.resolution.index_extractor import IndexExtractor
from src.services.resolution.override_resolver import OverrideResolver
from src.services.resolution.season_continuity import SeasonContinuityResolver
from src.services.resolution.title_synthesizer import TitleSynthesizer

logger = logging.getLogger(__name__)

SEASON_CONTINUITY_RULE = 'season_continuity'


@dataclass(frozen=True)
class EpisodeResolution:
    """
    Outcome of resolving one media file.

    Attributes:
        record: Matched record, or a synthesized one (id 0).
        subject_id: Subject that was searched.
        display_index: Index in local numbering (offset re-applied).
        classification: Filename classification.
        tokens: Naming tokens.
        override: Directory override that was applied.
        matched_by: Name of the rule that matched, None when synthesized.
    """
    record: EpisodeRecord
    subject_id: int
    display_index: float
    classification: ClassificationResult
    tokens: NamingTokens
    override: LocalOverride
    matched_by: Optional[str] = None

    @property
    def is_remote_backed(self) -> bool:
        """Check if the record comes from the catalogue."""
        return not self.record.is_synthesized


class EpisodeResolver:
    """
    Episode resolution pipeline.

    Each call is independent; the only per-call state is the season cursor
    held inside the continuity walk. Options default to the configured
    ResolverConfig and can be overridden per call.
    """

    def __init__(
        self,
        classifier: FilenameClassifier,
        extractor: IndexExtractor,
        override_resolver: OverrideResolver,
        matcher: CandidateMatcher,
        continuity: SeasonContinuityResolver,
        synthesizer: TitleSynthesizer,
        tokenizer: INamingTokenizer,
        options: Optional[ResolverConfig] = None
    ):
        """
        Initialize the resolver.

        Args:
            classifier: Filename classifier.
            extractor: Index extractor.
            override_resolver: Directory override resolver.
            matcher: Remote candidate matcher.
            continuity: Season continuity resolver.
            synthesizer: Title synthesizer.
            tokenizer: Release-name tokenizer.
            options: Default resolver options.
        """
        self._classifier = classifier
        self._extractor = extractor
        self._overrides = override_resolver
        self._matcher = matcher
        self._continuity = continuity
        self._synthesizer = synthesizer
        self._tokenizer = tokenizer
        self._options = options or ResolverConfig()

    def resolve(
        self,
        query: EpisodeQuery,
        options: Optional[ResolverConfig] = None,
        token: Optional[CancellationToken] = None
    ) -> Optional[EpisodeResolution]:
        """
        Resolve the catalogue episode for a media file.

        Args:
            query: Host episode query.
            options: Per-call options, defaults to the configured ones.
            token: Cancellation token.

        Returns:
            EpisodeResolution, or None when no subject id is known.

        Raises:
            MetadataServiceError: If the metadata service is unavailable.
            ResolutionCancelledError: If the token was cancelled.
        """
        options = options or self._options
        token = ensure_token(token)
        token.raise_if_cancelled()

        filename = os.path.basename(query.path)
        if not filename:
            return None
        directory = os.path.dirname(query.path)

        classification = self._classifier.classify(filename, os.path.basename(directory))
        override = self._overrides.resolve(directory)
        subject_id = self._overrides.resolve_subject_id(
            override,
            season_subject_id=query.season_subject_id,
            series_subject_id=query.series_subject_id
        )
        if not subject_id:
            logger.warning(f'⚠️ 无法确定 {filename} 对应的条目 ID')
            return None

        tokens = self._tokenizer.tokenize(filename)
        alt_index = tokens.episode_alt_number

        index = query.index_number
        if options.always_replace_episode_number:
            logger.info(f'🔢 根据配置从文件名 {filename} 获取集数')
            index = self._extractor.guess(filename, index, options=options, tokens=tokens)
        elif not index:
            logger.info(f'🔢 集数为空，从文件名 {filename} 获取集数')
            index = self._extractor.guess(filename, index, options=options, tokens=tokens)

        remote_index = self._overrides.to_remote_index(index, override, classification.episode_type)
        applied_offset = index - remote_index

        logger.info(f'🔍 在条目 {subject_id} 中搜索集数 {remote_index}')
        candidates = self._matcher.fetch_candidates(
            subject_id, classification.episode_type, remote_index, token,
            timeout=options.request_timeout
        )

        if classification.is_normal_or_unknown and candidates:
            remote_index = self._extractor.guess(
                filename,
                remote_index + applied_offset,
                max_order(candidates) + applied_offset,
                options=options,
                tokens=tokens
            ) - applied_offset

        outcome = self._matcher.select(MatchContext(
            subject_id=subject_id,
            index=remote_index,
            candidates=candidates,
            path=query.path,
            alt_index=alt_index,
            cached_episode_id=query.episode_id,
            options=options,
            token=token,
        ))
        record, matched_by = outcome.record, outcome.rule_name

        if record is None and classification.is_normal_or_unknown:
            record = self._continuity.resolve(
                subject_id,
                remote_index,
                alt_index,
                token=token,
                max_hops=options.max_season_hops,
                timeout=options.request_timeout
            )
            if record is not None:
                matched_by = SEASON_CONTINUITY_RULE

        token.raise_if_cancelled()

        if record is None:
            # Placeholders are never Normal, so they keep the local number
            record = self._synthesizer.placeholder(
                subject_id, remote_index + applied_offset, classification, tokens
            )
        else:
            record = self._synthesizer.fill_title(record, classification, tokens)

        display_index = self._overrides.to_display_index(record.order, override, record.episode_type)
        logger.info(f'🎬 {filename}: {record} (集数 {display_index}, 规则: {matched_by or "synthesized"})')

        return EpisodeResolution(
            record=record,
            subject_id=subject_id,
            display_index=display_index,
            classification=classification,
            tokens=tokens,
            override=override,
            matched_by=matched_by,
        )
