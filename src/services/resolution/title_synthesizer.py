"""
Title synthesizer module.

Builds best-effort titles for episodes the catalogue has no title for.
"""

import logging
from typing import Optional

from src.core.domain.entities import EpisodeRecord
from src.core.domain.value_objects import ClassificationResult, EpisodeType, NamingTokens

logger = logging.getLogger(__name__)


class TitleSynthesizer:
    """
    Title synthesizer service.

    Joins title, episode title, type token, season, volume, episode and
    alternate episode tokens, e.g. ``Girls und Panzer SP V03 E02``.
    """

    def synthesize(
        self,
        tokens: NamingTokens,
        type_token: Optional[str] = None
    ) -> str:
        """
        Build a title from naming tokens.

        Args:
            tokens: Naming tokens extracted from the filename.
            type_token: Raw type marker (e.g. 'NCOP', 'OVA').

        Returns:
            Non-empty parts joined by single spaces (may be empty).
        """
        parts = [
            _clean(tokens.anime_title),
            _clean(tokens.episode_title),
            _clean(type_token),
            _prefixed('S', tokens.season),
            _prefixed('V', tokens.volume),
            _prefixed('E', tokens.episode),
            f'({_clean(tokens.episode_alt)})' if _clean(tokens.episode_alt) else '',
        ]
        return ' '.join(part for part in parts if part)

    def fill_title(
        self,
        record: EpisodeRecord,
        classification: ClassificationResult,
        tokens: NamingTokens
    ) -> EpisodeRecord:
        """
        Give an untitled record a synthesized title.

        Args:
            record: Matched record.
            classification: Filename classification.
            tokens: Naming tokens.

        Returns:
            The record unchanged if it has a title, otherwise a titled copy.
        """
        if record.has_title:
            return record
        title = self.synthesize(tokens, _type_token(classification, tokens))
        logger.info(f'📝 剧集 {record.id} 没有标题，使用生成的标题: {title}')
        return record.with_title(title)

    def placeholder(
        self,
        subject_id: int,
        order: float,
        classification: ClassificationResult,
        tokens: NamingTokens
    ) -> EpisodeRecord:
        """
        Build a synthesized record for a file with no remote match.

        Args:
            subject_id: Subject that was searched.
            order: Requested index in local numbering.
            classification: Filename classification.
            tokens: Naming tokens.

        Returns:
            EpisodeRecord with id 0, typed as classified (Special by default).
        """
        title = self.synthesize(tokens, _type_token(classification, tokens))
        logger.info(f'📝 未找到匹配的剧集，生成特典条目: {title}')
        return EpisodeRecord(
            id=0,
            parent_subject_id=subject_id,
            episode_type=classification.episode_type or EpisodeType.SPECIAL,
            order=order,
            original_title=title,
        )


def _type_token(classification: ClassificationResult, tokens: NamingTokens) -> Optional[str]:
    return classification.raw_token or tokens.type_token


def _clean(value: Optional[str]) -> str:
    return value.strip() if value else ''


def _prefixed(prefix: str, value: Optional[str]) -> str:
    cleaned = _clean(value)
    return f'{prefix}{cleaned}' if cleaned else ''
