"""
Season continuity module.

Handles local collections numbered contiguously across several remote
season subjects, e.g. local files 1-50 against two remote seasons that
both start at episode 1.
"""

import logging
from typing import List, Optional, Sequence, Set

from src.core.domain.entities import EpisodeRecord
from src.core.domain.value_objects import EpisodeType, SeasonCursor
from src.core.interfaces import IMetadataClient
from src.core.utils.cancellation import CancellationToken, ensure_token
from src.services.resolution.candidate_matcher import find_by_order, max_order

logger = logging.getLogger(__name__)


class SeasonContinuityResolver:
    """
    Season continuity resolver service.

    Walks forward along sequel relations, one season per hop, until the
    season holding the requested absolute index is found. Seasons whose
    numbering restarts at 1 are shifted onto the absolute axis in memory;
    records are copied, never modified.
    """

    DEFAULT_MAX_HOPS = 10

    def __init__(self, client: IMetadataClient, max_hops: int = DEFAULT_MAX_HOPS):
        """
        Initialize the resolver.

        Args:
            client: Metadata service client.
            max_hops: Maximum number of sequel seasons to visit.
        """
        self._client = client
        self._max_hops = max_hops

    @staticmethod
    def should_attempt(
        index: float,
        alt_index: Optional[float],
        season_max_order: float
    ) -> bool:
        """
        Check if the walk applies.

        Every available index must lie beyond the current season; otherwise
        the direct match missed for some other reason.

        Args:
            index: Requested index.
            alt_index: Alternate index, if any.
            season_max_order: Highest order of the current season.

        Returns:
            True if the continuity walk should run.
        """
        indices = [index] if alt_index is None else [index, alt_index]
        return all(i > season_max_order for i in indices)

    def resolve(
        self,
        subject_id: int,
        index: float,
        alt_index: Optional[float] = None,
        token: Optional[CancellationToken] = None,
        max_hops: Optional[int] = None,
        timeout: Optional[float] = None
    ) -> Optional[EpisodeRecord]:
        """
        Resolve an absolute index across sequel seasons.

        Args:
            subject_id: Subject of the first (current) season.
            index: Requested absolute index.
            alt_index: Alternate index, if any.
            token: Cancellation token, checked on every hop.
            max_hops: Overrides the configured hop limit.
            timeout: Request timeout in seconds.

        Returns:
            A copy of the matched record with its order set to the requested
            index (or alternate), or None.
        """
        token = ensure_token(token)
        token.raise_if_cancelled()
        max_hops = max_hops or self._max_hops

        current = self._client.list_episodes(subject_id, EpisodeType.NORMAL, index, token, timeout)
        if not current:
            return None

        season_max = max_order(current)
        if not self.should_attempt(index, alt_index, season_max):
            logger.debug(f'集数 {index} 未超出当前季度范围 {season_max}，跳过多季度匹配')
            return None

        cursor = SeasonCursor(subject_id=subject_id, cumulative_base=season_max)
        visited: Set[int] = {subject_id}
        indices = [index] if alt_index is None else [index, alt_index]

        for hop in range(1, max_hops + 1):
            token.raise_if_cancelled()

            sequel_id = self._find_sequel(cursor.subject_id, token, timeout)
            if sequel_id is None:
                logger.info(f'❓ 条目 {cursor.subject_id} 没有续集，多季度匹配失败')
                return None
            if sequel_id in visited:
                logger.warning(f'⚠️ 续集关系出现循环: {cursor.subject_id} -> {sequel_id}')
                return None
            visited.add(sequel_id)

            candidates = self._client.list_episodes(
                sequel_id, EpisodeType.NORMAL, index, token, timeout
            )
            if not candidates:
                logger.info(f'❓ 续集 {sequel_id} 没有正片剧集，多季度匹配失败')
                return None

            first_order = self._first_order(sequel_id, candidates, token, timeout)
            if first_order == 1:
                candidates = [c.with_order(c.order + cursor.cumulative_base) for c in candidates]
                first_order += cursor.cumulative_base

            cursor = SeasonCursor(
                subject_id=sequel_id,
                cumulative_base=cursor.cumulative_base + max_order(candidates) - first_order + 1,
                last_season_max_order=cursor.cumulative_base,
            )
            logger.info(
                f'➡️ 第 {hop} 个续集 {sequel_id}: '
                f'累计集数 {cursor.last_season_max_order} -> {cursor.cumulative_base}'
            )

            if any(i > cursor.cumulative_base for i in indices):
                continue

            return self._match_in_season(candidates, cursor, index, alt_index)

        logger.warning(f'⚠️ 续集数量超过上限 {max_hops}，多季度匹配失败')
        return None

    def _find_sequel(
        self,
        subject_id: int,
        token: CancellationToken,
        timeout: Optional[float]
    ) -> Optional[int]:
        relations = self._client.get_related_subjects(subject_id, token, timeout)
        if not relations:
            return None
        for relation in relations:
            if relation.is_sequel:
                logger.info(f'➡️ 使用续集 {relation.id} ({relation.name})')
                return relation.id
        return None

    def _first_order(
        self,
        subject_id: int,
        candidates: Sequence[EpisodeRecord],
        token: CancellationToken,
        timeout: Optional[float]
    ) -> float:
        # The hinted page may not hold the season's first episode
        first_page = self._client.list_episodes(subject_id, EpisodeType.NORMAL, 0, token, timeout)
        source = first_page or candidates
        return min(c.order for c in source)

    @staticmethod
    def _match_in_season(
        candidates: List[EpisodeRecord],
        cursor: SeasonCursor,
        index: float,
        alt_index: Optional[float]
    ) -> Optional[EpisodeRecord]:
        attempts = [(index, index), (index, index - cursor.last_season_max_order)]
        if alt_index is not None:
            attempts += [(alt_index, alt_index), (alt_index, alt_index - cursor.last_season_max_order)]

        for requested, order in attempts:
            episode = find_by_order(candidates, order)
            if episode is not None:
                logger.info(f'✅ 多季度匹配: 条目 {cursor.subject_id} 的 {episode} 对应集数 {requested}')
                return episode.with_order(requested)
        return None
