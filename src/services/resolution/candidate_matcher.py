"""
Candidate matcher module.

Fetches the remote episode list for a subject and selects the episode that
matches the requested index, falling back through a fixed list of rules.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from src.core.config import ResolverConfig
from src.core.domain.entities import EpisodeRecord
from src.core.domain.value_objects import EpisodeType
from src.core.interfaces import IMetadataClient
from src.core.utils.cancellation import CancellationToken, ensure_token
from src.services.resolution.filename_classifier import FilenameClassifier
from src.services.resolution.rules import Rule, RuleRunner

logger = logging.getLogger(__name__)

# Orders are fractional; equality is tested within this epsilon
ORDER_EPSILON = 1e-9
# Allowed drift between a cached episode's order and the requested index
CACHED_ORDER_TOLERANCE = 0.1


def sort_candidates(candidates: Sequence[EpisodeRecord]) -> List[EpisodeRecord]:
    """Stable sort by episode type priority (Normal first)."""
    return sorted(candidates, key=lambda c: int(c.episode_type))


def find_by_order(
    candidates: Sequence[EpisodeRecord],
    order: float
) -> Optional[EpisodeRecord]:
    """
    Find the first candidate with the given order.

    Candidates sharing an order are tie-broken by type, Normal first.

    Args:
        candidates: Candidate episodes in any order.
        order: Order to look for.

    Returns:
        The matching candidate, or None.
    """
    for candidate in sort_candidates(candidates):
        if abs(candidate.order - order) < ORDER_EPSILON:
            return candidate
    return None


def max_order(candidates: Sequence[EpisodeRecord]) -> float:
    """Return the highest order among candidates, 0 when empty."""
    return max((c.order for c in candidates), default=0.0)


@dataclass
class MatchContext:
    """
    State shared by the matching rules.

    Attributes:
        subject_id: Subject the candidates belong to.
        index: Requested index in remote numbering.
        candidates: Candidate list fetched for the subject.
        path: Full path of the media file.
        alt_index: Alternate index from a secondary numbering scheme.
        cached_episode_id: Previously saved remote episode id.
        options: Resolver options.
        token: Cancellation token.
    """
    subject_id: int
    index: float
    candidates: List[EpisodeRecord]
    path: str = ''
    alt_index: Optional[float] = None
    cached_episode_id: Optional[int] = None
    options: ResolverConfig = field(default_factory=ResolverConfig)
    token: CancellationToken = field(default_factory=CancellationToken)
    _cached_episode: Optional[EpisodeRecord] = field(default=None, init=False, repr=False)
    _cached_loaded: bool = field(default=False, init=False, repr=False)

    def load_cached_episode(self, client: IMetadataClient) -> Optional[EpisodeRecord]:
        """Fetch the cached episode once per context."""
        if not self.cached_episode_id:
            return None
        if not self._cached_loaded:
            logger.info(f'🔖 使用已保存的剧集 ID 获取信息: {self.cached_episode_id}')
            self._cached_episode = client.get_episode(
                self.cached_episode_id, self.token, timeout=self.options.request_timeout
            )
            self._cached_loaded = True
        return self._cached_episode


@dataclass(frozen=True)
class MatchOutcome:
    """
    Result of a matching attempt.

    Attributes:
        record: The matched episode, or None.
        rule_name: Name of the rule that matched.
        candidates: Candidate list the match was made against.
    """
    record: Optional[EpisodeRecord]
    rule_name: Optional[str] = None
    candidates: Sequence[EpisodeRecord] = ()

    @property
    def matched(self) -> bool:
        """Check if a record was matched."""
        return self.record is not None

    @property
    def max_order(self) -> float:
        """Return the highest candidate order."""
        return max_order(self.candidates)


class TrustedCachedEpisodeRule(Rule[MatchContext]):
    """Accept the cached episode without validation when it is trusted."""

    name = 'trusted_cached_episode'

    def __init__(self, client: IMetadataClient):
        self._client = client

    def evaluate(self, state: MatchContext) -> Optional[EpisodeRecord]:
        if not state.options.trust_existing_remote_id:
            return None
        episode = state.load_cached_episode(self._client)
        if episode is not None:
            logger.info('🔖 已启用信任已保存的剧集 ID，跳过后续校验')
        return episode


class ExactOrderRule(Rule[MatchContext]):
    """Match the candidate whose order equals the index."""

    name = 'exact_order'

    def evaluate(self, state: MatchContext) -> Optional[EpisodeRecord]:
        return find_by_order(state.candidates, state.index)


class FirstEpisodeRule(Rule[MatchContext]):
    """Treat index 0 as unset and match the first episode."""

    name = 'zero_as_first'

    def evaluate(self, state: MatchContext) -> Optional[EpisodeRecord]:
        if state.index == 0 and state.candidates:
            return find_by_order(state.candidates, 1.0)
        return None


class AlternateIndexRule(Rule[MatchContext]):
    """Match against the alternate index, e.g. ``12 (48)``."""

    name = 'alternate_index'

    def evaluate(self, state: MatchContext) -> Optional[EpisodeRecord]:
        if state.alt_index is None:
            return None
        return find_by_order(state.candidates, state.alt_index)


class CachedEpisodeRule(Rule[MatchContext]):
    """
    Accept the cached episode when it still fits the request.

    Non-Normal cached episodes, and files carrying a special marker, are
    accepted without numeric validation.
    """

    name = 'cached_episode'

    def __init__(self, client: IMetadataClient, classifier: FilenameClassifier):
        self._client = client
        self._classifier = classifier

    def evaluate(self, state: MatchContext) -> Optional[EpisodeRecord]:
        episode = state.load_cached_episode(self._client)
        if episode is None:
            return None

        if not episode.episode_type.is_normal or self._classifier.matches_any_special(state.path):
            logger.info('🔖 当前剧集为特殊剧集，跳过后续校验')
            return episode

        if (episode.parent_subject_id == state.subject_id
                and abs(episode.order - state.index) < CACHED_ORDER_TOLERANCE):
            return episode

        logger.info(f'⚠️ 已保存的剧集不属于条目 {state.subject_id} 或集数不一致，忽略')
        return None


class CandidateMatcher:
    """
    Candidate matcher service.

    Rules are evaluated in this order: trusted cached id (only when enabled),
    exact order, zero as first episode, alternate index, validated cached id.
    """

    def __init__(self, client: IMetadataClient, classifier: FilenameClassifier):
        """
        Initialize the matcher.

        Args:
            client: Metadata service client.
            classifier: Classifier used to detect special-marked paths.
        """
        self._client = client
        self._runner: RuleRunner[MatchContext] = RuleRunner('match', [
            TrustedCachedEpisodeRule(client),
            ExactOrderRule(),
            FirstEpisodeRule(),
            AlternateIndexRule(),
            CachedEpisodeRule(client, classifier),
        ])

    def fetch_candidates(
        self,
        subject_id: int,
        type_hint: Optional[EpisodeType],
        index_hint: float,
        token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> List[EpisodeRecord]:
        """
        Fetch the candidate list for a subject.

        A Special hint that yields nothing is retried once without a type
        filter, since the catalogue sometimes files specials as untyped.

        Args:
            subject_id: Subject to search.
            type_hint: Episode type filter.
            index_hint: Requested index.
            token: Cancellation token.
            timeout: Request timeout in seconds.

        Returns:
            Candidate episodes (possibly empty).
        """
        token = ensure_token(token)
        candidates = self._client.list_episodes(subject_id, type_hint, index_hint, token, timeout)
        if not candidates and type_hint is EpisodeType.SPECIAL:
            logger.info(f'🔁 条目 {subject_id} 没有特别篇，改为搜索所有类型')
            candidates = self._client.list_episodes(subject_id, None, index_hint, token, timeout)
        return candidates

    def select(self, context: MatchContext) -> MatchOutcome:
        """
        Select the matching candidate.

        Args:
            context: Matching state.

        Returns:
            MatchOutcome; ``record`` is None when every rule was inconclusive.
        """
        context.token.raise_if_cancelled()
        outcome = self._runner.run(context)
        if outcome is None:
            logger.info(f'❓ 条目 {context.subject_id} 中未找到集数 {context.index}')
            return MatchOutcome(record=None, candidates=context.candidates)

        logger.info(
            f'✅ 匹配到剧集 {outcome.value} '
            f'(集数 {context.index}, 规则: {outcome.rule_name})'
        )
        return MatchOutcome(
            record=outcome.value,
            rule_name=outcome.rule_name,
            candidates=context.candidates
        )

    def match(
        self,
        subject_id: int,
        index: float,
        type_hint: Optional[EpisodeType] = None,
        alt_index: Optional[float] = None,
        cached_episode_id: Optional[int] = None,
        path: str = '',
        options: Optional[ResolverConfig] = None,
        token: Optional[CancellationToken] = None
    ) -> MatchOutcome:
        """
        Fetch candidates and select the matching one.

        Args:
            subject_id: Subject to search.
            index: Requested index in remote numbering.
            type_hint: Episode type filter.
            alt_index: Alternate index.
            cached_episode_id: Previously saved remote episode id.
            path: Full path of the media file.
            options: Resolver options.
            token: Cancellation token.

        Returns:
            MatchOutcome.
        """
        token = ensure_token(token)
        candidates = self.fetch_candidates(subject_id, type_hint, index, token)
        return self.select(MatchContext(
            subject_id=subject_id,
            index=index,
            candidates=candidates,
            path=path,
            alt_index=alt_index,
            cached_episode_id=cached_episode_id,
            options=options or ResolverConfig(),
            token=token,
        ))
