"""
Unit tests for CandidateMatcher.

Tests candidate fetching, tie-breaking and the matching rule order.
"""

from unittest.mock import MagicMock

import pytest

from src.core.config import ResolverConfig
from src.core.domain.entities import EpisodeRecord
from src.core.domain.value_objects import EpisodeType
from src.core.exceptions import ResolutionCancelledError
from src.core.utils.cancellation import CancellationToken
from src.services.resolution.candidate_matcher import (
    CandidateMatcher,
    MatchContext,
    find_by_order,
    max_order,
    sort_candidates,
)
from src.services.resolution.filename_classifier import FilenameClassifier
from src.services.resolution.rules import Rule, RuleRunner
from tests.fixtures.test_data import (
    CACHED_DRIFTED_EPISODE_ID,
    CACHED_EPISODE_ID,
    CACHED_SUBJECT_ID,
    DUPLICATE_SUBJECT_ID,
    SPECIALS_SUBJECT_ID,
    UNTYPED_SPECIAL_SUBJECT_ID,
    WHITE_ALBUM_2_SUBJECT_ID,
)


def _record(episode_id, order, episode_type=EpisodeType.NORMAL, subject_id=1):
    return EpisodeRecord(
        id=episode_id,
        parent_subject_id=subject_id,
        episode_type=episode_type,
        order=order,
        original_title=f'Episode {episode_id}',
    )


class TestRuleRunner:
    """Tests for the generic rule runner."""

    class _Always(Rule):
        name = 'always'

        def evaluate(self, state):
            return state

    class _Never(Rule):
        name = 'never'

        def evaluate(self, state):
            return None

    def test_first_decision_wins(self):
        runner = RuleRunner('test', [self._Never(), self._Always()])

        outcome = runner.run('value')

        assert outcome.value == 'value'
        assert outcome.rule_name == 'always'
        assert runner.rule_names == ['never', 'always']

    def test_all_inconclusive(self):
        assert RuleRunner('test', [self._Never()]).run('value') is None

    def test_zero_is_a_decision(self):
        """Test that a falsy but non-None value still decides."""
        assert RuleRunner('test', [self._Always()]).run(0).value == 0


class TestCandidateHelpers:
    """Tests for ordering helpers."""

    def test_sort_is_stable_by_type(self):
        special = _record(1, 1, EpisodeType.SPECIAL)
        normal_a = _record(2, 2)
        normal_b = _record(3, 1)

        assert sort_candidates([special, normal_a, normal_b]) == [normal_a, normal_b, special]

    def test_find_by_order_prefers_normal(self):
        special = _record(1, 1, EpisodeType.SPECIAL)
        normal = _record(2, 1)

        assert find_by_order([special, normal], 1) is normal

    def test_find_by_fractional_order(self):
        recap = _record(1, 12.5)

        assert find_by_order([_record(2, 12), recap], 12.5) is recap
        assert find_by_order([recap], 12) is None

    def test_max_order(self):
        assert max_order([_record(1, 3), _record(2, 11)]) == 11
        assert max_order([]) == 0


class TestCandidateMatcher:
    """Tests for candidate selection against the fake catalogue."""

    @pytest.fixture
    def matcher(self, fake_client):
        return CandidateMatcher(fake_client, FilenameClassifier())

    def test_exact_order_match(self, matcher):
        outcome = matcher.match(WHITE_ALBUM_2_SUBJECT_ID, 1)

        assert outcome.matched
        assert outcome.record.id == 283701
        assert outcome.rule_name == 'exact_order'
        assert outcome.max_order == 13

    def test_duplicate_order_prefers_normal(self, matcher):
        """Test that a Normal episode wins over a Special with the same order."""
        outcome = matcher.match(DUPLICATE_SUBJECT_ID, 1)

        assert outcome.record.id == 4001001
        assert outcome.record.episode_type is EpisodeType.NORMAL

    def test_zero_index_matches_first_episode(self, matcher):
        outcome = matcher.match(WHITE_ALBUM_2_SUBJECT_ID, 0)

        assert outcome.record.order == 1
        assert outcome.rule_name == 'zero_as_first'

    def test_alternate_index(self, matcher):
        outcome = matcher.match(WHITE_ALBUM_2_SUBJECT_ID, 48, alt_index=12)

        assert outcome.record.id == 283712
        assert outcome.rule_name == 'alternate_index'

    def test_no_match(self, matcher):
        outcome = matcher.match(WHITE_ALBUM_2_SUBJECT_ID, 99)

        assert not outcome.matched
        assert outcome.rule_name is None
        assert len(outcome.candidates) == 14

    def test_type_filter(self, matcher):
        """Test that the type hint restricts the candidate list."""
        outcome = matcher.match(SPECIALS_SUBJECT_ID, 1, type_hint=EpisodeType.SPECIAL)

        assert outcome.record.id == 6001901

    def test_special_hint_falls_back_to_all_types(self, matcher, fake_client):
        """Test the retry without type filter when no specials exist."""
        outcome = matcher.match(UNTYPED_SPECIAL_SUBJECT_ID, 13, type_hint=EpisodeType.SPECIAL)

        assert outcome.record.id == 7001013
        calls = fake_client.calls_to('list_episodes')
        assert [c[2] for c in calls] == [EpisodeType.SPECIAL, None]

    def test_no_fallback_for_other_types(self, matcher, fake_client):
        """Test that only the Special hint is retried."""
        outcome = matcher.match(UNTYPED_SPECIAL_SUBJECT_ID, 1, type_hint=EpisodeType.OPENING)

        assert not outcome.matched
        assert len(fake_client.calls_to('list_episodes')) == 1


class TestCachedEpisodeRules:
    """Tests for previously saved episode ids."""

    @pytest.fixture
    def matcher(self, fake_client):
        return CandidateMatcher(fake_client, FilenameClassifier())

    def test_cached_episode_within_tolerance(self, matcher):
        outcome = matcher.match(CACHED_SUBJECT_ID, 5, cached_episode_id=CACHED_EPISODE_ID)

        assert outcome.record.id == CACHED_EPISODE_ID
        assert outcome.rule_name == 'cached_episode'

    def test_cached_episode_drifted(self, matcher):
        """Test that a cached episode with a different order is ignored."""
        outcome = matcher.match(CACHED_SUBJECT_ID, 5, cached_episode_id=CACHED_DRIFTED_EPISODE_ID)

        assert not outcome.matched

    def test_cached_episode_other_subject(self, matcher):
        """Test that a cached episode of another subject is ignored."""
        outcome = matcher.match(WHITE_ALBUM_2_SUBJECT_ID, 5.05, cached_episode_id=CACHED_EPISODE_ID)

        assert not outcome.matched

    def test_cached_episode_special_path(self, matcher):
        """Test that special-marked files accept the cached episode as-is."""
        outcome = matcher.match(
            CACHED_SUBJECT_ID,
            5,
            cached_episode_id=CACHED_DRIFTED_EPISODE_ID,
            path='/anime/Cached/Cached NCOP.mkv'
        )

        assert outcome.record.id == CACHED_DRIFTED_EPISODE_ID

    def test_exact_match_wins_over_cached(self, matcher, fake_client):
        """Test that the cached id is only consulted as a fallback."""
        outcome = matcher.match(CACHED_SUBJECT_ID, 2, cached_episode_id=CACHED_DRIFTED_EPISODE_ID)

        assert outcome.record.id == 5001002
        assert fake_client.calls_to('get_episode') == []

    def test_trusted_cached_episode(self, matcher):
        """Test that a trusted cached id skips all validation."""
        options = ResolverConfig(trust_existing_remote_id=True)

        outcome = matcher.match(
            CACHED_SUBJECT_ID, 2, cached_episode_id=CACHED_DRIFTED_EPISODE_ID, options=options
        )

        assert outcome.record.id == CACHED_DRIFTED_EPISODE_ID
        assert outcome.rule_name == 'trusted_cached_episode'

    def test_cached_episode_fetched_once(self, fake_client):
        """Test that both cached rules share one fetch."""
        context = MatchContext(
            subject_id=CACHED_SUBJECT_ID,
            index=5,
            candidates=[],
            cached_episode_id=CACHED_DRIFTED_EPISODE_ID,
            options=ResolverConfig(trust_existing_remote_id=True),
        )
        client = MagicMock(wraps=fake_client)

        context.load_cached_episode(client)
        context.load_cached_episode(client)

        assert client.get_episode.call_count == 1


class TestCancellation:
    """Tests for cancellation during matching."""

    def test_cancelled_select_raises(self, fake_client):
        matcher = CandidateMatcher(fake_client, FilenameClassifier())
        token = CancellationToken()
        token.cancel('stopped')
        context = MatchContext(subject_id=1, index=1, candidates=[], token=token)

        with pytest.raises(ResolutionCancelledError):
            matcher.select(context)

    def test_cancelled_match_raises_before_fetch(self, fake_client):
        matcher = CandidateMatcher(fake_client, FilenameClassifier())
        token = CancellationToken()
        token.cancel()

        with pytest.raises(ResolutionCancelledError):
            matcher.match(WHITE_ALBUM_2_SUBJECT_ID, 1, token=token)
        assert fake_client.calls == []
