"""
Unit tests for TitleSynthesizer.
"""

import pytest

from src.core.domain.entities import EpisodeRecord
from src.core.domain.value_objects import ClassificationResult, EpisodeType, NamingTokens
from src.services.resolution.title_synthesizer import TitleSynthesizer


class TestTitleSynthesizer:
    """Tests for synthesized titles."""

    @pytest.fixture
    def synthesizer(self):
        return TitleSynthesizer()

    def test_full_title(self, synthesizer):
        tokens = NamingTokens(
            anime_title='Girls und Panzer',
            season='1',
            volume='03',
            episode='02',
            episode_alt='14',
        )

        title = synthesizer.synthesize(tokens, 'SP')

        assert title == 'Girls und Panzer SP S1 V03 E02 (14)'

    def test_episode_title_follows_anime_title(self, synthesizer):
        tokens = NamingTokens(anime_title='Show', episode_title='Beach Day', episode='05')

        assert synthesizer.synthesize(tokens) == 'Show Beach Day E05'

    def test_empty_tokens_are_skipped(self, synthesizer):
        tokens = NamingTokens(anime_title='  Show ', episode_title='', episode='  ')

        assert synthesizer.synthesize(tokens) == 'Show'

    def test_nothing_known(self, synthesizer):
        assert synthesizer.synthesize(NamingTokens()) == ''

    def test_fill_title_keeps_existing(self, synthesizer):
        record = EpisodeRecord(1, 1, EpisodeType.SPECIAL, 1, original_title='Special Lecture')

        result = synthesizer.fill_title(
            record, ClassificationResult(EpisodeType.SPECIAL, 'SP'), NamingTokens(anime_title='X')
        )

        assert result is record

    def test_fill_title_keeps_localized_only(self, synthesizer):
        record = EpisodeRecord(1, 1, EpisodeType.NORMAL, 1, localized_title='特别篇')

        assert synthesizer.fill_title(record, ClassificationResult(), NamingTokens()) is record

    def test_fill_title_for_untitled_record(self, synthesizer):
        record = EpisodeRecord(6001902, 6001, EpisodeType.SPECIAL, 2)
        tokens = NamingTokens(anime_title='Girls und Panzer', volume='03', episode='02')

        result = synthesizer.fill_title(record, ClassificationResult(EpisodeType.SPECIAL, 'SP'), tokens)

        assert result.original_title == 'Girls und Panzer SP V03 E02'
        assert result.id == 6001902
        assert record.original_title == ''

    def test_tokenizer_type_token_used_without_marker(self, synthesizer):
        record = EpisodeRecord(7, 1, EpisodeType.SPECIAL, 1)
        tokens = NamingTokens(anime_title='Show', type_token='OAV')

        result = synthesizer.fill_title(record, ClassificationResult(), tokens)

        assert result.original_title == 'Show OAV'

    def test_placeholder(self, synthesizer):
        tokens = NamingTokens(anime_title='White Album 2')
        classification = ClassificationResult(EpisodeType.OPENING, 'NCOP')

        record = synthesizer.placeholder(69496, 1, classification, tokens)

        assert record.is_synthesized
        assert record.episode_type is EpisodeType.OPENING
        assert record.parent_subject_id == 69496
        assert record.order == 1
        assert record.original_title == 'White Album 2 NCOP'

    def test_placeholder_defaults_to_special(self, synthesizer):
        record = synthesizer.placeholder(1, 5, ClassificationResult(), NamingTokens(episode='05'))

        assert record.episode_type is EpisodeType.SPECIAL
        assert record.original_title == 'E05'
