"""
Test configuration and fixtures for the episode resolver tests.

This module provides:
- A fake metadata client serving the catalogue in tests/fixtures/test_data.py
- Factories wiring the resolution pipeline with test collaborators
- Temporary configuration files
"""

import json
import sys
from pathlib import Path
from typing import Dict, Optional

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.config import ResolverConfig  # noqa: E402
from src.core.domain.value_objects import LocalOverride, NamingTokens  # noqa: E402
from src.services.metadata.metadata_service import EpisodeMetadataService  # noqa: E402
from src.services.resolution import (  # noqa: E402
    CandidateMatcher,
    EpisodeResolver,
    FilenameClassifier,
    IndexExtractor,
    OverrideResolver,
    SeasonContinuityResolver,
    TitleSynthesizer,
)
from tests.fixtures import test_data  # noqa: E402
from tests.fixtures.fake_clients import (  # noqa: E402
    FakeMetadataClient,
    StaticOverrideStore,
    StubTokenizer,
)


# ==================== Collaborators ====================

@pytest.fixture
def fake_client() -> FakeMetadataClient:
    """Fake metadata client holding the whole test catalogue."""
    return FakeMetadataClient(
        episodes=test_data.ALL_EPISODES,
        subjects=test_data.ALL_SUBJECTS,
        relations=test_data.ALL_RELATIONS,
        episodes_by_id=test_data.CACHED_EPISODES_BY_ID,
    )


@pytest.fixture
def classifier() -> FilenameClassifier:
    """Filename classifier."""
    return FilenameClassifier()


@pytest.fixture
def extractor(classifier) -> IndexExtractor:
    """Index extractor."""
    return IndexExtractor(classifier)


@pytest.fixture
def resolver_options() -> ResolverConfig:
    """Default resolver options."""
    return ResolverConfig()


# ==================== Pipeline Factories ====================

@pytest.fixture
def build_resolver(fake_client, classifier, extractor, resolver_options):
    """
    Factory building an EpisodeResolver around the fake client.

    Usage:
        resolver = build_resolver(
            tokens={'file.mkv': NamingTokens(episode='01')},
            overrides={'/anime/Show': LocalOverride(offset=26)},
        )
    """
    def _build(
        tokens: Optional[Dict[str, NamingTokens]] = None,
        overrides: Optional[Dict[str, LocalOverride]] = None,
        options: Optional[ResolverConfig] = None,
        client=None
    ) -> EpisodeResolver:
        client = client or fake_client
        return EpisodeResolver(
            classifier=classifier,
            extractor=extractor,
            override_resolver=OverrideResolver(StaticOverrideStore(overrides)),
            matcher=CandidateMatcher(client, classifier),
            continuity=SeasonContinuityResolver(client),
            synthesizer=TitleSynthesizer(),
            tokenizer=StubTokenizer(tokens),
            options=options or resolver_options,
        )

    return _build


@pytest.fixture
def build_metadata_service(build_resolver, fake_client, classifier, resolver_options):
    """Factory building an EpisodeMetadataService around the fake client."""
    def _build(
        tokens: Optional[Dict[str, NamingTokens]] = None,
        overrides: Optional[Dict[str, LocalOverride]] = None,
        options: Optional[ResolverConfig] = None
    ) -> EpisodeMetadataService:
        return EpisodeMetadataService(
            resolver=build_resolver(tokens=tokens, overrides=overrides, options=options),
            metadata_client=fake_client,
            classifier=classifier,
            options=options or resolver_options,
        )

    return _build


# ==================== Test Configuration ====================

@pytest.fixture
def test_config_path(tmp_path) -> Path:
    """Create a temporary test configuration file."""
    config_path = tmp_path / 'test_config.json'

    test_config = {
        'bangumi': {
            'base_url': 'https://api.bgm.tv/',
            'access_token': '',
            'page_size': 50,
            'cache_ttl': 600
        },
        'resolver': {
            'always_replace_episode_number': False,
            'always_get_episode_by_tokenizer': False,
            'trust_existing_remote_id': False,
            'request_timeout': 5,
            'max_season_hops': 5,
            'override_file_name': 'bangumi.ini',
            'translation_preference': 'localized'
        },
        'logging': {
            'level': 'debug',
            'log_path': str(tmp_path / 'logs')
        }
    }

    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(test_config, f, ensure_ascii=False, indent=2)

    return config_path
