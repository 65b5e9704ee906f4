"""
Dependency Injection Container module.

Contains the Container class for managing application dependencies.
All services are registered following SOLID principles with proper
dependency chains.
"""

from dependency_injector import containers, providers

from src.core.config import AppConfig

# External Adapters
from src.infrastructure.metadata.bangumi_adapter import BangumiAdapter
from src.infrastructure.metadata.response_cache import ResponseCache
from src.infrastructure.naming.guessit_tokenizer import GuessitTokenizer
from src.infrastructure.overrides.ini_override_store import IniOverrideStore

# Metadata Services
from src.services.metadata.metadata_service import EpisodeMetadataService

# Resolution Services
from src.services.resolution.candidate_matcher import CandidateMatcher
from src.services.resolution.episode_resolver import EpisodeResolver
from src.services.resolution.filename_classifier import FilenameClassifier
from src.services.resolution.index_extractor import IndexExtractor
from src.services.resolution.override_resolver import OverrideResolver
from src.services.resolution.season_continuity import SeasonContinuityResolver
from src.services.resolution.title_synthesizer import TitleSynthesizer


class Container(containers.DeclarativeContainer):
    """
    依赖注入容器。

    管理应用程序所有依赖的生命周期和注入。
    遵循 SOLID 原则，特别是依赖倒置原则 (DIP)。

    服务层次结构:
    1. Configuration (配置)
    2. External Adapters (元数据服务、命名解析、目录覆盖配置)
    3. Resolution Components (剧集匹配组件)
    4. Pipeline & Metadata Service (匹配流程与元数据输出)
    """

    # ===== Configuration =====
    # 可通过 override(providers.Object(...)) 替换为指定路径加载的配置
    app_config = providers.Singleton(AppConfig.load)

    resolver_options = app_config.provided.resolver

    # ===== External Adapters =====
    response_cache = providers.Singleton(
        ResponseCache,
        ttl=app_config.provided.bangumi.cache_ttl
    )

    bangumi_client = providers.Singleton(
        BangumiAdapter,
        base_url=app_config.provided.bangumi.base_url,
        access_token=app_config.provided.bangumi.access_token,
        user_agent=app_config.provided.bangumi.user_agent,
        timeout=app_config.provided.resolver.request_timeout,
        page_size=app_config.provided.bangumi.page_size,
        cache=response_cache
    )

    tokenizer = providers.Singleton(GuessitTokenizer)

    override_store = providers.Singleton(
        IniOverrideStore,
        file_name=app_config.provided.resolver.override_file_name
    )

    # ===== Resolution Components =====
    filename_classifier = providers.Singleton(FilenameClassifier)

    index_extractor = providers.Singleton(
        IndexExtractor,
        classifier=filename_classifier
    )

    override_resolver = providers.Singleton(
        OverrideResolver,
        store=override_store
    )

    candidate_matcher = providers.Singleton(
        CandidateMatcher,
        client=bangumi_client,
        classifier=filename_classifier
    )

    season_continuity = providers.Singleton(
        SeasonContinuityResolver,
        client=bangumi_client,
        max_hops=app_config.provided.resolver.max_season_hops
    )

    title_synthesizer = providers.Singleton(TitleSynthesizer)

    # ===== Pipeline & Metadata Service =====
    episode_resolver = providers.Singleton(
        EpisodeResolver,
        classifier=filename_classifier,
        extractor=index_extractor,
        override_resolver=override_resolver,
        matcher=candidate_matcher,
        continuity=season_continuity,
        synthesizer=title_synthesizer,
        tokenizer=tokenizer,
        options=resolver_options
    )

    metadata_service = providers.Singleton(
        EpisodeMetadataService,
        resolver=episode_resolver,
        metadata_client=bangumi_client,
        classifier=filename_classifier,
        options=resolver_options
    )


# 全局容器实例
container = Container()
