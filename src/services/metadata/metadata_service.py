"""
Metadata service module.

Turns a resolved catalogue episode into the metadata handed back to the
host media library.
"""

import logging
from typing import Optional, Union

from src.core.config import ResolverConfig
from src.core.domain.entities import EpisodeMetadata, EpisodeQuery
from src.core.domain.value_objects import EpisodeType
from src.core.interfaces import IMetadataClient
from src.core.utils.cancellation import CancellationToken, ensure_token
from src.core.utils.date_utils import aired_before, parse_air_date, parse_production_year
from src.services.resolution.episode_resolver import EpisodeResolver
from src.services.resolution.filename_classifier import FilenameClassifier

logger = logging.getLogger(__name__)


class EpisodeMetadataService:
    """
    Episode metadata service.

    Orchestrates the resolution pipeline and fills the host-facing fields:
    season placement, localized names and air dates. Specials are placed in
    season 0 and ordered relative to their parent subject.
    """

    def __init__(
        self,
        resolver: EpisodeResolver,
        metadata_client: IMetadataClient,
        classifier: FilenameClassifier,
        options: Optional[ResolverConfig] = None
    ):
        """
        Initialize the metadata service.

        Args:
            resolver: Episode resolution pipeline.
            metadata_client: Metadata client used to fetch parent subjects.
            classifier: Classifier used to detect special-marked files.
            options: Default resolver options.
        """
        self._resolver = resolver
        self._metadata_client = metadata_client
        self._classifier = classifier
        self._options = options or ResolverConfig()

    def get_metadata(
        self,
        query: EpisodeQuery,
        options: Optional[ResolverConfig] = None,
        token: Optional[CancellationToken] = None
    ) -> Optional[EpisodeMetadata]:
        """
        Get episode metadata for a media file.

        Args:
            query: Host episode query.
            options: Per-call options, defaults to the configured ones.
            token: Cancellation token.

        Returns:
            EpisodeMetadata, or None if the file has no known subject.

        Raises:
            MetadataServiceError: If the metadata service is unavailable.
            ResolutionCancelledError: If the token was cancelled.
        """
        options = options or self._options
        token = ensure_token(token)
        token.raise_if_cancelled()

        resolution = self._resolver.resolve(query, options=options, token=token)
        if resolution is None:
            return None

        record = resolution.record
        prefer_localized = options.translation_preference == 'localized'
        metadata = EpisodeMetadata(
            provider_id=record.id,
            name=record.title(prefer_localized),
            original_title=record.original_title,
            index_number=_as_index(resolution.display_index),
            season_number=self._season_number(query, record.episode_type),
            episode_type=record.episode_type,
            overview=record.description or None,
            premiere_date=parse_air_date(record.air_date),
            production_year=parse_production_year(record.air_date),
        )
        logger.info(f'📺 {query.path} 的元数据: {record}')

        if record.episode_type is EpisodeType.NORMAL and metadata.season_number > 0:
            return metadata

        # 特典放入第 0 季，并根据父条目的播出时间排序
        metadata.season_number = 0
        if not record.parent_subject_id:
            return metadata

        subject = self._metadata_client.get_subject(
            record.parent_subject_id, token, timeout=options.request_timeout
        )
        if subject is None:
            return metadata

        if not metadata.name:
            metadata.name = subject.name(prefer_localized)
        if not metadata.original_title:
            metadata.original_title = subject.original_name

        reference_season = query.season_index_number or 1
        if aired_before(record.air_date, subject.air_date):
            metadata.airs_before_season = reference_season
        else:
            metadata.airs_after_season = reference_season
        return metadata

    def _season_number(self, query: EpisodeQuery, episode_type: EpisodeType) -> int:
        if (self._classifier.is_special(query.path, check_parent=False)
                or episode_type is EpisodeType.SPECIAL
                or query.parent_index_number == 0):
            return 0
        if query.season_index_number is not None:
            return query.season_index_number
        if query.parent_index_number is not None:
            return query.parent_index_number
        return 1


def _as_index(value: float) -> Union[int, float]:
    return int(value) if float(value).is_integer() else value
