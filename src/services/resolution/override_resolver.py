"""
Override resolver module.

Applies directory-scoped overrides (explicit subject id and episode offset)
to the resolution pipeline.
"""

import logging
from typing import Optional

from src.core.domain.value_objects import EpisodeType, LocalOverride
from src.core.interfaces import IOverrideStore

logger = logging.getLogger(__name__)


class OverrideResolver:
    """
    Override resolver service.

    The offset converts between local and remote numbering for Normal
    episodes only; other types are never shifted.
    """

    def __init__(self, store: IOverrideStore):
        """
        Initialize the resolver.

        Args:
            store: Store that locates and reads override records.
        """
        self._store = store

    def resolve(self, directory: str) -> LocalOverride:
        """
        Resolve the override for a directory.

        Args:
            directory: Directory holding the media file.

        Returns:
            The resolved LocalOverride (defaults when none is configured).
        """
        return self._store.resolve_override(directory)

    @staticmethod
    def to_remote_index(
        index: float,
        override: LocalOverride,
        episode_type: Optional[EpisodeType]
    ) -> float:
        """
        Convert a local index to the remote numbering.

        Args:
            index: Local (displayed) index.
            override: Resolved override.
            episode_type: Episode type; None is treated as Normal.

        Returns:
            ``index - offset`` for Normal episodes, ``index`` otherwise. An
            unset index (0) is never shifted.
        """
        if override.offset and index and _is_offset_type(episode_type):
            logger.info(f'📐 应用偏移 {-override.offset} 到集数 {index}')
            return index - override.offset
        return index

    @staticmethod
    def to_display_index(
        index: float,
        override: LocalOverride,
        episode_type: Optional[EpisodeType]
    ) -> float:
        """
        Convert a remote index back to the local numbering.

        Args:
            index: Remote index.
            override: Resolved override.
            episode_type: Episode type; None is treated as Normal.

        Returns:
            ``index + offset`` for Normal episodes, ``index`` otherwise.
        """
        if _is_offset_type(episode_type):
            return index + override.offset
        return index

    @staticmethod
    def resolve_subject_id(
        override: LocalOverride,
        season_subject_id: Optional[int] = None,
        series_subject_id: Optional[int] = None
    ) -> int:
        """
        Choose the remote subject to search.

        Precedence: override id, then parent season id, then series id.

        Returns:
            The subject id, or 0 if none is known.
        """
        if override.has_subject_id:
            logger.info(f'📁 使用目录覆盖配置中的条目 ID {override.subject_id}')
            return override.subject_id
        if season_subject_id:
            logger.info(f'📂 使用季度条目 ID {season_subject_id}')
            return season_subject_id
        return series_subject_id or 0


def _is_offset_type(episode_type: Optional[EpisodeType]) -> bool:
    return episode_type is None or episode_type.is_normal
