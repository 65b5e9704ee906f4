"""
Filename classifier module.

Strips noise tokens from anime release names and guesses the episode type
(opening, ending, special or preview) from marker tokens.
"""

import logging
import os
import re
from typing import List, Optional, Tuple

from src.core.domain.value_objects import ClassificationResult, EpisodeType

logger = logging.getLogger(__name__)


class FilenameClassifier:
    """
    Filename classifier service.

    Noise patterns are removed first so that tokens such as ``1080p`` or a
    CRC32 hash cannot be mistaken for markers or episode numbers. Type
    patterns are then tested in priority order and the first one wins.
    """

    # Noise patterns (applied in order, each removing all its matches)
    NOISE_PATTERNS: List[Tuple[str, int, str]] = [
        # [ABCD1234] or (ABCD1234) CRC32 hash
        (r'[\[\(][0-9A-F]{8}[\]\)]', re.IGNORECASE, 'crc32'),
        # S01, S02
        (r'S\d{2,}', re.IGNORECASE, 'season_tag'),
        # yuv420p10
        (r'yuv[420]{3}p(10|8)?', re.IGNORECASE, 'pixel_format'),
        # 1080p, 720p
        (r'\d{3,4}p', re.IGNORECASE, 'resolution'),
        # 1920x1080
        (r'\d{3,4}x\d{3,4}', re.IGNORECASE, 'dimensions'),
        # Hi10p
        (r'(Hi)?10p', re.IGNORECASE, 'hi10p'),
        # 8bit, 10bit
        (r'(8|10)bit', re.IGNORECASE, 'bit_depth'),
        # x264, h265
        (r'(x|h)(264|265)', re.IGNORECASE, 'codec'),
        # [YYMMDD] date stamp
        (r'\[\d{2}(0[1-9]|1[0-2])(0[1-9]|1[0-9]|2[0-9]|3[0-1])]', 0, 'date_stamp'),
        # v2 release version (but not in e.g. "PV2")
        (r'(?<=[^P])V\d+', 0, 'version'),
    ]

    # Type patterns (priority order, case-sensitive)
    TYPE_PATTERNS: List[Tuple[str, EpisodeType]] = [
        (r'(?P<token>(NC)?OP)([^a-zA-Z]|$)', EpisodeType.OPENING),
        (r'(?P<token>(NC)?ED)([^a-zA-Z]|$)', EpisodeType.ENDING),
        (r'(?P<token>SPs?|Specials?|OVA|OAD)([^a-zA-Z]|$)', EpisodeType.SPECIAL),
        (r'[^\w](?P<token>PV)([^a-zA-Z]|$)', EpisodeType.PREVIEW),
    ]

    def __init__(self):
        """Initialize the classifier."""
        self._noise_patterns = [
            (re.compile(pattern, flags), name) for pattern, flags, name in self.NOISE_PATTERNS
        ]
        self._type_patterns = [
            (re.compile(pattern), episode_type) for pattern, episode_type in self.TYPE_PATTERNS
        ]
        self._special_pattern = next(
            pattern for pattern, episode_type in self._type_patterns
            if episode_type is EpisodeType.SPECIAL
        )

    def strip_noise(self, filename: str) -> str:
        """
        Remove noise tokens from a filename.

        Args:
            filename: File name without directory.

        Returns:
            Working copy with resolution, codec, hash and similar tokens removed.
        """
        cleaned = filename
        for pattern, name in self._noise_patterns:
            if pattern.search(cleaned):
                cleaned = pattern.sub('', cleaned)
                logger.debug(f'🧹 移除噪声标记 {name}: {cleaned}')
        return cleaned

    def classify(
        self,
        filename: str,
        directory_name: Optional[str] = None
    ) -> ClassificationResult:
        """
        Classify a file by its name, falling back to the directory name.

        The directory is only consulted when the filename has no marker and
        never overrides a filename-derived type.

        Args:
            filename: File name without directory.
            directory_name: Name of the parent directory.

        Returns:
            ClassificationResult; ``episode_type`` is None when unknown.
        """
        result = self._classify_name(filename)
        if result is not None:
            logger.debug(f'🏷️ 文件名分类: {filename} -> {result.episode_type.name} ({result.raw_token})')
            return result

        if directory_name:
            result = self._classify_name(directory_name)
            if result is not None:
                logger.debug(
                    f'🏷️ 目录名分类: {directory_name} -> {result.episode_type.name} ({result.raw_token})'
                )
                return ClassificationResult(
                    episode_type=result.episode_type,
                    raw_token=result.raw_token,
                    from_directory=True
                )

        return ClassificationResult()

    def classify_path(self, path: str) -> ClassificationResult:
        """Classify a full path using its file and parent directory names."""
        return self.classify(
            os.path.basename(path),
            os.path.basename(os.path.dirname(path))
        )

    def is_special(self, path: str, check_parent: bool = True) -> bool:
        """
        Check if a path carries a special/OVA/OAD marker.

        Args:
            path: Full path of the media file.
            check_parent: Also check the parent directory name.

        Returns:
            True if the file or (optionally) its directory is marked special.
        """
        filename = os.path.basename(path)
        folder_name = os.path.basename(os.path.dirname(path))
        if self._special_pattern.search(filename):
            return True
        return check_parent and bool(self._special_pattern.search(folder_name))

    def matches_any_special(self, path: str) -> bool:
        """Check if a path matches any non-Normal marker pattern."""
        return any(pattern.search(path) for pattern, _ in self._type_patterns)

    def _classify_name(self, name: str) -> Optional[ClassificationResult]:
        cleaned = self.strip_noise(name)
        for pattern, episode_type in self._type_patterns:
            match = pattern.search(cleaned)
            if match:
                return ClassificationResult(
                    episode_type=episode_type,
                    raw_token=match.group('token')
                )
        return None
