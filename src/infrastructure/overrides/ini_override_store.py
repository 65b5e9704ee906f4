"""
INI override store module.

Reads directory-scoped override files (``bangumi.ini`` by default) holding
an explicit subject id and an episode offset.

Example file::

    [Bangumi]
    ID = 69496
    Offset = 26

The section header may be omitted; bare ``key=value`` lines are read as the
``[Bangumi]`` section.
"""

import configparser
import logging
import os
from typing import Optional

from src.core.domain.value_objects import LocalOverride
from src.core.exceptions import OverrideParseError
from src.core.interfaces import IOverrideStore

logger = logging.getLogger(__name__)


class IniOverrideStore(IOverrideStore):
    """
    Override store backed by INI files.

    The nearest override file wins: the file's own directory is checked
    first, then each ancestor up to ``max_depth`` levels.
    """

    SECTION = 'Bangumi'
    DEFAULT_FILE_NAME = 'bangumi.ini'
    DEFAULT_MAX_DEPTH = 3

    def __init__(
        self,
        file_name: str = DEFAULT_FILE_NAME,
        max_depth: int = DEFAULT_MAX_DEPTH
    ):
        """
        Initialize the store.

        Args:
            file_name: Override file name looked up in each directory.
            max_depth: Number of ancestor directories to search.
        """
        self._file_name = file_name
        self._max_depth = max_depth

    def resolve_override(self, directory: str) -> LocalOverride:
        """
        Resolve the override for a directory.

        Args:
            directory: Directory holding the media file.

        Returns:
            LocalOverride from the nearest override file, or defaults.
        """
        file_path = self._find_file(directory)
        if file_path is None:
            return LocalOverride()

        override = self.read_file(file_path)
        if not override.is_empty:
            logger.info(
                f'📁 使用目录覆盖配置: {file_path} '
                f'(ID={override.subject_id}, Offset={override.offset})'
            )
        return override

    def read_file(self, file_path: str) -> LocalOverride:
        """
        Read one override file.

        Invalid values are logged and replaced by their defaults.

        Args:
            file_path: Path of the override file.

        Returns:
            LocalOverride read from the file.
        """
        try:
            with open(file_path, 'r', encoding='utf-8-sig') as f:
                content = f.read()
        except OSError as e:
            logger.warning(f'⚠️ 无法读取覆盖配置文件: {file_path} - {e}')
            return LocalOverride()

        parser = configparser.ConfigParser()
        try:
            parser.read_string(content)
        except configparser.MissingSectionHeaderError:
            parser.read_string(f'[{self.SECTION}]\n{content}')
        except configparser.Error as e:
            logger.warning(f'⚠️ 覆盖配置文件格式错误: {file_path} - {e}')
            return LocalOverride()

        if not parser.has_section(self.SECTION):
            return LocalOverride(source_path=file_path)

        section = parser[self.SECTION]
        return LocalOverride(
            subject_id=self._read_int(section, 'id', file_path),
            offset=self._read_int(section, 'offset', file_path),
            source_path=file_path,
        )

    def _find_file(self, directory: str) -> Optional[str]:
        current = os.path.abspath(directory)
        for _ in range(self._max_depth + 1):
            candidate = os.path.join(current, self._file_name)
            if os.path.isfile(candidate):
                return candidate
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        return None

    def _read_int(self, section: configparser.SectionProxy, key: str, file_path: str) -> int:
        raw = section.get(key, fallback='').strip()
        if not raw:
            return 0
        try:
            return self._parse_int(raw, key, file_path)
        except OverrideParseError as e:
            logger.warning(f'⚠️ {e}')
            return 0

    @staticmethod
    def _parse_int(raw: str, key: str, file_path: str) -> int:
        try:
            return int(raw)
        except ValueError as e:
            raise OverrideParseError(
                f'覆盖配置值不是整数: {key}={raw}',
                file_path=file_path,
                key=key
            ) from e
