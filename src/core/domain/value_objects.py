"""
Value objects module.

Contains immutable value objects representing domain concepts without identity.
Value objects are compared by their attributes, not by identity.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class EpisodeType(IntEnum):
    """
    Episode type enumeration.

    Values follow the catalogue's own type codes. The integer value is also
    the canonical priority used for tie-breaking: Normal sorts first.
    """
    NORMAL = 0
    SPECIAL = 1
    OPENING = 2
    ENDING = 3
    PREVIEW = 4
    OTHER = 6

    @classmethod
    def from_code(cls, code: object) -> 'EpisodeType':
        """
        Map a raw catalogue type code to an EpisodeType.

        Unknown codes (including the catalogue's MAD type) map to OTHER.
        """
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            return cls.OTHER

    @property
    def is_normal(self) -> bool:
        """Check if this is a main-run episode type."""
        return self is EpisodeType.NORMAL


@dataclass(frozen=True)
class LocalOverride:
    """
    Directory-scoped override value object.

    Attributes:
        subject_id: Explicit remote subject id (0 when not set).
        offset: Integer correction between local and remote numbering.
        source_path: The override file this value was read from, if any.
    """
    subject_id: int = 0
    offset: int = 0
    source_path: Optional[str] = None

    @property
    def has_subject_id(self) -> bool:
        """Check if an explicit subject id is configured."""
        return self.subject_id > 0

    @property
    def is_empty(self) -> bool:
        """Check if this override changes nothing."""
        return not self.has_subject_id and self.offset == 0


@dataclass(frozen=True)
class ClassificationResult:
    """
    Filename classification result.

    Attributes:
        episode_type: Guessed type, or None when nothing matched.
        raw_token: The matched raw marker (e.g. 'NCOP', 'OVA').
        from_directory: True when the guess came from the parent directory.
    """
    episode_type: Optional[EpisodeType] = None
    raw_token: Optional[str] = None
    from_directory: bool = False

    @property
    def is_unknown(self) -> bool:
        """Check if no marker was found."""
        return self.episode_type is None

    @property
    def effective_type(self) -> EpisodeType:
        """Return the guessed type, assuming Normal when unknown."""
        return self.episode_type if self.episode_type is not None else EpisodeType.NORMAL

    @property
    def is_normal_or_unknown(self) -> bool:
        """Check if this result should be treated as a main-run episode."""
        return self.effective_type.is_normal


@dataclass(frozen=True)
class NamingTokens:
    """
    Release-name tokens produced by the naming tokenizer.

    All fields are raw strings as extracted from the file name.
    """
    anime_title: Optional[str] = None
    episode_title: Optional[str] = None
    season: Optional[str] = None
    volume: Optional[str] = None
    episode: Optional[str] = None
    episode_alt: Optional[str] = None
    year: Optional[str] = None
    type_token: Optional[str] = None

    @property
    def episode_number(self) -> Optional[float]:
        """Return the episode token as a number, if parseable."""
        return _to_float(self.episode)

    @property
    def episode_alt_number(self) -> Optional[float]:
        """Return the alternate episode token as a number, if parseable."""
        return _to_float(self.episode_alt)


@dataclass(frozen=True)
class SeasonCursor:
    """
    Position of a season walk along sequel relations.

    Attributes:
        subject_id: The season subject currently examined.
        cumulative_base: Total episodes of all seasons up to this one.
        last_season_max_order: Cumulative base before this season was added.
    """
    subject_id: int
    cumulative_base: float
    last_season_max_order: float = 0.0


def _to_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(str(value).strip().strip('.'))
    except ValueError:
        return None
