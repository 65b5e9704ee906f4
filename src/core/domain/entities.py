"""
Entities module.

Contains domain entities that have identity: catalogue episodes, subjects,
the host's episode query and the metadata produced for it.
"""

import html
import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from src.core.domain.value_objects import EpisodeType
from src.core.exceptions import MalformedEpisodeError

SEQUEL_RELATIONS = ('续集', 'Sequel')


@dataclass(frozen=True)
class EpisodeRecord:
    """
    Catalogue episode entity.

    Records are frozen because the metadata client may share cached
    instances between resolutions; use ``with_order`` to derive a copy.

    Attributes:
        id: Catalogue id; 0 means synthesized (no remote record).
        parent_subject_id: Subject (season/series) the episode belongs to.
        episode_type: Catalogue episode type.
        order: Fractional display order within (subject, type).
        index_within_subject: Informational index, Normal type only.
        original_title: Title in the original language.
        localized_title: Translated title, if any.
        air_date: Air date string as reported by the catalogue.
        description: Episode synopsis.
        duration: Runtime string as reported by the catalogue.
    """
    id: int
    parent_subject_id: int
    episode_type: EpisodeType
    order: float
    index_within_subject: float = 0.0
    original_title: str = ''
    localized_title: Optional[str] = None
    air_date: str = ''
    description: Optional[str] = None
    duration: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'EpisodeRecord':
        """
        Build a record from a catalogue JSON object.

        Raises:
            MalformedEpisodeError: If the id or sort key is unusable.
        """
        try:
            episode_id = int(data['id'])
            order = float(data.get('sort', 0))
            index = float(data.get('ep') or 0)
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedEpisodeError(f'无法解析剧集数据: {e}', raw=data) from e

        if not math.isfinite(order):
            raise MalformedEpisodeError('剧集序号不是有效数字', raw=data)

        return cls(
            id=episode_id,
            parent_subject_id=int(data.get('subject_id') or 0),
            episode_type=EpisodeType.from_code(data.get('type', 0)),
            order=order,
            index_within_subject=index,
            original_title=html.unescape(data.get('name') or ''),
            localized_title=html.unescape(data['name_cn']) if data.get('name_cn') else None,
            air_date=data.get('airdate') or '',
            description=data.get('desc') or None,
            duration=data.get('duration') or None,
        )

    @property
    def is_synthesized(self) -> bool:
        """Check if this record has no remote counterpart."""
        return self.id == 0

    @property
    def has_title(self) -> bool:
        """Check if either title is non-empty."""
        return bool(self.original_title or self.localized_title)

    def title(self, prefer_localized: bool = True) -> str:
        """Return the preferred title, falling back to the original one."""
        if prefer_localized and self.localized_title:
            return self.localized_title
        return self.original_title

    def with_order(self, order: float) -> 'EpisodeRecord':
        """Return a copy with a different display order."""
        return replace(self, order=order)

    def with_title(self, original_title: str) -> 'EpisodeRecord':
        """Return a copy with a different original title."""
        return replace(self, original_title=original_title)

    def __str__(self) -> str:
        return f'<Bangumi Episode #{self.id}: {self.original_title}>'


@dataclass(frozen=True)
class Subject:
    """
    Catalogue subject (series, season or movie) entity.

    Attributes:
        id: Catalogue subject id.
        original_name: Name in the original language.
        localized_name: Translated name, if any.
        air_date: First air date string.
        episode_count: Declared number of episodes.
        summary: Subject synopsis.
    """
    id: int
    original_name: str = ''
    localized_name: Optional[str] = None
    air_date: Optional[str] = None
    episode_count: Optional[int] = None
    summary: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Subject':
        """Build a subject from a catalogue JSON object."""
        return cls(
            id=int(data['id']),
            original_name=html.unescape(data.get('name') or ''),
            localized_name=html.unescape(data['name_cn']) if data.get('name_cn') else None,
            air_date=data.get('date') or data.get('air_date') or None,
            episode_count=data.get('eps') or data.get('total_episodes'),
            summary=data.get('summary') or None,
        )

    def name(self, prefer_localized: bool = True) -> str:
        """Return the preferred name, falling back to the original one."""
        if prefer_localized and self.localized_name:
            return self.localized_name
        return self.original_name


@dataclass(frozen=True)
class RelatedSubject:
    """
    Relation from one subject to another.

    Attributes:
        id: Related subject id.
        relation: Relation label as reported by the catalogue.
        name: Related subject name.
    """
    id: int
    relation: str
    name: str = ''

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'RelatedSubject':
        """Build a relation from a catalogue JSON object."""
        return cls(
            id=int(data['id']),
            relation=data.get('relation') or '',
            name=html.unescape(data.get('name') or ''),
        )

    @property
    def is_sequel(self) -> bool:
        """Check if this relation points to the next season."""
        return self.relation in SEQUEL_RELATIONS


@dataclass
class EpisodeQuery:
    """
    Episode lookup request from the host media library.

    Attributes:
        path: Full path of the media file.
        index_number: Episode number already assigned by the host.
        parent_index_number: Season number already assigned by the host.
        episode_id: Previously saved catalogue episode id.
        series_subject_id: Catalogue subject id of the series.
        season_subject_id: Catalogue subject id of the parent season folder.
        season_index_number: Index of the parent season folder.
    """
    path: str
    index_number: Optional[float] = None
    parent_index_number: Optional[int] = None
    episode_id: Optional[int] = None
    series_subject_id: Optional[int] = None
    season_subject_id: Optional[int] = None
    season_index_number: Optional[int] = None


@dataclass
class EpisodeMetadata:
    """
    Episode metadata handed back to the host media library.

    Attributes:
        provider_id: Catalogue episode id (0 for synthesized records).
        name: Display title.
        original_title: Title in the original language.
        index_number: Absolute episode number in local numbering.
        season_number: Season number (0 for specials).
        episode_type: Resolved episode type.
        overview: Episode synopsis.
        premiere_date: Parsed air date.
        production_year: Year when only a year is known.
        airs_before_season: Season a special airs before.
        airs_after_season: Season a special airs after.
    """
    provider_id: int
    name: str
    original_title: str
    index_number: float
    season_number: int
    episode_type: EpisodeType
    overview: Optional[str] = None
    premiere_date: Optional[datetime] = None
    production_year: Optional[int] = None
    airs_before_season: Optional[int] = None
    airs_after_season: Optional[int] = None

    @property
    def is_remote_backed(self) -> bool:
        """Check if the metadata comes from a catalogue record."""
        return self.provider_id > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            'provider_id': self.provider_id,
            'is_remote_backed': self.is_remote_backed,
            'name': self.name,
            'original_title': self.original_title,
            'index_number': self.index_number,
            'season_number': self.season_number,
            'episode_type': self.episode_type.name,
            'overview': self.overview,
            'premiere_date': self.premiere_date.isoformat() if self.premiere_date else None,
            'production_year': self.production_year,
            'airs_before_season': self.airs_before_season,
            'airs_after_season': self.airs_after_season,
        }
