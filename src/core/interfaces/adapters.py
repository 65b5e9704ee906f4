"""
Adapter interfaces module.

Contains abstract base classes defining contracts for the external
collaborators of the episode resolver: the metadata service, the release-name
tokenizer and the directory override store.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.core.domain.entities import EpisodeRecord, RelatedSubject, Subject
from src.core.domain.value_objects import EpisodeType, LocalOverride, NamingTokens
from src.core.utils.cancellation import CancellationToken


class IMetadataClient(ABC):
    """
    Metadata client interface.

    Defines the contract for fetching episode and subject data from the
    remote catalogue. Network failures raise MetadataServiceError; entries
    that do not exist are reported as None or an empty list.
    """

    @abstractmethod
    def list_episodes(
        self,
        subject_id: int,
        episode_type: Optional[EpisodeType] = None,
        index_hint: float = 0,
        token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> List[EpisodeRecord]:
        """
        List the episodes of a subject.

        Args:
            subject_id: Catalogue subject id.
            episode_type: Optional type filter.
            index_hint: Episode order the caller is looking for.
            token: Cancellation token.
            timeout: Request timeout in seconds, the client default when None.

        Returns:
            Episode records in catalogue order (not guaranteed sorted).
        """
        pass

    @abstractmethod
    def get_episode(
        self,
        episode_id: int,
        token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> Optional[EpisodeRecord]:
        """
        Get a single episode by id.

        Args:
            episode_id: Catalogue episode id.
            token: Cancellation token.
            timeout: Request timeout in seconds, the client default when None.

        Returns:
            EpisodeRecord if found, None otherwise.
        """
        pass

    @abstractmethod
    def get_subject(
        self,
        subject_id: int,
        token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> Optional[Subject]:
        """
        Get a subject by id.

        Args:
            subject_id: Catalogue subject id.
            token: Cancellation token.
            timeout: Request timeout in seconds, the client default when None.

        Returns:
            Subject if found, None otherwise.
        """
        pass

    @abstractmethod
    def get_related_subjects(
        self,
        subject_id: int,
        token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> Optional[List[RelatedSubject]]:
        """
        Get the subjects related to a subject.

        Args:
            subject_id: Catalogue subject id.
            token: Cancellation token.
            timeout: Request timeout in seconds, the client default when None.

        Returns:
            Relations in catalogue listing order, or None if the subject
            does not exist.
        """
        pass


class INamingTokenizer(ABC):
    """
    Naming tokenizer interface.

    Extracts release-naming signals (title, season, volume, episode) from a
    raw file name. Implementations must be pure functions of their input.
    """

    @abstractmethod
    def tokenize(self, filename: str) -> NamingTokens:
        """
        Tokenize a file name.

        Args:
            filename: File name without directory.

        Returns:
            NamingTokens with every unrecognized field set to None.
        """
        pass


class IOverrideStore(ABC):
    """
    Override store interface.

    Resolves the directory-scoped override that applies to a directory,
    including any inheritance from ancestor directories.
    """

    @abstractmethod
    def resolve_override(self, directory: str) -> LocalOverride:
        """
        Resolve the override for a directory.

        Args:
            directory: Directory path.

        Returns:
            LocalOverride (defaults when nothing is configured).
        """
        pass
