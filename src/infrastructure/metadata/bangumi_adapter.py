"""
Bangumi adapter module.

Provides integration with the Bangumi API v0 for fetching episode, subject
and relation data.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from src.core.domain.entities import EpisodeRecord, RelatedSubject, Subject
from src.core.domain.value_objects import EpisodeType
from src.core.exceptions import MalformedEpisodeError, MetadataServiceError
from src.core.interfaces import IMetadataClient
from src.core.utils.cancellation import CancellationToken, ensure_token
from src.infrastructure.metadata.response_cache import ResponseCache

logger = logging.getLogger(__name__)


class BangumiAdapter(IMetadataClient):
    """
    Bangumi API v0 adapter.

    Implements IMetadataClient interface for fetching anime metadata from
    Bangumi. Every response goes through a ResponseCache.
    """

    BASE_URL = 'https://api.bgm.tv'
    DEFAULT_TIMEOUT = 10
    DEFAULT_PAGE_SIZE = 100
    DEFAULT_USER_AGENT = 'bangumi-episode-resolver/1.0'

    def __init__(
        self,
        base_url: str = BASE_URL,
        access_token: str = '',
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        page_size: int = DEFAULT_PAGE_SIZE,
        cache: Optional[ResponseCache] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the Bangumi adapter.

        Args:
            base_url: API root URL.
            access_token: Optional personal access token.
            user_agent: User-Agent header (required by the API).
            timeout: Request timeout in seconds.
            page_size: Episodes per page.
            cache: Response cache; a disabled cache is used when omitted.
            session: HTTP session to reuse.
        """
        self._base_url = base_url.rstrip('/')
        self._access_token = access_token
        self._user_agent = user_agent
        self._timeout = timeout
        self._page_size = page_size
        self._cache = cache if cache is not None else ResponseCache(ttl=0)
        self._session = session or requests.Session()

    @property
    def page_size(self) -> int:
        """Return the number of episodes fetched per page."""
        return self._page_size

    def _get_headers(self) -> Dict[str, str]:
        """
        Get request headers.

        Returns:
            Headers dictionary, with authorization when a token is set.
        """
        headers = {
            'Accept': 'application/json',
            'User-Agent': self._user_agent,
        }
        if self._access_token:
            headers['Authorization'] = f'Bearer {self._access_token}'
        return headers

    def _get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> Optional[Any]:
        """
        Perform a GET request against the API.

        Args:
            path: Path below the API root.
            params: Query parameters.
            token: Cancellation token, checked before and after the call.
            timeout: Request timeout in seconds, the client default when None.

        Returns:
            Decoded JSON body, or None for 404.

        Raises:
            MetadataServiceError: On network errors or error responses.
            ResolutionCancelledError: If the token was cancelled.
        """
        token = ensure_token(token)
        token.raise_if_cancelled()

        url = f'{self._base_url}{path}'
        try:
            response = self._session.get(
                url,
                params=params,
                headers=self._get_headers(),
                timeout=timeout or self._timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f'❌ 请求Bangumi失败：{e}')
            raise MetadataServiceError(f'请求Bangumi失败: {e}', url=url) from e

        token.raise_if_cancelled()

        if response.status_code == 404:
            logger.debug(f'Bangumi返回404: {url}')
            return None

        if response.status_code >= 400:
            retryable = response.status_code >= 500 or response.status_code == 429
            logger.error(f'❌ Bangumi返回错误状态 {response.status_code}: {url}')
            raise MetadataServiceError(
                f'Bangumi返回错误状态 {response.status_code}',
                status_code=response.status_code,
                url=url,
                retryable=retryable
            )

        try:
            return response.json()
        except ValueError as e:
            raise MetadataServiceError(
                'Bangumi响应不是有效的JSON',
                status_code=response.status_code,
                url=url
            ) from e

    def _fetch_episode_page(
        self,
        subject_id: int,
        episode_type: Optional[EpisodeType],
        offset: int,
        token: Optional[CancellationToken],
        timeout: Optional[float] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Fetch one page of a subject's episode list.

        Args:
            subject_id: Subject identifier.
            episode_type: Optional type filter.
            offset: Page offset.
            token: Cancellation token.
            timeout: Request timeout in seconds, the client default when None.

        Returns:
            Raw page data ('data', 'total', 'limit', 'offset').
        """
        params: Dict[str, Any] = {
            'subject_id': subject_id,
            'limit': self._page_size,
            'offset': offset,
        }
        if episode_type is not None:
            params['type'] = int(episode_type)

        key = ('episodes', subject_id, episode_type, offset, self._page_size)
        return self._cache.get_or_fetch(
            key,
            lambda: self._get('/v0/episodes', params=params, token=token, timeout=timeout)
        )

    def _page_offset(self, index_hint: float, total: int) -> int:
        """
        Compute the offset of the page that should contain an episode.

        Args:
            index_hint: Requested episode order.
            total: Total episodes reported by the first page.

        Returns:
            Page offset (0 for the first page).
        """
        if total <= self._page_size or index_hint <= self._page_size:
            return 0
        target = min(int(index_hint), total)
        return (target - 1) // self._page_size * self._page_size

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

        The first page is returned unless the subject spans several pages and
        the requested index lies beyond the first one, in which case the page
        holding that index is returned instead.

        Args:
            subject_id: Subject identifier.
            episode_type: Optional type filter.
            index_hint: Requested episode order.
            token: Cancellation token.
            timeout: Request timeout in seconds, the client default when None.

        Returns:
            Parsed episodes; malformed entries are skipped.
        """
        page = self._fetch_episode_page(subject_id, episode_type, 0, token, timeout)
        if not page:
            return []

        total = page.get('total') or len(page.get('data') or [])
        offset = self._page_offset(index_hint, total)
        if offset > 0:
            logger.debug(f'📄 剧集数量 {total} 超过一页，读取偏移 {offset} 的分页')
            page = self._fetch_episode_page(
                subject_id, episode_type, offset, token, timeout
            ) or page

        episodes = self._parse_episodes(page.get('data') or [])
        logger.debug(
            f'📋 条目 {subject_id} 获取到 {len(episodes)} 集 '
            f'(type={episode_type.name if episode_type is not None else "ALL"})'
        )
        return episodes

    def _parse_episodes(self, items: List[Dict[str, Any]]) -> List[EpisodeRecord]:
        """
        Parse raw episode entries, skipping malformed ones.

        Args:
            items: Raw episode entries.

        Returns:
            Parsed records in input order.
        """
        episodes = []
        for item in items:
            try:
                episodes.append(EpisodeRecord.from_api(item))
            except MalformedEpisodeError as e:
                logger.warning(f'⚠️ 跳过无法解析的剧集数据: {e}')
        return episodes

    def get_episode(
        self,
        episode_id: int,
        token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> Optional[EpisodeRecord]:
        """
        Get a single episode.

        Args:
            episode_id: Episode identifier.
            token: Cancellation token.
            timeout: Request timeout in seconds, the client default when None.

        Returns:
            EpisodeRecord if found and well-formed, None otherwise.
        """
        data = self._cache.get_or_fetch(
            ('episode', episode_id),
            lambda: self._get(f'/v0/episodes/{episode_id}', token=token, timeout=timeout)
        )
        if not data:
            return None

        try:
            return EpisodeRecord.from_api(data)
        except MalformedEpisodeError as e:
            logger.warning(f'⚠️ 剧集 {episode_id} 数据无法解析: {e}')
            return None

    def get_subject(
        self,
        subject_id: int,
        token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> Optional[Subject]:
        """
        Get a subject.

        Args:
            subject_id: Subject identifier.
            token: Cancellation token.
            timeout: Request timeout in seconds, the client default when None.

        Returns:
            Subject if found, None otherwise.
        """
        data = self._cache.get_or_fetch(
            ('subject', subject_id),
            lambda: self._get(f'/v0/subjects/{subject_id}', token=token, timeout=timeout)
        )
        if not data:
            return None
        return Subject.from_api(data)

    def get_related_subjects(
        self,
        subject_id: int,
        token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> Optional[List[RelatedSubject]]:
        """
        Get the subjects related to a subject.

        Args:
            subject_id: Subject identifier.
            token: Cancellation token.
            timeout: Request timeout in seconds, the client default when None.

        Returns:
            Relations in listing order, or None if the subject is unknown.
        """
        data = self._cache.get_or_fetch(
            ('related', subject_id),
            lambda: self._get(f'/v0/subjects/{subject_id}/subjects', token=token, timeout=timeout)
        )
        if data is None:
            return None

        relations = []
        for item in data:
            try:
                relations.append(RelatedSubject.from_api(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f'⚠️ 跳过无法解析的关联条目: {e}')
        return relations
