"""
Guessit tokenizer module.

Maps guessit's release-name properties onto NamingTokens.
"""

import logging
from typing import Any, Dict, Optional

from guessit import guessit
from guessit.api import GuessitException

from src.core.domain.value_objects import NamingTokens
from src.core.interfaces import INamingTokenizer

logger = logging.getLogger(__name__)


class GuessitTokenizer(INamingTokenizer):
    """
    Release-name tokenizer backed by guessit.

    Guessit is forced into episode mode so that bare numbers in anime
    release names are read as episode numbers rather than years or parts.
    """

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        """
        Initialize the tokenizer.

        Args:
            options: Extra guessit options merged over the defaults.
        """
        self._options: Dict[str, Any] = {'type': 'episode'}
        if options:
            self._options.update(options)

    def tokenize(self, filename: str) -> NamingTokens:
        """
        Extract naming tokens from a file name.

        Args:
            filename: File name without directory.

        Returns:
            NamingTokens; empty when guessit cannot parse the name.
        """
        try:
            guess = guessit(filename, self._options)
        except GuessitException as e:
            logger.warning(f'⚠️ guessit 解析失败: {filename} - {e}')
            return NamingTokens()

        episodes = _as_list(guess.get('episode'))
        episode = episodes[0] if episodes else None
        episode_alt = guess.get('absolute_episode')
        if episode_alt is None and len(episodes) > 1:
            episode_alt = episodes[1]

        tokens = NamingTokens(
            anime_title=_as_text(guess.get('title')),
            episode_title=_as_text(guess.get('episode_title')),
            season=_as_text(_first(guess.get('season'))),
            volume=_as_text(_first(guess.get('disc'))),
            episode=_as_text(episode),
            episode_alt=_as_text(_first(episode_alt)),
            year=_as_text(guess.get('year')),
            type_token=_as_text(_first(guess.get('episode_details'))),
        )
        logger.debug(f'🔍 命名解析结果: {filename} -> {tokens}')
        return tokens


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _first(value: Any) -> Any:
    values = _as_list(value)
    return values[0] if values else None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
