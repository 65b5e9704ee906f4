"""
Index extractor module.

Extracts a fractional episode number from a filename and decides whether it
should replace the index already known by the caller.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from src.core.config import ResolverConfig
from src.core.domain.value_objects import NamingTokens
from src.services.resolution.filename_classifier import FilenameClassifier
from src.services.resolution.rules import Rule, RuleRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexGuessState:
    """
    State shared by the index precedence rules.

    Attributes:
        current: Index already known by the caller (0 when absent).
        from_filename: Index extracted from the filename (``current`` when
            no pattern matched).
        maximum: Highest plausible index.
        force_replace: Filename index always wins.
        from_tokenizer: Episode number reported by the naming tokenizer when
            the tokenizer is preferred.
    """
    current: float
    from_filename: float
    maximum: float = math.inf
    force_replace: bool = False
    from_tokenizer: Optional[float] = None


class TokenizerPreferredRule(Rule[IndexGuessState]):
    """Use the naming tokenizer's episode number when it is preferred."""

    name = 'tokenizer_preferred'

    def evaluate(self, state: IndexGuessState) -> Optional[float]:
        return state.from_tokenizer


class ForcedReplaceRule(Rule[IndexGuessState]):
    """Filename index always wins when forced replacement is configured."""

    name = 'forced_replace'

    def evaluate(self, state: IndexGuessState) -> Optional[float]:
        if state.force_replace:
            return state.from_filename
        return None


class SameValueRule(Rule[IndexGuessState]):
    """Keep the known index when the filename agrees with it."""

    name = 'same_value'

    def evaluate(self, state: IndexGuessState) -> Optional[float]:
        if state.from_filename == state.current:
            return state.current
        return None


class OutOfRangeRule(Rule[IndexGuessState]):
    """Replace a known index that exceeds the highest plausible index."""

    name = 'out_of_range'

    def evaluate(self, state: IndexGuessState) -> Optional[float]:
        if state.current > state.maximum:
            logger.warning(
                f'⚠️ 已有集数 {state.current} 超出范围 (最大 {state.maximum})，'
                f'改用文件名集数 {state.from_filename}'
            )
            return state.from_filename
        return None


class FillEmptyRule(Rule[IndexGuessState]):
    """Use the filename index when no index is known yet."""

    name = 'fill_empty'

    def evaluate(self, state: IndexGuessState) -> Optional[float]:
        if state.from_filename > 0 and state.current <= 0:
            return state.from_filename
        return None


class KeepCurrentRule(Rule[IndexGuessState]):
    """Keep the known index."""

    name = 'keep_current'

    def evaluate(self, state: IndexGuessState) -> Optional[float]:
        return state.current


class IndexExtractor:
    """
    Index extractor service.

    The numeric cascade runs on the noise-stripped filename and the first
    pattern that yields a parseable number wins. Fractional values such as
    ``12.5`` are preserved.
    """

    # Index patterns (ordered by specificity)
    INDEX_PATTERNS: List[Tuple[str, int, str]] = [
        # [05] or [12.5]
        (r'\[([\d\.]{2,})\]', 0, 'bracketed'),
        # - 05 or -05
        (r'- ?([\d\.]{2,})', 0, 'dash'),
        # E05 or EP05
        (r'EP?([\d\.]{2,})', re.IGNORECASE, 'ep_prefix'),
        # [05 (unclosed bracket)
        (r'\[([\d\.]{2,})', 0, 'open_bracket'),
        # #05
        (r'#([\d\.]{2,})', 0, 'hash_prefix'),
        # Any run of two or more digits
        (r'(\d{2,})', 0, 'bare_digits'),
        # [5]
        (r'\[([\d\.]+)\]', 0, 'bracketed_single'),
    ]

    def __init__(self, classifier: FilenameClassifier):
        """
        Initialize the extractor.

        Args:
            classifier: Classifier used to strip noise tokens.
        """
        self._classifier = classifier
        self._index_patterns = [
            (re.compile(pattern, flags), name) for pattern, flags, name in self.INDEX_PATTERNS
        ]
        self._runner: RuleRunner[IndexGuessState] = RuleRunner('index', [
            TokenizerPreferredRule(),
            ForcedReplaceRule(),
            SameValueRule(),
            OutOfRangeRule(),
            FillEmptyRule(),
            KeepCurrentRule(),
        ])

    def extract(self, filename: str) -> Optional[float]:
        """
        Extract an episode number from a filename.

        Args:
            filename: File name without directory.

        Returns:
            The first parseable number in the cascade, or None.
        """
        cleaned = self._classifier.strip_noise(filename)
        for pattern, name in self._index_patterns:
            match = pattern.search(cleaned)
            if not match:
                continue
            try:
                index = float(match.group(1).strip('.'))
            except ValueError:
                logger.debug(f'模式 {name} 匹配到无效数字: {match.group(1)}')
                continue
            logger.debug(f'🔢 文件名 {filename} 匹配模式 {name}，集数 {index}')
            return index
        return None

    def guess(
        self,
        filename: str,
        current: Optional[float] = None,
        maximum: float = math.inf,
        options: Optional[ResolverConfig] = None,
        tokens: Optional[NamingTokens] = None
    ) -> float:
        """
        Decide the episode index for a file.

        Args:
            filename: File name without directory.
            current: Index already known by the caller.
            maximum: Highest plausible index.
            options: Resolver options.
            tokens: Naming tokens, consulted when the tokenizer is preferred.

        Returns:
            The chosen fractional index.
        """
        options = options or ResolverConfig()
        known = current or 0.0
        from_filename = self.extract(filename)

        from_tokenizer = None
        if options.always_get_episode_by_tokenizer and tokens is not None:
            from_tokenizer = tokens.episode_number

        state = IndexGuessState(
            current=known,
            from_filename=from_filename if from_filename is not None else known,
            maximum=maximum,
            force_replace=options.always_replace_episode_number,
            from_tokenizer=from_tokenizer,
        )
        outcome = self._runner.run(state)
        logger.info(f'🔢 {filename} 使用集数 {outcome.value} (规则: {outcome.rule_name})')
        return outcome.value
