"""
Infrastructure naming module.

Contains the release-name tokenizer used to read season, episode and volume
tokens from anime file names.
"""

from src.infrastructure.naming.guessit_tokenizer import GuessitTokenizer

__all__ = [
    'GuessitTokenizer',
]
