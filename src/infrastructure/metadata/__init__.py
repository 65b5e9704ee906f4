"""
Infrastructure metadata module.

Contains adapters for fetching anime metadata from external sources.
"""

from src.infrastructure.metadata.bangumi_adapter import BangumiAdapter
from src.infrastructure.metadata.response_cache import ResponseCache

__all__ = [
    'BangumiAdapter',
    'ResponseCache',
]
