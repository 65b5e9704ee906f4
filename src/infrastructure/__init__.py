"""
基础设施层模块。

提供外部服务集成实现，包括：
- 元数据服务（Bangumi API 适配器、响应缓存）
- 命名解析（guessit）
- 目录覆盖配置（bangumi.ini）
"""

from src.infrastructure.metadata import BangumiAdapter, ResponseCache
from src.infrastructure.naming import GuessitTokenizer
from src.infrastructure.overrides import IniOverrideStore

__all__ = [
    # Metadata
    'BangumiAdapter',
    'ResponseCache',
    # Naming
    'GuessitTokenizer',
    # Overrides
    'IniOverrideStore',
]
