"""
Configuration module.

Contains Pydantic-based configuration classes for the episode resolver.
"""

import json
import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from src.core.exceptions import ConfigError, ConfigValidationError


class BangumiConfig(BaseModel):
    """Bangumi 元数据服务配置"""

    base_url: str = 'https://api.bgm.tv'
    access_token: str = ''
    user_agent: str = 'bangumi-episode-resolver/1.0 (https://github.com/bangumi-episode-resolver)'
    # 每页剧集数量（Bangumi API 上限为 200）
    page_size: int = Field(default=100, ge=1, le=200)
    # 响应缓存过期时间（秒），0 表示禁用缓存
    cache_ttl: int = Field(default=3600, ge=0)

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """去掉末尾的斜杠"""
        return v.rstrip('/')


class ResolverConfig(BaseModel):
    """剧集匹配选项（每次解析时显式传入）"""

    model_config = ConfigDict(validate_assignment=True)

    # 始终使用文件名中的集数
    always_replace_episode_number: bool = False
    # 优先使用命名解析器（guessit）提供的集数
    always_get_episode_by_tokenizer: bool = False
    # 找到已保存的剧集 ID 后跳过所有校验
    trust_existing_remote_id: bool = False
    # 远程请求超时时间（秒）
    request_timeout: float = Field(default=10.0, gt=0, le=300)
    # 多季度连续编号时最多追踪的续集数量
    max_season_hops: int = Field(default=10, ge=1, le=50)
    # 目录级覆盖配置文件名
    override_file_name: str = 'bangumi.ini'
    # 标题语言偏好
    translation_preference: Literal['localized', 'original'] = 'localized'


class LoggingConfig(BaseModel):
    """日志配置"""

    level: str = 'INFO'
    log_path: str = 'logs'

    @field_validator('level')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """统一转换为大写日志级别"""
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'unknown log level: {v}')
        return level


class AppConfig(BaseSettings):
    """主应用配置"""

    bangumi: BangumiConfig = Field(default_factory=BangumiConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        env_prefix='BANGUMI_RESOLVER_',
        env_nested_delimiter='__'
    )

    def get(self, key: str, default=None):
        """获取配置值，支持点分隔的嵌套键"""
        value = self
        for k in key.split('.'):
            if not hasattr(value, k):
                return default
            value = getattr(value, k)
        return value

    def set(self, key: str, value) -> bool:
        """设置配置值，支持点分隔的嵌套键"""
        keys = key.split('.')
        obj = self
        for k in keys[:-1]:
            if not hasattr(obj, k):
                return False
            obj = getattr(obj, k)
        if not hasattr(obj, keys[-1]):
            return False
        try:
            setattr(obj, keys[-1], value)
        except ValidationError as e:
            raise ConfigValidationError(
                f'配置项 {key} 的值无效',
                field_name=key,
                field_value=value,
                context={'errors': e.errors()}
            ) from e
        return True

    @classmethod
    def load(cls, config_path: str = None) -> 'AppConfig':
        """加载配置"""
        if config_path is None:
            config_path = os.getenv('CONFIG_PATH', 'config.json')

        if not os.path.exists(config_path):
            # 如果配置文件不存在，创建默认配置并保存
            config_instance = cls()
            config_instance.save(config_path)
            return config_instance

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(
                f'无法读取配置文件: {config_path}',
                context={'error': str(e)}
            ) from e

        try:
            return cls(**config_data)
        except ValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            field_name = '.'.join(str(p) for p in first.get('loc', ()))
            raise ConfigValidationError(
                f'配置文件校验失败: {config_path}',
                field_name=field_name or None,
                field_value=first.get('input'),
                context={'error_count': e.error_count()}
            ) from e

    def save(self, config_path: str = None):
        """保存配置"""
        if config_path is None:
            config_path = os.getenv('CONFIG_PATH', 'config.json')

        with open(config_path, 'w', encoding='utf-8') as f:
            f.write(self.model_dump_json(indent=2))
