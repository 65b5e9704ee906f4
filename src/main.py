"""
Bangumi Episode Resolver Entry Point.

This module serves as the command line entry point. It resolves which
Bangumi episode a local media file represents and prints the result as JSON.
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

from dependency_injector import providers

from src.core.config import AppConfig
from src.core.domain.entities import EpisodeQuery
from src.core.exceptions import ConfigError, MetadataServiceError, ResolutionCancelledError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_MATCH = 1
EXIT_REMOTE_FAILURE = 2
EXIT_CONFIG_ERROR = 3


def setup_logging(log_path: str, level: str = 'INFO'):
    """配置日志：写入带日期的日志文件，同时输出到 stderr（stdout 用于 JSON 结果）"""
    os.makedirs(log_path, exist_ok=True)

    # 生成带日期的日志文件名
    today = datetime.now().strftime('%Y-%m-%d')
    log_file = os.path.join(log_path, f'resolver_{today}.log')

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stderr)
        ],
        force=True
    )


def build_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    # 所有子命令共用的参数
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--debug', action='store_true', help='启用debug模式')
    common.add_argument('--config', default=None, help='配置文件路径')

    parser = argparse.ArgumentParser(description='Bangumi 剧集匹配工具')
    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # 匹配命令
    resolve_parser = subparsers.add_parser(
        'resolve', parents=[common], help='匹配文件对应的 Bangumi 剧集'
    )
    resolve_parser.add_argument('path', help='媒体文件路径')
    resolve_parser.add_argument('--series-id', type=int, default=None, help='剧集条目 ID')
    resolve_parser.add_argument('--season-id', type=int, default=None, help='季度条目 ID')
    resolve_parser.add_argument('--episode-id', type=int, default=None, help='已保存的剧集 ID')
    resolve_parser.add_argument('--index', type=float, default=None, help='已知集数')
    resolve_parser.add_argument('--season', type=int, default=None, help='季数')

    # 分类命令（不访问网络）
    classify_parser = subparsers.add_parser(
        'classify', parents=[common], help='解析文件名（不访问网络）'
    )
    classify_parser.add_argument('path', help='媒体文件路径')

    return parser


def handle_resolve_command(args, container) -> int:
    """
    处理 resolve 命令。

    Returns:
        退出码：0 匹配成功，1 无匹配，2 远程服务失败或已取消
    """
    query = EpisodeQuery(
        path=args.path,
        index_number=args.index,
        parent_index_number=args.season,
        episode_id=args.episode_id,
        series_subject_id=args.series_id,
        season_subject_id=args.season_id,
        season_index_number=args.season,
    )

    metadata_service = container.metadata_service()
    try:
        metadata = metadata_service.get_metadata(query)
    except MetadataServiceError as e:
        logger.error(f'❌ 元数据服务请求失败: {e}')
        return EXIT_REMOTE_FAILURE
    except ResolutionCancelledError as e:
        logger.warning(f'🛑 匹配已取消: {e}')
        return EXIT_REMOTE_FAILURE

    if metadata is None:
        logger.warning(f'⚠️ 未找到 {args.path} 对应的条目')
        return EXIT_NO_MATCH

    print(json.dumps(metadata.to_dict(), ensure_ascii=False, indent=2))
    return EXIT_OK if metadata.is_remote_backed else EXIT_NO_MATCH


def handle_classify_command(args, container) -> int:
    """处理 classify 命令"""
    classifier = container.filename_classifier()
    extractor = container.index_extractor()
    tokenizer = container.tokenizer()
    options = container.resolver_options()

    filename = os.path.basename(args.path)
    classification = classifier.classify_path(args.path)
    tokens = tokenizer.tokenize(filename)
    index = extractor.guess(filename, options=options, tokens=tokens)

    result = {
        'path': args.path,
        'episode_type': classification.episode_type.name if classification.episode_type else None,
        'raw_token': classification.raw_token,
        'from_directory': classification.from_directory,
        'is_special': classifier.is_special(args.path),
        'index': index,
        'tokens': {
            'anime_title': tokens.anime_title,
            'episode_title': tokens.episode_title,
            'season': tokens.season,
            'volume': tokens.volume,
            'episode': tokens.episode,
            'episode_alt': tokens.episode_alt,
            'year': tokens.year,
            'type_token': tokens.type_token,
        },
    }
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """主程序入口"""
    from src.container import container

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    try:
        app_config = AppConfig.load(args.config)
    except ConfigError as e:
        print(f'配置加载失败: {e}', file=sys.stderr)
        return EXIT_CONFIG_ERROR
    container.app_config.override(providers.Object(app_config))

    setup_logging(app_config.logging.log_path, app_config.logging.level)

    # 启用debug模式
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.info('🐛 DEBUG模式已启用')

    if args.command == 'resolve':
        return handle_resolve_command(args, container)
    if args.command == 'classify':
        return handle_classify_command(args, container)

    parser.print_help()
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
