"""文件工具函数模块。

提供目录遍历相关的实用工具函数。
"""

import os
from collections.abc import Iterator
from pathlib import Path

from .logging_helpers import get_logger
from .message_formatter import MessageFormatter


logger = get_logger()


def walk_files(directory: str | Path, max_depth: int = 32) -> Iterator[Path]:
    """递归查找目录中的所有非目录条目。

    通过记录已访问目录的 (st_dev, st_ino) 避免符号链接循环，
    并通过 max_depth 限制递归深度。

    Args:
        directory: 搜索目录
        max_depth: 最大递归深度，0 表示只列出当前目录

    Yields:
        Path: 文件路径
    """
    directory = Path(directory)
    visited: set[tuple[int, int]] = set()
    yield from _walk(directory, 0, max_depth, visited)


def _walk(
    directory: Path,
    depth: int,
    max_depth: int,
    visited: set[tuple[int, int]],
) -> Iterator[Path]:
    try:
        stat = directory.stat()
    except OSError as e:
        logger.warning(MessageFormatter.operation_failed("读取目录", directory, e))
        return

    key = (stat.st_dev, stat.st_ino)
    if key in visited:
        logger.debug(f"跳过已访问的目录（可能是符号链接循环）: {directory}")
        return
    visited.add(key)

    try:
        entries = sorted(os.scandir(directory), key=lambda e: e.name)
    except PermissionError:
        logger.warning(MessageFormatter.permission_error(directory, "访问目录"))
        return
    except OSError as e:
        logger.warning(MessageFormatter.operation_failed("读取目录", directory, e))
        return

    for entry in entries:
        path = Path(entry.path)
        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False

        if not is_dir:
            yield path
        elif depth >= max_depth:
            logger.warning(f"超过最大递归深度 {max_depth}，跳过目录: {path}")
        else:
            yield from _walk(path, depth + 1, max_depth, visited)
