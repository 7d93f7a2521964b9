"""路径解析模块。

把用户传入的路径参数（字面路径、glob 模式、目录）展开为去重后的文件绝对路径。
"""

import glob
import os
from collections.abc import Iterable
from pathlib import Path

from ..config import get_config
from ..utils.file_helpers import walk_files
from ..utils.logging_helpers import get_logger


logger = get_logger()


class PathResolver:
    """路径解析器

    展开失败（如路径不存在、模式无匹配）不算错误，只是没有结果；
    文件是否存在、类型是否合适由文件过滤器判断。
    """

    def __init__(self, max_depth: int | None = None):
        self.max_depth = (
            max_depth if max_depth is not None else get_config().discovery.MAX_DEPTH
        )

    def resolve(self, patterns: Iterable[str | Path]) -> list[Path]:
        """展开路径参数

        Args:
            patterns: 用户传入的路径参数

        Returns:
            list[Path]: 去重后的绝对路径，保持首次出现的顺序，不包含目录
        """
        seen: set[Path] = set()
        resolved: list[Path] = []

        for pattern in patterns:
            for path in self._expand(str(pattern)):
                absolute = Path(os.path.abspath(path))
                if absolute not in seen:
                    seen.add(absolute)
                    resolved.append(absolute)

        logger.debug(f"路径解析完成: {len(resolved)} 个文件")
        return resolved

    def _expand(self, pattern: str) -> list[Path]:
        """展开单个路径参数"""
        expanded = os.path.expanduser(pattern)

        # 字面路径优先，避免文件名中的 [] 等字符被当作模式
        if os.path.lexists(expanded):
            candidates = [expanded]
        else:
            candidates = sorted(glob.glob(expanded, recursive=True))
            if not candidates:
                logger.debug(f"没有匹配的路径: {pattern}")

        paths: list[Path] = []
        for candidate in candidates:
            path = Path(candidate)
            if _is_dir(path):
                paths.extend(walk_files(path, max_depth=self.max_depth))
            else:
                paths.append(path)
        return paths


def _is_dir(path: Path) -> bool:
    # 无法 stat 的路径交给文件过滤器排除
    try:
        return path.is_dir()
    except OSError:
        return False


def resolve_paths(
    patterns: Iterable[str | Path], max_depth: int | None = None
) -> list[Path]:
    """便捷的路径解析函数"""
    return PathResolver(max_depth=max_depth).resolve(patterns)
