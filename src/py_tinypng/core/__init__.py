"""核心处理模块。

包含路径解析、文件过滤和传输引擎。
"""

from .file_filter import FileFilter
from .resolver import PathResolver, resolve_paths
from .transfer import TransferEngine


__all__ = [
    "FileFilter",
    "PathResolver",
    "TransferEngine",
    "resolve_paths",
]
