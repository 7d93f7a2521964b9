"""工具模块包。

提供纯工具函数，不包含业务逻辑。
"""

from .cleanup_helpers import TempFileManager
from .file_helpers import walk_files
from .logging_helpers import configure_logging, get_logger
from .message_formatter import MessageFormatter
from .naming_helpers import FileNamingStrategy


__all__ = [
    "FileNamingStrategy",
    "MessageFormatter",
    "TempFileManager",
    "configure_logging",
    "get_logger",
    "walk_files",
]
