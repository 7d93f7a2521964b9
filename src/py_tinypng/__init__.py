"""TinyPNG 批量压缩客户端。

查找图片文件，提交到 TinyPNG 压缩接口，并按命名策略写回磁盘。
"""

__version__ = "0.4.0"
__author__ = "crper"
__description__ = "TinyPNG 批量压缩客户端"

# 核心功能导出
from .compressor import TinyPNGCompressor
from .models import BatchResult, BatchSummary, Settings, TransferJob


__all__ = [
    "BatchResult",
    "BatchSummary",
    "Settings",
    "TinyPNGCompressor",
    "TransferJob",
    "get_version",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
