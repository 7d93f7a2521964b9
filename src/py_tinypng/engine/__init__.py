"""批量处理引擎模块。

包含并发执行和批量协调等处理逻辑。
"""

from .batch import BatchCoordinator
from .concurrent_executor import ConcurrentExecutor


__all__ = [
    "BatchCoordinator",
    "ConcurrentExecutor",
]
