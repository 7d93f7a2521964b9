"""数据模型包。

定义设置、传输任务和批量结果的数据结构。
"""

from .constants import ImageFormats, RemoteProtocol
from .settings import Settings
from .transfer_job import BatchResult, BatchSummary, JobStatus, TransferJob


__all__ = [
    "BatchResult",
    "BatchSummary",
    "ImageFormats",
    "JobStatus",
    "RemoteProtocol",
    "Settings",
    "TransferJob",
]
