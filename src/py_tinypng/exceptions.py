"""传输异常处理模块。

定义统一的异常类和错误处理机制。任务级别的错误都在这里被转换为失败的任务状态，
只有配置前置条件错误会中止整个批次。
"""

from pathlib import Path

import requests

from .models.transfer_job import TransferJob
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()


# 统一的异常类型
class TinyPNGError(Exception):
    """压缩客户端错误基类"""

    def __init__(self, message: str, input_path: Path | None = None):
        super().__init__(message)
        self.message = message
        self.input_path = input_path


class ConfigurationError(TinyPNGError):
    """配置错误（如缺少 API key），会中止整个批次"""

    pass


class TransferError(TinyPNGError):
    """网络传输或协议错误"""

    pass


class RemoteRejectionError(TransferError):
    """远端在响应体中返回了 error 字段"""

    def __init__(
        self,
        code: str,
        remote_message: str,
        input_path: Path | None = None,
    ):
        super().__init__(f"{code}: {remote_message}", input_path)
        self.code = code
        self.remote_message = remote_message


class ErrorHandler:
    """统一错误处理器

    提供标准化的错误处理和日志记录功能。
    """

    @staticmethod
    def _log_error(
        operation: str, path: Path, error: Exception, level: str = "error"
    ) -> None:
        """标准化的错误日志记录

        Args:
            operation: 操作名称（如"上传"、"下载"等）
            path: 相关文件路径
            error: 异常对象
            level: 日志级别 ("error", "warning", "debug")
        """
        log_msg = MessageFormatter.format_error(operation, path, error)
        getattr(logger, level, logger.error)(log_msg)

    @staticmethod
    def handle_transfer_error(
        error: Exception, job: TransferJob, operation: str = "图像压缩"
    ) -> TransferJob:
        """把异常转换为失败的任务状态，支持 match-case 错误分发

        Args:
            error: 异常对象
            job: 出错的任务
            operation: 操作名称

        Returns:
            TransferJob: 已标记为失败的任务
        """
        match error:
            case RemoteRejectionError() as rre:
                # 远端返回的错误信息原样保留
                ErrorHandler._log_error(operation, job.input_path, rre, "warning")
                job.mark_failed(rre.message, error_code=rre.code)
            case TransferError() as te:
                ErrorHandler._log_error(operation, job.input_path, te, "warning")
                job.mark_failed(te.message)
            case requests.Timeout() as to:
                ErrorHandler._log_error(
                    f"{operation} - 请求超时", job.input_path, to, "error"
                )
                job.mark_failed(f"请求超时: {to}")
            case requests.RequestException() as re_:
                ErrorHandler._log_error(
                    f"{operation} - 网络错误", job.input_path, re_, "error"
                )
                job.mark_failed(f"网络错误: {re_}")
            case PermissionError() as pe:
                ErrorHandler._log_error(
                    f"{operation} - 权限错误", job.input_path, pe, "error"
                )
                job.mark_failed(f"权限错误: {pe}")
            case OSError() as ose:
                ErrorHandler._log_error(
                    f"{operation} - 系统错误", job.input_path, ose, "error"
                )
                job.mark_failed(f"文件操作失败: {ose}")
            case _:
                ErrorHandler._log_error(operation, job.input_path, error, "error")
                job.mark_failed(f"{operation}: {error}")
        return job
