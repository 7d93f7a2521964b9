"""消息格式化工具模块。

提供统一的错误消息、状态消息格式化功能。
"""

from pathlib import Path


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def permission_error(path: str | Path, operation: str = "访问") -> str:
        """权限错误消息"""
        return f"权限错误，无法{operation}: {path}"

    @staticmethod
    def operation_failed(
        operation: str, target: str | Path, error: Exception | None = None
    ) -> str:
        """操作失败消息"""
        msg = f"{operation}失败: {target}"
        if error:
            msg += f" - {error}"
        return msg

    @staticmethod
    def format_error(operation: str, path: str | Path, error: Exception) -> str:
        """格式化通用错误消息"""
        return f"{operation}失败 [{path}]: {error}"

    @staticmethod
    def job_succeeded(
        input_path: str | Path, output_path: str | Path, ratio: float | None
    ) -> str:
        """单个文件压缩成功的状态行"""
        delta = f"-{ratio:.1f}%" if ratio is not None else "?"
        return f"{input_path} → {delta} → {output_path}"

    @staticmethod
    def job_failed(input_path: str | Path, error: str | None) -> str:
        """单个文件压缩失败的状态行"""
        return f"{input_path} → error: {error or '未知错误'}"

    @staticmethod
    def no_files_found() -> str:
        return "未找到需要压缩的文件"
