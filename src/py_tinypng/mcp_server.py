"""TinyPNG 压缩 MCP 服务器。

把批量压缩能力以 MCP 工具的形式提供给客户端。
"""

import logging
from typing import Any

from fastmcp import FastMCP

from .compressor import TinyPNGCompressor
from .exceptions import ConfigurationError
from .models import BatchResult
from .settings_store import SettingsStore
from .utils.message_formatter import MessageFormatter


# MCP 服务器响应类型定义
MCPCompressionResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 服务器响应构建器，专门用于构建符合 MCP 协议的响应格式。"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def configuration_error(message: str) -> dict[str, Any]:
        return MCPResponseBuilder.error(message=message, error_type="configuration")

    @staticmethod
    def processing_error(message: str, operation: str | None = None) -> dict[str, Any]:
        details = {"operation": operation} if operation else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="processing",
            details=details,
        )

    @staticmethod
    def batch(result: BatchResult) -> dict[str, Any]:
        """把批量结果格式化为 MCP 响应"""
        summary = result.summary
        return {
            "success": summary.failed == 0,
            "total_files": summary.total,
            "successful_files": summary.succeeded,
            "failed_files": summary.failed,
            "success_rate": summary.get_success_rate(),
            "total_size_saved": result.get_total_size_saved(),
            "summary": summary.get_summary(),
            "results": [
                {
                    "input_path": str(job.input_path),
                    "output_path": str(job.output_path),
                    "status": job.status.value,
                    "compression_ratio": job.compression_ratio,
                    "error": job.error,
                    "error_code": job.error_code,
                }
                for job in result.jobs
            ],
        }


# 配置日志
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("TinyPNG 压缩服务")


@mcp.tool()
def compress_files(
    paths: list[str],
    allow_rewrite: bool | None = None,
    allow_nonpng: bool | None = None,
    postfix: str | None = None,
) -> MCPCompressionResponse:
    """使用 TinyPNG 批量压缩图片。

    Args:
        paths: 文件、目录或 glob 模式列表
        allow_rewrite: 是否覆盖原文件（默认读取设置文件）
        allow_nonpng: 是否允许 jpg/jpeg（默认读取设置文件）
        postfix: 不覆盖时的输出文件名后缀

    Returns:
        dict: 批量压缩结果，包含统计信息和每个文件的状态
    """
    try:
        settings = SettingsStore().load().with_overrides(
            allow_rewrite=allow_rewrite,
            allow_nonpng=allow_nonpng,
            postfix=postfix,
        )
        result = TinyPNGCompressor(settings).compress(paths)
        return MCPResponseBuilder.batch(result)

    except ConfigurationError as e:
        logger.error(e.message)
        return MCPResponseBuilder.configuration_error(e.message)
    except Exception as e:
        logger.error(MessageFormatter.operation_failed("批量压缩", ", ".join(paths), e))
        return MCPResponseBuilder.processing_error(str(e), "批量压缩")


def main() -> None:
    """启动 MCP 服务器"""
    logger.info("启动 TinyPNG 压缩 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
