"""命令行入口。

用法: py-tinypng [options] [image.png|*.png|dir ...]
"""

import argparse
import sys
from collections.abc import Sequence

from . import __version__
from .compressor import TinyPNGCompressor
from .exceptions import ConfigurationError
from .models import Settings, TransferJob
from .settings_store import SettingsStore
from .utils.logging_helpers import configure_logging, get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()


def _key_status(settings: Settings) -> str:
    if not settings.has_credential:
        return "警告: 尚未设置 API key。"
    return f"当前 API key: {settings.masked_credential()}"


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """构建参数解析器，帮助信息中包含当前 API key 状态"""
    parser = argparse.ArgumentParser(
        prog="py-tinypng",
        usage="%(prog)s [options] [image.png|*.png|dir ...]",
        description="使用 TinyPNG 批量压缩图片。",
        epilog=_key_status(settings),
    )
    parser.add_argument("paths", nargs="*", help="文件、目录或 glob 模式")
    parser.add_argument("-k", "--api-key", help="保存默认的 TinyPNG API key")
    parser.add_argument(
        "-r",
        "--allow-rewrite",
        action="store_true",
        default=None,
        help="用压缩结果覆盖原文件",
    )
    parser.add_argument(
        "-n",
        "--allow-nonpng",
        action="store_true",
        default=None,
        help="允许压缩 jpg/jpeg 文件",
    )
    parser.add_argument("-p", "--postfix", help="不覆盖原文件时的输出文件名后缀")
    parser.add_argument("-j", "--max-workers", type=int, help="最大并发数")
    parser.add_argument("--settings", help="设置文件路径")
    parser.add_argument("--verbose", action="store_true", help="输出调试日志")
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _report_job(job: TransferJob) -> None:
    """输出单个文件的处理结果"""
    if job.success:
        print(
            MessageFormatter.job_succeeded(
                job.input_path, job.output_path, job.compression_ratio
            )
        )
    else:
        print(MessageFormatter.job_failed(job.input_path, job.error), file=sys.stderr)


def _error(message: str) -> None:
    print(f">_< {message}", file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """命令行主函数

    Returns:
        int: 进程退出码，只有配置错误时非零
    """
    argv = list(sys.argv[1:] if argv is None else argv)

    # 先解析 --settings 以便读取正确的设置文件
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--settings")
    pre.add_argument("--verbose", action="store_true")
    pre_args, _ = pre.parse_known_args(argv)

    configure_logging("DEBUG" if pre_args.verbose else None)
    store = SettingsStore(pre_args.settings)

    try:
        settings = store.load()
    except ConfigurationError as e:
        _error(e.message)
        return 1

    parser = build_parser(settings)
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)

    if args.max_workers is not None and args.max_workers <= 0:
        parser.error("--max-workers 必须大于 0")

    try:
        if args.api_key:
            settings = store.update(credential=args.api_key)
            print(f"*Ü* API key 已保存到 {store.path}")

        if not args.paths:
            if not args.api_key:
                parser.print_help()
            return 0

        settings = settings.with_overrides(
            allow_rewrite=args.allow_rewrite,
            allow_nonpng=args.allow_nonpng,
            postfix=args.postfix,
        )
        settings.require_credential()

        compressor = TinyPNGCompressor(settings, max_workers=args.max_workers)
        result = compressor.compress(args.paths, on_job_done=_report_job)
    except ConfigurationError as e:
        _error(e.message)
        return 1
    except ValueError as e:
        # 后缀等设置项校验失败
        _error(str(e))
        return 1

    if result.summary.total == 0:
        print(f"*Ü* {MessageFormatter.no_files_found()}")
    else:
        print(f"*Ü* 压缩完成！{result.summary.get_summary()}")
    return 0
