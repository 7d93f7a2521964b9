"""TinyPNG 批量压缩器接口。

把路径解析、文件过滤和批量传输串联成简洁的用户接口。
"""

from collections.abc import Callable, Iterable
from pathlib import Path

from .core.file_filter import FileFilter
from .core.resolver import PathResolver
from .engine.batch import BatchCoordinator, EngineFactory, default_engine_factory
from .models import BatchResult, Settings, TransferJob
from .utils.logging_helpers import get_logger


logger = get_logger()


class TinyPNGCompressor:
    """TinyPNG 批量压缩器。

    Examples:
        >>> compressor = TinyPNGCompressor(Settings(credential="KEY"))
        >>> result = compressor.compress(["images/", "*.png"])
        >>> print(result.summary.get_summary())
    """

    def __init__(
        self,
        settings: Settings,
        max_workers: int | None = None,
        max_depth: int | None = None,
        engine_factory: EngineFactory = default_engine_factory,
    ):
        """初始化压缩器。

        Args:
            settings: 设置快照
            max_workers: 最大并发数
            max_depth: 目录递归最大深度
            engine_factory: 传输引擎工厂
        """
        self.settings = settings
        self.resolver = PathResolver(max_depth=max_depth)
        self.file_filter = FileFilter(settings)
        self.coordinator = BatchCoordinator(
            max_workers=max_workers, engine_factory=engine_factory
        )

    def collect_jobs(self, patterns: Iterable[str | Path]) -> list[TransferJob]:
        """解析路径参数并生成任务列表"""
        paths = self.resolver.resolve(patterns)
        jobs = self.file_filter.build_jobs(paths)
        logger.debug(f"解析到 {len(paths)} 个路径，生成 {len(jobs)} 个任务")
        return jobs

    def compress(
        self,
        patterns: Iterable[str | Path],
        on_job_done: Callable[[TransferJob], None] | None = None,
    ) -> BatchResult:
        """压缩所有匹配的文件

        Args:
            patterns: 路径参数（文件、目录或 glob 模式）
            on_job_done: 每个任务结束时的回调

        Returns:
            BatchResult: 批量处理结果

        Raises:
            ConfigurationError: 有待处理文件但未设置 API key
        """
        jobs = self.collect_jobs(patterns)
        return self.coordinator.run(jobs, self.settings, on_job_done=on_job_done)
