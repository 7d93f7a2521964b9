"""批量处理模块。

驱动所有传输任务执行到终止状态，并汇总成功与失败的数量。
"""

from collections.abc import Callable, Sequence

from ..config import get_config
from ..core.transfer import TransferEngine
from ..models.settings import Settings
from ..models.transfer_job import BatchResult, BatchSummary, JobStatus, TransferJob
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .concurrent_executor import ConcurrentExecutor


logger = get_logger()

EngineFactory = Callable[[Settings], TransferEngine]


def default_engine_factory(settings: Settings) -> TransferEngine:
    return TransferEngine(credential=settings.credential)


class BatchCoordinator:
    """批量任务协调器

    单个任务的失败只体现在统计结果中，不会中止其他任务。
    """

    def __init__(
        self,
        max_workers: int | None = None,
        engine_factory: EngineFactory = default_engine_factory,
    ):
        """初始化批量协调器

        Args:
            max_workers: 最大并发数，默认使用配置
            engine_factory: 根据设置创建传输引擎的工厂
        """
        self.max_workers = max_workers or get_config().transfer.MAX_WORKERS
        self.engine_factory = engine_factory
        self.concurrent_executor = ConcurrentExecutor(self.max_workers)

    def run(
        self,
        jobs: Sequence[TransferJob],
        settings: Settings,
        on_job_done: Callable[[TransferJob], None] | None = None,
    ) -> BatchResult:
        """执行所有任务

        Args:
            jobs: 传输任务列表
            settings: 设置快照
            on_job_done: 每个任务结束时的回调，在当前线程中串行调用

        Returns:
            BatchResult: 批量处理结果

        Raises:
            ConfigurationError: 未设置 API key
        """
        if not jobs:
            logger.info(MessageFormatter.no_files_found())
            return BatchResult(jobs=[], summary=BatchSummary())

        settings.require_credential()
        engine = self.engine_factory(settings)

        tally = {JobStatus.SUCCEEDED: 0, JobStatus.FAILED: 0}

        def record(job: TransferJob) -> None:
            # 只在收集结果的线程中调用
            tally[job.status] = tally.get(job.status, 0) + 1
            if on_job_done is not None:
                on_job_done(job)

        logger.info(f"开始压缩 {len(jobs)} 个文件，并发数 {self.max_workers}")
        self.concurrent_executor.execute_tasks(
            jobs=jobs,
            task_function=engine.transfer,
            on_result=record,
        )

        summary = BatchSummary(
            total=len(jobs),
            succeeded=tally[JobStatus.SUCCEEDED],
            failed=tally[JobStatus.FAILED],
        )
        logger.info(summary.get_summary())
        return BatchResult(jobs=list(jobs), summary=summary)
