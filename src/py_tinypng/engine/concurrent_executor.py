"""并发执行器模块。

提供通用的并发任务执行功能，每个任务在线程池中独立运行。
"""

from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from ..exceptions import ErrorHandler
from ..models.transfer_job import TransferJob
from ..utils.logging_helpers import get_logger


logger = get_logger()


class ConcurrentExecutor:
    """通用并发执行器

    任务之间没有依赖，完成顺序由网络和磁盘延迟决定。
    结果在调用线程中逐个收集，回调也只在调用线程中串行执行。
    """

    def __init__(self, max_workers: int = 4):
        """初始化并发执行器

        Args:
            max_workers: 最大并发数，限制同时连接远端的数量
        """
        if max_workers <= 0:
            raise ValueError("max_workers 必须大于 0")
        self.max_workers = max_workers

    def execute_tasks(
        self,
        jobs: Sequence[TransferJob],
        task_function: Callable[[TransferJob], TransferJob],
        on_result: Callable[[TransferJob], None] | None = None,
    ) -> list[TransferJob]:
        """执行并发任务

        Args:
            jobs: 任务列表
            task_function: 处理单个任务的函数
            on_result: 每个任务到达终止状态时的回调

        Returns:
            list[TransferJob]: 按完成顺序排列的任务
        """
        if not jobs:
            return []

        results: list[TransferJob] = []
        workers = min(self.max_workers, len(jobs))

        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="tinypng"
        ) as executor:
            # 提交任务阶段
            future_to_job = self._submit_tasks(executor, jobs, task_function, results)

            # 收集结果阶段
            self._collect_results(future_to_job, results, on_result)

        return results

    def _submit_tasks(
        self,
        executor: ThreadPoolExecutor,
        jobs: Sequence[TransferJob],
        task_function: Callable[[TransferJob], TransferJob],
        results: list[TransferJob],
    ) -> dict[Future, TransferJob]:
        """提交任务到执行器"""
        future_to_job = {}

        for job in jobs:
            try:
                future = executor.submit(task_function, job)
                future_to_job[future] = job
            except RuntimeError as e:
                results.append(ErrorHandler.handle_transfer_error(e, job, "任务提交"))

        return future_to_job

    def _collect_results(
        self,
        future_to_job: dict[Future, TransferJob],
        results: list[TransferJob],
        on_result: Callable[[TransferJob], None] | None,
    ) -> None:
        """收集任务执行结果"""
        for future in as_completed(future_to_job):
            job = future_to_job[future]

            try:
                result = future.result()
            except Exception as e:
                result = ErrorHandler.handle_transfer_error(e, job, "并发任务处理")

            if result.success:
                logger.debug(f"处理成功: {job.input_path}")
            else:
                logger.warning(f"处理失败: {job.input_path} - {result.error}")

            results.append(result)
            if on_result is not None:
                on_result(result)
