"""文件过滤模块。

按扩展名策略筛选文件，并为每个文件生成传输任务。
"""

from collections.abc import Iterable
from pathlib import Path

from ..models.constants import ImageFormats
from ..models.settings import Settings
from ..models.transfer_job import TransferJob
from ..utils.logging_helpers import get_logger
from ..utils.naming_helpers import FileNamingStrategy


logger = get_logger()


class FileFilter:
    """文件过滤器"""

    def __init__(self, settings: Settings):
        self.settings = settings

    def accepts(self, path: Path) -> bool:
        """检查文件是否应被压缩：存在、是普通文件、扩展名符合策略"""
        try:
            if not path.is_file():
                return False
        except OSError as e:
            logger.debug(f"无法读取文件状态: {path} ({e})")
            return False
        return ImageFormats.matches(path.name, self.settings.allow_nonpng)

    def output_path_for(self, input_path: Path) -> Path:
        return FileNamingStrategy.resolve_output_path(
            input_path,
            allow_rewrite=self.settings.allow_rewrite,
            postfix=self.settings.postfix,
        )

    def build_jobs(self, paths: Iterable[Path]) -> list[TransferJob]:
        """生成传输任务列表，顺序与输入一致

        Args:
            paths: 已解析的文件路径

        Returns:
            list[TransferJob]: 每个被接受的文件对应一个任务
        """
        jobs = []
        for path in paths:
            path = Path(path)
            if not self.accepts(path):
                logger.debug(f"跳过文件: {path}")
                continue
            jobs.append(
                TransferJob(input_path=path, output_path=self.output_path_for(path))
            )
        return jobs
