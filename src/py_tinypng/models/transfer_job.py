"""传输任务模型。

定义单个文件的传输任务及批量处理结果的数据结构。
"""

from enum import Enum
from pathlib import Path

from humanize import naturalsize
from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    """任务状态枚举"""

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED)


class TransferJob(BaseModel):
    """单个文件的压缩传输任务

    由文件过滤器创建，只在所属的传输引擎执行期间被修改。
    """

    input_path: Path = Field(description="输入文件路径")
    output_path: Path = Field(description="输出文件路径")
    status: JobStatus = Field(JobStatus.PENDING, description="任务状态")

    # 失败信息
    error: str | None = Field(None, description="错误信息")
    error_code: str | None = Field(None, description="远端返回的错误码")

    # 远端返回的压缩信息
    compression_ratio: float | None = Field(None, description="节省比例（百分比）")
    input_size: int | None = Field(None, description="原始大小（字节）")
    output_size: int | None = Field(None, description="压缩后大小（字节）")

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def success(self) -> bool:
        return self.status == JobStatus.SUCCEEDED

    @property
    def rewrites_input(self) -> bool:
        return self.input_path == self.output_path

    def mark_in_flight(self) -> None:
        self.status = JobStatus.IN_FLIGHT

    def mark_succeeded(self) -> None:
        self.status = JobStatus.SUCCEEDED
        self.error = None

    def mark_failed(self, error: str, error_code: str | None = None) -> None:
        self.status = JobStatus.FAILED
        self.error = error
        self.error_code = error_code

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小为人类可读格式"""
        return naturalsize(size_bytes, binary=True)

    def get_summary(self) -> str:
        """任务结果摘要"""
        if self.status == JobStatus.FAILED:
            return f"失败: {self.error}"
        if not self.is_terminal:
            return self.status.value

        parts = []
        if self.compression_ratio is not None:
            parts.append(f"-{self.compression_ratio:.1f}%")
        if self.input_size is not None and self.output_size is not None:
            parts.append(
                f"{self.format_size(self.input_size)} → "
                f"{self.format_size(self.output_size)}"
            )
        return " ".join(parts) or "完成"


class BatchSummary(BaseModel):
    """批量处理统计"""

    total: int = Field(0, ge=0, description="任务总数")
    succeeded: int = Field(0, ge=0, description="成功数量")
    failed: int = Field(0, ge=0, description="失败数量")

    @classmethod
    def from_jobs(cls, jobs: list[TransferJob]) -> "BatchSummary":
        """由任务的最终状态汇总"""
        succeeded = sum(1 for job in jobs if job.status == JobStatus.SUCCEEDED)
        failed = sum(1 for job in jobs if job.status == JobStatus.FAILED)
        return cls(total=len(jobs), succeeded=succeeded, failed=failed)

    def get_success_rate(self) -> float:
        """获取成功率（百分比）"""
        if self.total == 0:
            return 0.0
        return (self.succeeded / self.total) * 100

    def get_summary(self) -> str:
        if self.total == 0:
            return "未找到需要压缩的文件"
        return (
            f"共 {self.total} 个文件，成功 {self.succeeded}，失败 {self.failed} "
            f"(成功率 {self.get_success_rate():.1f}%)"
        )


class BatchResult(BaseModel):
    """批量处理结果"""

    jobs: list[TransferJob] = Field(default_factory=list, description="所有任务")
    summary: BatchSummary = Field(default_factory=BatchSummary, description="统计")

    def get_failed_jobs(self) -> list[TransferJob]:
        return [job for job in self.jobs if job.status == JobStatus.FAILED]

    def get_successful_jobs(self) -> list[TransferJob]:
        return [job for job in self.jobs if job.status == JobStatus.SUCCEEDED]

    def get_total_size_saved(self) -> int:
        """总节省大小"""
        return sum(
            max(0, job.input_size - job.output_size)
            for job in self.get_successful_jobs()
            if job.input_size is not None and job.output_size is not None
        )
