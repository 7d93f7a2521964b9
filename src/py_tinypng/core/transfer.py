"""传输引擎模块。

对单个文件执行两阶段的远端压缩：上传原图，再下载压缩结果并写入目标路径。
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import requests

from ..config import get_config
from ..exceptions import ErrorHandler, RemoteRejectionError, TransferError
from ..models.constants import RemoteProtocol
from ..models.transfer_job import TransferJob
from ..utils.cleanup_helpers import TempFileManager
from ..utils.logging_helpers import get_logger


logger = get_logger()


class TransferEngine:
    """传输引擎

    每次 transfer 调用只处理一个任务，并且只修改这个任务。
    任何错误都被记录到任务的终止状态中，不会向外抛出。
    """

    def __init__(
        self,
        credential: str,
        endpoint: str | None = None,
        timeout: tuple[float, float] | None = None,
        session_factory: Callable[[], requests.Session] | None = None,
    ):
        """初始化传输引擎

        Args:
            credential: TinyPNG API key
            endpoint: 压缩接口地址，默认使用配置
            timeout: (connect, read) 超时，默认使用配置
            session_factory: 创建 HTTP 会话的工厂，每个任务使用独立会话
        """
        defaults = get_config().transfer
        self.credential = credential
        self.endpoint = endpoint or defaults.API_ENDPOINT
        self.timeout = timeout or defaults.timeout
        self.username = defaults.API_USERNAME
        self.chunk_size = defaults.CHUNK_SIZE
        self.session_factory = session_factory or requests.Session

    def transfer(self, job: TransferJob) -> TransferJob:
        """执行压缩传输

        Args:
            job: 待处理的任务

        Returns:
            TransferJob: 处于终止状态的同一个任务
        """
        job.mark_in_flight()
        try:
            with self.session_factory() as session:
                location = self._submit(session, job)
                self._fetch(session, location, job.output_path)
        except Exception as e:
            return ErrorHandler.handle_transfer_error(e, job, "图像压缩")

        job.mark_succeeded()
        logger.info(f"压缩完成: {job.input_path} → {job.output_path}")
        return job

    def _submit(self, session: requests.Session, job: TransferJob) -> str:
        """上传原图，返回压缩结果的下载地址"""
        with open(job.input_path, "rb") as stream:
            response = session.post(
                self.endpoint,
                data=stream,
                auth=(self.username, self.credential),
                timeout=self.timeout,
            )

        body = self._parse_body(response, job.input_path)

        if RemoteProtocol.ERROR_FIELD in body:
            raise RemoteRejectionError(
                str(body[RemoteProtocol.ERROR_FIELD]),
                str(body.get(RemoteProtocol.MESSAGE_FIELD, "")),
                job.input_path,
            )

        if response.status_code != RemoteProtocol.CREATED:
            raise TransferError(
                f"意外的响应状态码: {response.status_code}", job.input_path
            )

        location = response.headers.get(RemoteProtocol.LOCATION_HEADER)
        if not location:
            raise TransferError("响应缺少 Location 头", job.input_path)

        self._record_output_info(job, body)
        return location

    @staticmethod
    def _parse_body(response: requests.Response, input_path: Path) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise TransferError(
                f"无法解析响应 (HTTP {response.status_code}): {e}", input_path
            ) from e

        if not isinstance(body, dict):
            raise TransferError(
                f"响应格式错误 (HTTP {response.status_code})", input_path
            )
        return body

    @staticmethod
    def _record_output_info(job: TransferJob, body: dict[str, Any]) -> None:
        """记录远端报告的压缩信息，仅用于展示"""
        output = body.get(RemoteProtocol.OUTPUT_FIELD) or {}
        source = body.get(RemoteProtocol.INPUT_FIELD) or {}

        ratio = output.get(RemoteProtocol.RATIO_FIELD)
        if isinstance(ratio, (int, float)):
            job.compression_ratio = (1 - ratio) * 100

        if isinstance(output.get(RemoteProtocol.SIZE_FIELD), int):
            job.output_size = output[RemoteProtocol.SIZE_FIELD]
        if isinstance(source.get(RemoteProtocol.SIZE_FIELD), int):
            job.input_size = source[RemoteProtocol.SIZE_FIELD]

    def _fetch(self, session: requests.Session, location: str, output_path: Path) -> None:
        """下载压缩结果，先写临时文件，成功后原子替换目标文件"""
        with TempFileManager() as temp_files:
            temp_path = temp_files.create_sibling(output_path)

            with session.get(location, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                with open(temp_path, "wb") as out:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            out.write(chunk)

            temp_files.commit(temp_path, output_path)
