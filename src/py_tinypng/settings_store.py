"""设置持久化模块。

负责读取和保存用户设置文件，核心流程只拿到不可变的 Settings 快照。
"""

from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .config import get_config
from .exceptions import ConfigurationError
from .models.settings import Settings
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()


class SettingsStore:
    """JSON 设置文件存储"""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else get_config().settings_path

    def load(self) -> Settings:
        """读取设置，文件不存在时返回默认值

        Raises:
            ConfigurationError: 文件内容无法解析
        """
        if not self.path.exists():
            logger.debug(f"设置文件不存在，使用默认设置: {self.path}")
            return Settings()

        try:
            return Settings.model_validate_json(self.path.read_text(encoding="utf-8"))
        except PydanticValidationError as e:
            raise ConfigurationError(
                MessageFormatter.operation_failed("解析设置文件", self.path, e),
                self.path,
            ) from e
        except OSError as e:
            raise ConfigurationError(
                MessageFormatter.operation_failed("读取设置文件", self.path, e),
                self.path,
            ) from e

    def save(self, settings: Settings) -> None:
        """保存设置"""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                MessageFormatter.operation_failed("保存设置文件", self.path, e),
                self.path,
            ) from e
        logger.debug(f"设置已保存: {self.path}")

    def update(self, **changes: Any) -> Settings:
        """修改并保存设置，返回新的快照"""
        settings = self.load().with_overrides(**changes)
        self.save(settings)
        return settings
