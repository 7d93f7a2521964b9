"""统一配置管理模块。

提供应用程序的全局配置管理，包括默认值、环境变量支持等。
用户级别的持久化设置（API key、命名后缀等）由 settings_store 负责。
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TransferDefaults:
    """网络传输相关的默认配置"""

    # 远端接口
    API_ENDPOINT: str = "https://api.tinypng.com/shrink"
    API_USERNAME: str = "api"

    # 超时设置（秒），同时作为单个任务的时限
    CONNECT_TIMEOUT: float = 10.0
    READ_TIMEOUT: float = 60.0

    # 下载写盘时的分块大小
    CHUNK_SIZE: int = 64 * 1024

    # 并发设置
    MAX_WORKERS: int = 4

    @property
    def timeout(self) -> tuple[float, float]:
        """requests 使用的 (connect, read) 超时"""
        return (self.CONNECT_TIMEOUT, self.READ_TIMEOUT)


@dataclass(frozen=True)
class DiscoveryDefaults:
    """文件查找相关的默认配置"""

    # 目录递归的最大深度
    MAX_DEPTH: int = 32

    # 默认输出文件名后缀
    POSTFIX: str = "_tiny"


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.transfer = TransferDefaults()
        self.discovery = DiscoveryDefaults()
        self.logging = LoggingDefaults()
        self.settings_path = Path.home() / ".config" / "py-tinypng" / "settings.json"

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        if endpoint := os.getenv("TINYPNG_ENDPOINT"):
            object.__setattr__(self.transfer, "API_ENDPOINT", endpoint)

        if max_workers := os.getenv("TINYPNG_MAX_WORKERS"):
            object.__setattr__(self.transfer, "MAX_WORKERS", int(max_workers))

        if timeout := os.getenv("TINYPNG_TIMEOUT"):
            object.__setattr__(self.transfer, "READ_TIMEOUT", float(timeout))

        if max_depth := os.getenv("TINYPNG_MAX_DEPTH"):
            object.__setattr__(self.discovery, "MAX_DEPTH", int(max_depth))

        if log_level := os.getenv("TINYPNG_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        if settings_path := os.getenv("TINYPNG_SETTINGS_PATH"):
            self.settings_path = Path(settings_path).expanduser()


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
