"""清理工具模块。

提供临时文件管理和原子写入功能。
"""

import os
import tempfile
from pathlib import Path
from typing import Any

from .logging_helpers import get_logger


logger = get_logger()


class TempFileManager:
    """临时文件管理器"""

    def __init__(self):
        self.temp_files: set[Path] = set()

    def register_temp_file(self, file_path: Path) -> None:
        """注册临时文件"""
        self.temp_files.add(file_path)

    def create_sibling(self, target: Path) -> Path:
        """在目标文件所在目录创建临时文件并注册

        临时文件与目标在同一目录，保证之后的 os.replace 是原子操作。
        """
        fd, name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".part"
        )
        os.close(fd)
        temp_path = Path(name)
        self.register_temp_file(temp_path)
        return temp_path

    def commit(self, temp_path: Path, target: Path) -> None:
        """把临时文件原子地替换到目标路径"""
        os.replace(temp_path, target)
        self.temp_files.discard(temp_path)

    def cleanup_temp_files(self) -> int:
        """清理所有注册的临时文件"""
        cleaned_count = 0
        for file_path in self.temp_files:
            try:
                if file_path.exists():
                    file_path.unlink()
                    cleaned_count += 1
                    logger.debug(f"已清理临时文件: {file_path}")
            except OSError as e:
                logger.warning(f"清理临时文件失败 {file_path}: {e}")

        self.temp_files.clear()
        return cleaned_count

    def __enter__(self):
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """上下文管理器退出时清理临时文件"""
        # 忽略异常信息，总是清理临时文件
        del exc_type, exc_val, exc_tb  # 明确表示这些参数未使用
        self.cleanup_temp_files()
