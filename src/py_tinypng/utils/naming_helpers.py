"""文件命名工具模块。

提供统一的输出文件命名策略。
"""

from pathlib import Path


class FileNamingStrategy:
    """文件命名策略类"""

    @staticmethod
    def postfixed_name(file_name: str, postfix: str) -> str:
        """在最后一个扩展名之前插入后缀

        按 `.` 切分文件名：没有扩展名时直接追加后缀，否则把后缀追加到倒数第二段再拼回。

        Args:
            file_name: 文件名（不含目录）
            postfix: 后缀

        Returns:
            str: 带后缀的文件名

        Examples:
            >>> FileNamingStrategy.postfixed_name("photo.png", "_tiny")
            'photo_tiny.png'
            >>> FileNamingStrategy.postfixed_name("archive.tar.png", "_tiny")
            'archive.tar_tiny.png'
            >>> FileNamingStrategy.postfixed_name("README", "_tiny")
            'README_tiny'
        """
        parts = file_name.split(".")
        if len(parts) == 1:
            return f"{file_name}{postfix}"

        parts[-2] = f"{parts[-2]}{postfix}"
        return ".".join(parts)

    @staticmethod
    def resolve_output_path(input_path: Path, allow_rewrite: bool, postfix: str) -> Path:
        """计算输出路径

        Args:
            input_path: 输入文件路径
            allow_rewrite: 是否覆盖原文件
            postfix: 不覆盖时使用的后缀

        Returns:
            Path: 输出路径，只改动文件名部分
        """
        if allow_rewrite:
            return input_path
        return input_path.with_name(
            FileNamingStrategy.postfixed_name(input_path.name, postfix)
        )
