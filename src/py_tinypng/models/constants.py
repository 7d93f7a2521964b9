"""图像传输相关常量定义。

集中维护扩展名策略和远端协议字段，避免硬编码重复。
"""

from typing import Final


class ImageFormats:
    """扩展名策略"""

    # 默认只处理 PNG
    PNG_ONLY: Final[frozenset[str]] = frozenset({"png"})

    # 允许非 PNG 时的扩展名集合
    WITH_NONPNG: Final[frozenset[str]] = frozenset({"jpg", "jpeg", "png"})

    @classmethod
    def allowed_extensions(cls, allow_nonpng: bool) -> frozenset[str]:
        """根据设置返回允许的扩展名集合"""
        return cls.WITH_NONPNG if allow_nonpng else cls.PNG_ONLY

    @staticmethod
    def extension_token(file_name: str) -> str:
        """获取文件名最后一个 `.` 之后的部分（小写），无扩展名时返回空串"""
        if "." not in file_name:
            return ""
        return file_name.rsplit(".", 1)[1].lower()

    @classmethod
    def matches(cls, file_name: str, allow_nonpng: bool) -> bool:
        """检查文件名是否符合扩展名策略

        按子串匹配扩展名（如 `.pngx` 也会被接受），与旧版命令行工具的宽松行为保持一致。
        """
        token = cls.extension_token(file_name)
        if not token:
            return False
        return any(ext in token for ext in cls.allowed_extensions(allow_nonpng))


class RemoteProtocol:
    """远端压缩接口的协议常量"""

    # 压缩成功时返回的状态码
    CREATED: Final[int] = 201

    # 响应字段
    ERROR_FIELD: Final[str] = "error"
    MESSAGE_FIELD: Final[str] = "message"
    OUTPUT_FIELD: Final[str] = "output"
    INPUT_FIELD: Final[str] = "input"
    RATIO_FIELD: Final[str] = "ratio"
    SIZE_FIELD: Final[str] = "size"
    LOCATION_HEADER: Final[str] = "Location"
