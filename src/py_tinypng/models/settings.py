"""用户设置模型。

对应持久化的设置文件，核心流程只读取其不可变快照。
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..config import DiscoveryDefaults


class Settings(BaseModel):
    """用户设置快照"""

    model_config = ConfigDict(frozen=True)

    # 兼容旧版设置文件中的 api_key 字段
    credential: str = Field(
        "",
        validation_alias=AliasChoices("credential", "api_key"),
        description="TinyPNG API key",
    )
    allow_rewrite: bool = Field(False, description="是否直接覆盖原文件")
    allow_nonpng: bool = Field(False, description="是否允许 jpg/jpeg 文件")
    postfix: str = Field(
        DiscoveryDefaults.POSTFIX, min_length=1, description="输出文件名后缀"
    )

    @property
    def has_credential(self) -> bool:
        return bool(self.credential.strip())

    def require_credential(self) -> None:
        """确认 API key 已设置

        Raises:
            ConfigurationError: API key 为空时
        """
        # 导入 ConfigurationError（避免循环导入）
        from ..exceptions import ConfigurationError

        if not self.has_credential:
            raise ConfigurationError(
                "TinyPNG API key 为空。请在 https://tinypng.com/developers 申请，"
                "并通过 --api-key 保存。"
            )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """返回应用覆盖值后的新快照，值为 None 的项被忽略"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return self.model_validate({**self.model_dump(), **changes})

    def masked_credential(self) -> str:
        """用于展示的脱敏 API key"""
        key = self.credential.strip()
        if len(key) <= 8:
            return "*" * len(key)
        return f"{key[:4]}{'*' * (len(key) - 8)}{key[-4:]}"
