"""Markov 服务 Pydantic 模型定义。"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from src.domain.content_string import ContentString


class InputPayload(BaseModel):
    """`POST {base}/input` 请求体。"""

    model_config = ConfigDict(frozen=True)

    input: ContentString = Field(..., description="用于训练/入库的文本")


class GeneratePayload(BaseModel):
    """`POST {base}/generate` 请求体。

    两个字段都是可选的，但序列化时总会输出（缺省为 null，而不是省略键）。
    """

    model_config = ConfigDict(frozen=True)

    start: ContentString | None = Field(default=None, description="生成的起始文本")
    max_length: NonNegativeInt | None = Field(default=None, description="最大生成长度")


class MarkovClientConfig(BaseModel):
    """Markov 客户端配置类。"""

    base_url: str = Field(..., description="服务根地址")
    timeout: float | None = Field(
        default=60.0,
        gt=0,
        description="请求超时时间（秒），None 表示不限制",
    )
    headers: dict[str, str] = Field(default_factory=dict, description="附加请求头")

    @classmethod
    def from_settings(cls) -> "MarkovClientConfig":
        """从全局 Settings 加载配置。"""
        from src.shared.config import get_settings

        settings = get_settings()
        return cls(base_url=settings.base_url, timeout=settings.timeout)
