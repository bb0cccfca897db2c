"""压缩请求模型。

定义单个压缩任务的输入参数和输出命名策略。
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import CompressionDefaults


_DEFAULTS = CompressionDefaults()


class OutputNaming(BaseModel):
    """输出路径策略（仅 CLI 写盘时使用）"""

    suffix: str = Field(_DEFAULTS.SUFFIX, description="输出文件名后缀")
    replace: bool = Field(False, description="是否覆盖原文件")


class CompressionRequest(BaseModel):
    """单个压缩任务

    source 为文件路径时从磁盘读取；为 bytes 时直接使用内存数据。
    naming 为 None 时结果保留在内存中，不写盘。
    """

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(description="文件名或批次序号")
    source: bytes | Path = Field(description="源文件路径或图像数据", repr=False)
    requested_format: str | None = Field(None, description="请求的输出格式")
    quality: int = Field(_DEFAULTS.QUALITY, description="压缩质量 1-100")
    naming: OutputNaming | None = Field(None, description="输出命名策略")

    @field_validator("quality")
    @classmethod
    def validate_quality(cls, v: int) -> int:
        if not _DEFAULTS.MIN_QUALITY <= v <= _DEFAULTS.MAX_QUALITY:
            raise ValueError(
                f"Quality must be between {_DEFAULTS.MIN_QUALITY} "
                f"and {_DEFAULTS.MAX_QUALITY}"
            )
        return v

    @property
    def is_file(self) -> bool:
        return isinstance(self.source, Path)
