"""压缩结果模型。

定义单项压缩结果和批量汇总的数据结构。
"""

from enum import Enum
from pathlib import Path
from typing import Any

from humanize import naturalsize
from pydantic import BaseModel, Field

from .constants import ResolvedFormat


class ErrorKind(str, Enum):
    """失败类型"""

    INVALID_INPUT = "invalid_input"
    CODEC = "codec"
    FILESYSTEM = "filesystem"
    TIMEOUT = "timeout"
    UNEXPECTED = "unexpected"


class BaseResult(BaseModel):
    """结果基类，包含通用字段和方法"""

    success: bool = Field(description="是否成功")
    error: str | None = Field(None, description="错误信息")

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小（日志用）"""
        return naturalsize(size_bytes, binary=True)


class CompressionOutcome(BaseResult):
    """单项压缩结果"""

    identifier: str = Field(description="文件名或批次序号")
    original_size: int = Field(0, description="原始大小（字节）")
    compressed_size: int = Field(0, description="压缩后大小（字节）")
    savings_percent: float = Field(0.0, description="节省百分比，保留一位小数")
    format: ResolvedFormat | None = Field(None, description="实际输出格式")
    output_path: Path | None = Field(None, description="输出文件路径")
    data: bytes | None = Field(None, description="内存中的压缩数据", repr=False)
    error_kind: ErrorKind | None = Field(None, description="失败类型")

    def get_size_saved(self) -> int:
        """节省的字节数，文件变大时为负数"""
        return self.original_size - self.compressed_size

    def get_summary(self) -> str:
        """结果摘要（日志用）"""
        if not self.success:
            return f"失败: {self.error}"

        return (
            f"{self.format_size(self.original_size)} → "
            f"{self.format_size(self.compressed_size)} "
            f"({self.savings_percent:.1f}% 节省)"
        )


class BatchReport(BaseResult):
    """批量处理结果

    汇总数据只统计成功项，节省比例由总量计算（按大小加权）。
    """

    success: bool = Field(True, description="批次本身是否完成")
    results: list[CompressionOutcome] = Field(description="按输入顺序排列的结果")
    total_original_size: int = Field(0, description="成功项原始大小之和")
    total_compressed_size: int = Field(0, description="成功项压缩后大小之和")
    savings_percent: float = Field(0.0, description="整体节省百分比")

    def get_successful_items(self) -> list[CompressionOutcome]:
        return [r for r in self.results if r.success]

    def get_failed_items(self) -> list[CompressionOutcome]:
        return [r for r in self.results if not r.success]

    def get_total_count(self) -> int:
        return len(self.results)

    def get_success_count(self) -> int:
        return len(self.get_successful_items())

    def get_failure_count(self) -> int:
        return len(self.get_failed_items())

    def get_summary(self) -> str:
        """批量处理摘要（日志用）"""
        return (
            f"处理 {self.get_success_count()}/{self.get_total_count()} 个文件, "
            f"{self.format_size(self.total_original_size)} → "
            f"{self.format_size(self.total_compressed_size)} "
            f"({self.savings_percent:.1f}% 节省)"
        )

    def to_dict(self) -> dict[str, Any]:
        """序列化为 JSON 友好的字典（不含压缩数据）"""
        return {
            "success_count": self.get_success_count(),
            "total_count": self.get_total_count(),
            "total_original_size": self.total_original_size,
            "total_compressed_size": self.total_compressed_size,
            "savings_percent": self.savings_percent,
            "results": [
                r.model_dump(mode="json", exclude={"data"}) for r in self.results
            ],
        }
