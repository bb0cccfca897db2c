"""核心模块包。

格式决策、编码参数策略、结果统计和单任务压缩流程。
"""

from .compression_engine import process_image
from .encoder import encode_image, get_save_parameters
from .reporter import (
    build_outcome,
    format_bytes,
    format_savings,
    savings_percent,
    summarize,
)
from .resolver import resolve_format


__all__ = [
    "build_outcome",
    "encode_image",
    "format_bytes",
    "format_savings",
    "get_save_parameters",
    "process_image",
    "resolve_format",
    "savings_percent",
    "summarize",
]
