"""数据模型包。

定义压缩请求、结果和 HTTP 请求体的数据结构。
"""

from .api_models import CompressFilesBody, CompressImageBody, DownloadBatchBody
from .compression_config import CompressionRequest, OutputNaming
from .compression_result import (
    BatchReport,
    CompressionOutcome,
    ErrorKind,
)
from .constants import (
    ImageFormats,
    ResolvedFormat,
    get_format_alias,
    to_resolved_format,
)


__all__ = [
    "BatchReport",
    "CompressFilesBody",
    "CompressImageBody",
    "CompressionOutcome",
    "CompressionRequest",
    "DownloadBatchBody",
    "ErrorKind",
    "ImageFormats",
    "OutputNaming",
    "ResolvedFormat",
    "get_format_alias",
    "to_resolved_format",
]
