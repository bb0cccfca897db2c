"""本地图像压缩工具。

基于 Pillow 的图像压缩，提供命令行、HTTP 服务和 MCP 三种入口。
"""

__version__ = "1.0.0"
__description__ = "Fast local image compression tool built on Pillow"

# 核心功能导出
from .compressor import ImageCompressor, compress_files
from .models.compression_result import BatchReport, CompressionOutcome


__all__ = [
    "BatchReport",
    "CompressionOutcome",
    "ImageCompressor",
    "compress_files",
    "get_version",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
