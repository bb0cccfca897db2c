"""图像压缩 MCP 服务器。

以 MCP 工具的形式提供与 CLI、HTTP 服务相同的压缩能力。
"""

import logging
from typing import Any

from fastmcp import FastMCP

from .compressor import ImageCompressor
from .core.reporter import format_savings
from .exceptions import ValidationError
from .utils.file_helpers import build_data_uri
from .utils.logging_helpers import configure_logging


MCPResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 响应构建器"""

    @staticmethod
    def error(message: str, error_type: str = "general") -> MCPResponse:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型，与 ErrorKind 取值一致

        Returns:
            dict: 标准化的错误响应
        """
        return {
            "success": False,
            "error": message,
            "error_type": error_type,
        }


logger = logging.getLogger(__name__)

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("图像压缩服务")

# 全局压缩器实例
compressor = ImageCompressor()


@mcp.tool()
def compress_files(
    paths: list[str],
    quality: int = 80,
    format: str | None = None,
    suffix: str = "-compressed",
    replace: bool = False,
) -> MCPResponse:
    """批量压缩磁盘上的图像文件

    Args:
        paths: 图像文件路径列表
        quality: 压缩质量 1-100
        format: 输出格式 jpeg/png/webp/avif，None 为保持源格式
        suffix: 输出文件名后缀
        replace: 是否覆盖原文件

    Returns:
        dict: 按输入顺序排列的结果和成功项汇总
    """
    if not paths:
        return MCPResponseBuilder.error("No files provided", "invalid_input")

    try:
        report = compressor.compress_files(
            paths, quality=quality, format=format, suffix=suffix, replace=replace
        )
    except ValidationError as e:
        return MCPResponseBuilder.error(e.message, e.kind.value)

    return {"success": True, **report.to_dict()}


@mcp.tool()
def compress_image_data(
    image_data: str,
    quality: int = 80,
    format: str | None = None,
) -> MCPResponse:
    """压缩 base64 / data URI 形式的图像数据

    Args:
        image_data: data URI 或纯 base64 字符串
        quality: 压缩质量 1-100
        format: 输出格式，None 为保持源格式

    Returns:
        dict: 与 HTTP /api/compress 相同结构的结果
    """
    try:
        outcome = compressor.compress_data(image_data, quality=quality, format=format)
    except ValidationError as e:
        return MCPResponseBuilder.error(e.message, e.kind.value)

    if not outcome.success:
        kind = outcome.error_kind.value if outcome.error_kind else "general"
        return MCPResponseBuilder.error(outcome.error or "Compression failed", kind)

    return {
        "success": True,
        "compressedImage": build_data_uri(outcome.data or b"", outcome.format),
        "originalSize": outcome.original_size,
        "compressedSize": outcome.compressed_size,
        "savings": format_savings(outcome.savings_percent),
        "format": outcome.format.value,
    }


def main() -> None:
    """启动 MCP 服务器"""
    configure_logging()
    logger.info("启动图片压缩 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
