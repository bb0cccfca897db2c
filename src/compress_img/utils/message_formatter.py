"""消息格式化工具模块。

提供统一的错误消息格式化功能。面向用户的消息使用英文，
与 CLI 输出和 HTTP 响应保持一致。
"""

from pathlib import Path
from typing import Any


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def file_not_found(file_path: str | Path) -> str:
        """文件不存在错误消息"""
        return f"File not found: {file_path}"

    @staticmethod
    def not_a_file(file_path: str | Path) -> str:
        """路径不是文件错误消息"""
        return f"Not a regular file: {file_path}"

    @staticmethod
    def permission_error(path: str | Path, operation: str = "access") -> str:
        """权限错误消息"""
        return f"Permission denied, cannot {operation}: {path}"

    @staticmethod
    def quality_out_of_range(min_quality: int, max_quality: int) -> str:
        """质量参数越界错误消息"""
        return f"Quality must be between {min_quality} and {max_quality}"

    @staticmethod
    def unsupported_image(detail: Any) -> str:
        """无法识别的图像数据"""
        return f"Input contains unsupported image format: {detail}"

    @staticmethod
    def item_timeout(identifier: str, seconds: float) -> str:
        """单项超时消息"""
        return f"Timed out after {seconds:g}s: {identifier}"

    @staticmethod
    def format_error(operation: str, path: str | Path, error: Exception) -> str:
        """格式化通用错误消息（日志用）"""
        return f"{operation}失败 [{path}]: {error}"
