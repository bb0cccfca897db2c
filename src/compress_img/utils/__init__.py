"""工具模块包。

提供纯工具函数，不包含业务逻辑。file_helpers 依赖异常模块，需按模块路径直接导入。
"""

from .logging_helpers import configure_logging, get_logger
from .message_formatter import MessageFormatter
from .naming_helpers import absolute_path, resolve_output_path


__all__ = [
    "MessageFormatter",
    "absolute_path",
    "configure_logging",
    "get_logger",
    "resolve_output_path",
]
