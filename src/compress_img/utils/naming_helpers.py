"""文件命名工具模块。

CLI 写盘时的输出路径策略。
"""

import os
from pathlib import Path

from ..models.compression_config import OutputNaming
from ..models.constants import ResolvedFormat


def absolute_path(path: str | Path) -> Path:
    """规范化的绝对路径（不解析符号链接）"""
    return Path(os.path.abspath(path))


def resolve_output_path(
    input_path: str | Path, target_format: ResolvedFormat, naming: OutputNaming
) -> Path:
    """生成输出路径

    - replace: 与输入文件的绝对路径相同（覆盖原文件）
    - 否则: 输入目录 / 文件名 + 后缀 + 格式扩展名（jpeg 使用 jpg）

    Args:
        input_path: 输入文件路径
        target_format: 输出格式
        naming: 命名策略

    Returns:
        Path: 输出文件路径
    """
    source = absolute_path(input_path)
    if naming.replace:
        return source

    return source.parent / f"{source.stem}{naming.suffix}.{target_format.extension}"
