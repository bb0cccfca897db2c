"""文件与数据编码工具模块。

提供源文件读取、输出写入以及 base64 / data URI 转换。
"""

import base64
import binascii
import os
import re
import tempfile
from pathlib import Path

from ..exceptions import CodecError, FilesystemError, handle_image_errors
from ..models.constants import ResolvedFormat
from .logging_helpers import get_logger
from .message_formatter import MessageFormatter


logger = get_logger()

DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")


@handle_image_errors("读取源文件", os_error=FilesystemError)
def read_source(file_path: Path) -> bytes:
    """读取源文件内容

    Raises:
        FilesystemError: 文件不存在、不是普通文件或无法读取
    """
    if not file_path.exists():
        raise FilesystemError(MessageFormatter.file_not_found(file_path))
    if not file_path.is_file():
        raise FilesystemError(MessageFormatter.not_a_file(file_path))
    return file_path.read_bytes()


@handle_image_errors("写入输出文件", os_error=FilesystemError)
def write_output(output_path: Path, data: bytes) -> None:
    """写入压缩结果

    先写入同目录下的临时文件再替换目标，覆盖原文件时不会留下半写的文件。
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=output_path.parent, prefix=f".{output_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
        os.replace(tmp_name, output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug(f"已写入 {output_path} ({len(data)} bytes)")


def decode_image_data(payload: str) -> bytes:
    """解码 data URI 或纯 base64 字符串

    Raises:
        CodecError: 不是合法的 base64 数据
    """
    encoded = DATA_URI_PREFIX.sub("", payload.strip(), count=1)
    try:
        return base64.b64decode(encoded, validate=False)
    except (binascii.Error, ValueError) as e:
        raise CodecError(f"Invalid base64 image data: {e}") from e


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def build_data_uri(data: bytes, target_format: ResolvedFormat) -> str:
    """构建 data URI，如 data:image/webp;base64,..."""
    return f"data:{target_format.mime_type};base64,{encode_base64(data)}"
