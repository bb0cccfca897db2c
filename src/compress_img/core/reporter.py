"""压缩结果统计。

计算节省比例并组装单项结果与批量汇总。
"""

from collections.abc import Sequence
from pathlib import Path

from ..models.compression_result import BatchReport, CompressionOutcome
from ..models.constants import ResolvedFormat


BYTE_UNITS = ("Bytes", "KB", "MB", "GB")


def savings_percent(original_size: int, compressed_size: int) -> float:
    """节省百分比，保留一位小数

    原始大小为 0 时比例无意义，返回 0。文件变大时返回负数。
    """
    if original_size == 0:
        return 0.0
    return round((1 - compressed_size / original_size) * 100, 1)


def format_savings(value: float) -> str:
    """一位小数的字符串形式"""
    return f"{value:.1f}"


def format_bytes(size_bytes: int) -> str:
    """以 1024 为基数的人类可读大小，保留两位小数

    >>> format_bytes(1536)
    '1.5 KB'
    """
    if size_bytes <= 0:
        return "0 Bytes"
    index = 0
    value = float(size_bytes)
    while value >= 1024 and index < len(BYTE_UNITS) - 1:
        value /= 1024
        index += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {BYTE_UNITS[index]}"


def build_outcome(
    identifier: str,
    original_size: int,
    compressed: bytes,
    target_format: ResolvedFormat,
    output_path: Path | None = None,
) -> CompressionOutcome:
    """组装成功的单项结果

    写盘时只记录路径，否则保留压缩数据。
    """
    compressed_size = len(compressed)
    return CompressionOutcome(
        identifier=identifier,
        original_size=original_size,
        compressed_size=compressed_size,
        savings_percent=savings_percent(original_size, compressed_size),
        format=target_format,
        output_path=output_path,
        data=None if output_path is not None else compressed,
        success=True,
        error=None,
    )


def summarize(outcomes: Sequence[CompressionOutcome]) -> BatchReport:
    """汇总批量结果，只统计成功项，节省比例由总量计算"""
    successful = [o for o in outcomes if o.success]
    total_original = sum(o.original_size for o in successful)
    total_compressed = sum(o.compressed_size for o in successful)

    return BatchReport(
        success=True,
        results=list(outcomes),
        total_original_size=total_original,
        total_compressed_size=total_compressed,
        savings_percent=savings_percent(total_original, total_compressed),
    )
