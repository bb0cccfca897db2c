"""编码参数策略。

各格式的参数固定如下，保证相同输入得到相同大小的输出：

- jpeg: quality + optimize/progressive（优化编码模式）
- png: quality（由编解码器解释为调色板量化）+ 最高压缩级别
- webp / avif: 仅 quality
"""

from typing import Any

from ..codec.base import Codec
from ..config import CompressionDefaults
from ..models.constants import ResolvedFormat


_DEFAULTS = CompressionDefaults()


def get_jpeg_params(quality: int) -> dict[str, Any]:
    return {
        "quality": quality,
        "optimize": True,
        "progressive": True,
    }


def get_png_params(quality: int) -> dict[str, Any]:
    # optimize=True 时 Pillow 会搜索最佳压缩方式
    return {
        "quality": quality,
        "compress_level": _DEFAULTS.PNG_COMPRESS_LEVEL,
        "optimize": True,
    }


def get_webp_params(quality: int) -> dict[str, Any]:
    return {"quality": quality}


def get_avif_params(quality: int) -> dict[str, Any]:
    return {"quality": quality}


def get_save_parameters(target_format: ResolvedFormat, quality: int) -> dict[str, Any]:
    """获取指定格式的保存参数"""
    match target_format:
        case ResolvedFormat.PNG:
            return get_png_params(quality)
        case ResolvedFormat.WEBP:
            return get_webp_params(quality)
        case ResolvedFormat.AVIF:
            return get_avif_params(quality)
        case _:
            return get_jpeg_params(quality)


def encode_image(
    codec: Codec, handle: Any, target_format: ResolvedFormat, quality: int
) -> bytes:
    """使用编解码器按格式策略编码图像"""
    params = get_save_parameters(target_format, quality)
    return codec.encode(handle, target_format, params)
