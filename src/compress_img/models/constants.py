"""图像格式相关常量定义。

输出格式固定为 jpeg/png/webp/avif 四种，其他格式一律回退到 jpeg。
"""

from enum import Enum
from typing import Final


class ResolvedFormat(str, Enum):
    """最终确定的输出编码格式"""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    AVIF = "avif"

    @property
    def extension(self) -> str:
        """写盘时使用的扩展名（不含点）"""
        return ImageFormats.PREFERRED_EXTENSIONS.get(self.value, self.value)

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @property
    def pillow_name(self) -> str:
        """Pillow 保存时使用的格式名"""
        return self.value.upper()


class ImageFormats:
    """格式别名与扩展名映射"""

    # 用户友好的别名
    ALIASES: Final[dict[str, str]] = {
        "jpg": "jpeg",
    }

    # 首选扩展名（jpeg 写盘时使用 jpg）
    PREFERRED_EXTENSIONS: Final[dict[str, str]] = {
        "jpeg": "jpg",
    }

    FALLBACK: Final[ResolvedFormat] = ResolvedFormat.JPEG


def get_format_alias(format_str: str) -> str:
    """获取格式的标准名称"""
    format_lower = format_str.strip().lower()
    return ImageFormats.ALIASES.get(format_lower, format_lower)


def to_resolved_format(format_str: str | None) -> ResolvedFormat | None:
    """将格式字符串映射为 ResolvedFormat，不支持时返回 None"""
    if not format_str:
        return None
    try:
        return ResolvedFormat(get_format_alias(format_str))
    except ValueError:
        return None
