"""输出格式决策。"""

from ..codec.base import Codec
from ..models.constants import ImageFormats, ResolvedFormat, to_resolved_format
from ..utils.logging_helpers import get_logger


logger = get_logger()


def resolve_format(
    requested_format: str | None, source: bytes, codec: Codec
) -> ResolvedFormat:
    """确定最终输出格式。

    - 显式请求了格式：支持的格式直接使用（jpg 归一为 jpeg），其余回退 jpeg
    - 未请求：读取源图格式，无法识别或不支持时回退 jpeg

    Args:
        requested_format: 请求的格式字符串，None 或空串表示按源图推断
        source: 源图像数据
        codec: 用于读取源图格式的编解码器

    Returns:
        ResolvedFormat: 输出格式
    """
    if requested_format and requested_format.strip():
        resolved = to_resolved_format(requested_format)
        if resolved is None:
            logger.debug(f"未知的请求格式 {requested_format!r}，回退到 jpeg")
            return ImageFormats.FALLBACK
        return resolved

    detected = codec.introspect_format(source)
    resolved = to_resolved_format(detected)
    if resolved is None:
        logger.debug(f"源图格式 {detected!r} 不支持输出，回退到 jpeg")
        return ImageFormats.FALLBACK
    return resolved
