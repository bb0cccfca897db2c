"""编解码器包。"""

from .base import Codec
from .pillow_codec import PillowCodec


__all__ = [
    "Codec",
    "PillowCodec",
]
