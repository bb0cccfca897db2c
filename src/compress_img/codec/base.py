"""编解码能力抽象。

压缩流程只通过这里定义的接口与图像库交互，具体实现见 pillow_codec。
"""

from abc import ABC, abstractmethod
from typing import Any

from ..models.constants import ResolvedFormat


class Codec(ABC):
    """图像编解码器接口

    ImageHandle 的具体类型由实现决定，调用方只负责在 decode 与 encode 之间传递。
    """

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """解码图像数据，返回图像句柄

        Raises:
            CodecError: 数据损坏或格式不支持
        """

    @abstractmethod
    def encode(
        self, handle: Any, target_format: ResolvedFormat, params: dict[str, Any]
    ) -> bytes:
        """按目标格式和参数编码图像

        Raises:
            CodecError: 编码失败或编码器不可用
        """

    @abstractmethod
    def introspect_format(self, data: bytes) -> str | None:
        """读取图像数据中的格式信息（小写，如 "jpeg"），无法识别时返回 None"""

    def supported_formats(self) -> list[ResolvedFormat]:
        """当前环境下可编码的输出格式"""
        return list(ResolvedFormat)
