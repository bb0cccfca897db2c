"""基于 Pillow 的编解码实现。

负责色彩模式转换和 Pillow 保存参数的具体含义（例如 PNG 的 quality
通过调色板量化实现）。
"""

from functools import cached_property
from io import BytesIO
from typing import Any

from PIL import Image

from ..exceptions import handle_image_errors
from ..models.constants import ResolvedFormat
from ..utils.logging_helpers import get_logger
from .base import Codec


logger = get_logger()

# 量化时的最大颜色数
PNG_MAX_COLORS = 256


class PillowCodec(Codec):
    """Pillow 编解码器"""

    @handle_image_errors("图像解码")
    def decode(self, data: bytes) -> Image.Image:
        img = Image.open(BytesIO(data))
        # 强制解码像素数据，尽早暴露损坏的输入
        img.load()
        return img

    def introspect_format(self, data: bytes) -> str | None:
        try:
            with Image.open(BytesIO(data)) as img:
                return img.format.lower() if img.format else None
        except (OSError, ValueError) as e:
            logger.debug(f"无法读取图像格式信息: {e}")
            return None

    @handle_image_errors("图像编码")
    def encode(
        self, handle: Image.Image, target_format: ResolvedFormat, params: dict[str, Any]
    ) -> bytes:
        save_params = dict(params)

        match target_format:
            case ResolvedFormat.JPEG:
                img = self._prepare_for_jpeg(handle)
            case ResolvedFormat.PNG:
                img = self._prepare_for_png(handle, save_params.pop("quality", None))
            case _:
                img = self._prepare_for_webp_avif(handle)

        buffer = BytesIO()
        img.save(buffer, format=target_format.pillow_name, **save_params)
        return buffer.getvalue()

    @cached_property
    def _encodable_formats(self) -> list[ResolvedFormat]:
        formats = []
        for fmt in ResolvedFormat:
            try:
                self.encode(Image.new("RGB", (1, 1), color="red"), fmt, {})
                formats.append(fmt)
            except Exception as e:
                logger.debug(f"格式 {fmt.value} 不支持: {e}")
        return formats

    def supported_formats(self) -> list[ResolvedFormat]:
        return list(self._encodable_formats)

    def _prepare_for_jpeg(self, img: Image.Image) -> Image.Image:
        """JPEG 不支持透明度，透明区域合成到白色背景"""
        if img.mode == "P":
            img = img.convert("RGBA" if "transparency" in img.info else "RGB")

        if img.mode in ("RGBA", "LA"):
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            return background

        if img.mode in ("RGB", "L", "CMYK"):
            return img

        return img.convert("RGB")

    def _prepare_for_png(self, img: Image.Image, quality: int | None) -> Image.Image:
        """PNG 的质量参数：低于 100 时按质量比例缩减调色板颜色数"""
        if img.mode == "P":
            img = img.convert("RGBA" if "transparency" in img.info else "RGB")
        elif img.mode == "CMYK":
            img = img.convert("RGB")

        if quality is None or quality >= 100:
            return img

        has_alpha = img.mode in ("RGBA", "LA")
        img = img.convert("RGBA" if has_alpha else "RGB")
        colors = max(2, round(PNG_MAX_COLORS * quality / 100))
        # MEDIANCUT 不支持 RGBA
        method = Image.Quantize.FASTOCTREE if has_alpha else Image.Quantize.MEDIANCUT
        return img.quantize(colors=colors, method=method)

    def _prepare_for_webp_avif(self, img: Image.Image) -> Image.Image:
        """WebP/AVIF 只接受 RGB 和 RGBA"""
        if img.mode == "P":
            return img.convert("RGBA" if "transparency" in img.info else "RGB")
        if img.mode == "LA":
            return img.convert("RGBA")
        if img.mode in ("RGB", "RGBA"):
            return img
        return img.convert("RGB")
