"""测试配置文件。

提供测试所需的fixtures和辅助对象。
"""

import io
import time
from pathlib import Path
from typing import Any

import pytest
from PIL import Image, ImageDraw

from compress_img.codec.base import Codec
from compress_img.models.constants import ResolvedFormat


def make_image(size: tuple[int, int] = (320, 240), mode: str = "RGB") -> Image.Image:
    """生成带有色块和渐变的测试图片"""
    width, height = size
    color = (0, 0, 0, 0) if mode == "RGBA" else "white"
    img = Image.new(mode, size, color=color)
    draw = ImageDraw.Draw(img)
    for i in range(40):
        x, y = (i * 23) % width, (i * 17) % height
        fill = (i * 5 % 256, i * 7 % 256, i * 11 % 256)
        if mode == "RGBA":
            fill = (*fill, 100 + (i * 15) % 155)
        draw.rectangle([x, y, x + 40, y + 30], fill=fill)
    for x in range(0, width, 4):
        shade = x * 255 // width
        draw.line([(x, 0), (x, height // 8)], fill=(shade, 255 - shade, 128))
    return img


def image_bytes(fmt: str, size: tuple[int, int] = (320, 240), mode: str = "RGB", **params) -> bytes:
    """以指定格式编码测试图片"""
    buffer = io.BytesIO()
    make_image(size, mode).save(buffer, format=fmt, **params)
    return buffer.getvalue()


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    path = tmp_path / "photo.png"
    path.write_bytes(image_bytes("PNG"))
    return path


@pytest.fixture
def jpeg_file(tmp_path: Path) -> Path:
    path = tmp_path / "shot.jpg"
    path.write_bytes(image_bytes("JPEG", quality=95))
    return path


@pytest.fixture
def transparent_png_file(tmp_path: Path) -> Path:
    path = tmp_path / "logo.png"
    path.write_bytes(image_bytes("PNG", mode="RGBA"))
    return path


@pytest.fixture
def corrupt_file(tmp_path: Path) -> Path:
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0 definitely not a jpeg")
    return path


class FakeCodec(Codec):
    """可控的编解码器，用于隔离测试

    - 以 b"bad" 开头的数据解码失败
    - 以 b"slow" 开头的数据编码前休眠 delay 秒
    - 编码结果为 格式名 + 数据前半部分，结果确定
    """

    def __init__(self, detected: str | None = "png", delay: float = 0.0):
        self.detected = detected
        self.delay = delay
        self.encode_calls: list[tuple[ResolvedFormat, dict[str, Any]]] = []

    def decode(self, data: bytes) -> bytes:
        from compress_img.exceptions import CodecError

        if data.startswith(b"bad"):
            raise CodecError("Input contains unsupported image format")
        return data

    def encode(
        self, handle: bytes, target_format: ResolvedFormat, params: dict[str, Any]
    ) -> bytes:
        if handle.startswith(b"slow"):
            time.sleep(self.delay)
        self.encode_calls.append((target_format, params))
        return target_format.value.encode() + handle[: len(handle) // 2]

    def introspect_format(self, data: bytes) -> str | None:
        return self.detected


@pytest.fixture
def fake_codec() -> FakeCodec:
    return FakeCodec()
