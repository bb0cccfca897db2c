"""核心功能测试。

测试格式决策、编码参数、结果统计、命名策略和单任务压缩流程。
"""

import io
import os
from pathlib import Path

import pytest
from PIL import Image

from compress_img.codec import PillowCodec
from compress_img.core.compression_engine import process_image
from compress_img.core.encoder import get_save_parameters
from compress_img.core.reporter import (
    build_outcome,
    format_bytes,
    savings_percent,
    summarize,
)
from compress_img.core.resolver import resolve_format
from compress_img.engine.config import ConfigBuilder
from compress_img.exceptions import CodecError, FilesystemError, handle_image_errors
from compress_img.models import (
    CompressionOutcome,
    ErrorKind,
    OutputNaming,
    ResolvedFormat,
)
from compress_img.utils.naming_helpers import resolve_output_path
from tests.conftest import FakeCodec, image_bytes


class TestResolver:
    """输出格式决策测试"""

    @pytest.mark.parametrize(
        ("requested", "expected"),
        [
            ("jpeg", ResolvedFormat.JPEG),
            ("jpg", ResolvedFormat.JPEG),
            ("JPG", ResolvedFormat.JPEG),
            ("png", ResolvedFormat.PNG),
            ("webp", ResolvedFormat.WEBP),
            ("avif", ResolvedFormat.AVIF),
        ],
    )
    def test_requested_format_used(self, requested, expected):
        codec = FakeCodec(detected="png")
        assert resolve_format(requested, b"data", codec) == expected

    @pytest.mark.parametrize("requested", ["bmp", "gif", "tiff", "image/png"])
    def test_unrecognized_request_falls_back_to_jpeg(self, requested):
        codec = FakeCodec(detected="png")
        assert resolve_format(requested, b"data", codec) == ResolvedFormat.JPEG

    @pytest.mark.parametrize("requested", [None, "", "  "])
    def test_missing_request_uses_detected_format(self, requested):
        codec = FakeCodec(detected="webp")
        assert resolve_format(requested, b"data", codec) == ResolvedFormat.WEBP

    @pytest.mark.parametrize("detected", [None, "gif", "tiff"])
    def test_unsupported_detection_falls_back_to_jpeg(self, detected):
        codec = FakeCodec(detected=detected)
        assert resolve_format(None, b"data", codec) == ResolvedFormat.JPEG

    def test_detects_real_image(self):
        data = image_bytes("PNG")
        assert resolve_format(None, data, PillowCodec()) == ResolvedFormat.PNG

    def test_extension_for_jpeg_is_jpg(self):
        assert ResolvedFormat.JPEG.extension == "jpg"
        assert ResolvedFormat.WEBP.extension == "webp"


class TestEncoderParameters:
    """各格式编码参数测试"""

    def test_jpeg_uses_optimized_encoder(self):
        params = get_save_parameters(ResolvedFormat.JPEG, 75)
        assert params == {"quality": 75, "optimize": True, "progressive": True}

    def test_png_uses_max_compression(self):
        params = get_save_parameters(ResolvedFormat.PNG, 60)
        assert params["quality"] == 60
        assert params["compress_level"] == 9
        assert params["optimize"] is True

    @pytest.mark.parametrize("fmt", [ResolvedFormat.WEBP, ResolvedFormat.AVIF])
    def test_webp_avif_quality_only(self, fmt):
        assert get_save_parameters(fmt, 42) == {"quality": 42}


class TestReporter:
    """结果统计测试"""

    @pytest.mark.parametrize(
        ("original", "compressed", "expected"),
        [
            (1000, 500, 50.0),
            (3, 1, 66.7),
            (100, 150, -50.0),
            (0, 10, 0.0),
            (10, 0, 100.0),
        ],
    )
    def test_savings_percent(self, original, compressed, expected):
        assert savings_percent(original, compressed) == expected

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0 Bytes"),
            (512, "512 Bytes"),
            (1536, "1.5 KB"),
            (1024 * 1024, "1 MB"),
            (1234567, "1.18 MB"),
            (2 * 1024**3, "2 GB"),
            (1024**4, "1024 GB"),
            (1024**4 * 10**6, "1024000000 GB"),
            (1024**3 + 5, "1 GB"),
        ],
    )
    def test_format_bytes(self, size, expected):
        assert format_bytes(size) == expected

    def test_summary_is_size_weighted_over_successes(self):
        outcomes = [
            build_outcome("a", 100, b"x" * 50, ResolvedFormat.JPEG),
            CompressionOutcome(
                identifier="b", success=False, error="boom", error_kind=ErrorKind.CODEC
            ),
            build_outcome("c", 900, b"x" * 900, ResolvedFormat.PNG),
        ]

        report = summarize(outcomes)

        assert [r.identifier for r in report.results] == ["a", "b", "c"]
        assert report.total_original_size == 1000
        assert report.total_compressed_size == 950
        assert report.savings_percent == 5.0
        assert report.get_success_count() == 2
        assert report.get_total_count() == 3

    def test_outcome_keeps_data_only_in_memory_mode(self, tmp_path: Path):
        in_memory = build_outcome("a", 10, b"abc", ResolvedFormat.PNG)
        on_disk = build_outcome("a", 10, b"abc", ResolvedFormat.PNG, tmp_path / "a.png")

        assert in_memory.data == b"abc"
        assert in_memory.get_size_saved() == 7
        assert on_disk.data is None
        assert on_disk.compressed_size == 3


class TestNaming:
    """输出路径策略测试"""

    def test_default_suffix_with_resolved_format(self, tmp_path: Path):
        source = tmp_path / "photo.png"
        output = resolve_output_path(source, ResolvedFormat.WEBP, OutputNaming())
        assert output == tmp_path / "photo-compressed.webp"

    def test_jpeg_written_as_jpg(self, tmp_path: Path):
        source = tmp_path / "photo.png"
        output = resolve_output_path(
            source, ResolvedFormat.JPEG, OutputNaming(suffix=".min")
        )
        assert output.name == "photo.min.jpg"

    def test_replace_returns_absolute_input_path(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        output = resolve_output_path(
            Path("photo.png"), ResolvedFormat.WEBP, OutputNaming(replace=True)
        )
        assert output == Path(os.path.abspath("photo.png"))


class TestPillowCodec:
    """Pillow 编解码器测试"""

    @pytest.fixture
    def codec(self):
        return PillowCodec()

    def test_transparent_image_to_jpeg(self, codec):
        handle = codec.decode(image_bytes("PNG", mode="RGBA"))
        encoded = codec.encode(handle, ResolvedFormat.JPEG, {"quality": 80})

        with Image.open(io.BytesIO(encoded)) as img:
            assert img.format == "JPEG"
            assert img.mode == "RGB"

    def test_png_quality_quantizes_palette(self, codec):
        handle = codec.decode(image_bytes("PNG"))
        encoded = codec.encode(
            handle, ResolvedFormat.PNG, get_save_parameters(ResolvedFormat.PNG, 50)
        )

        with Image.open(io.BytesIO(encoded)) as img:
            assert img.format == "PNG"
            assert img.mode == "P"

    def test_png_quality_100_keeps_full_color(self, codec):
        handle = codec.decode(image_bytes("PNG"))
        encoded = codec.encode(
            handle, ResolvedFormat.PNG, get_save_parameters(ResolvedFormat.PNG, 100)
        )

        with Image.open(io.BytesIO(encoded)) as img:
            assert img.mode == "RGB"

    def test_decode_corrupt_data_raises_codec_error(self, codec):
        with pytest.raises(CodecError):
            codec.decode(b"not an image at all")

    def test_introspect_format(self, codec):
        assert codec.introspect_format(image_bytes("JPEG")) == "jpeg"
        assert codec.introspect_format(b"garbage") is None

    def test_supported_formats_include_core_formats(self, codec):
        formats = codec.supported_formats()
        assert ResolvedFormat.JPEG in formats
        assert ResolvedFormat.PNG in formats


class TestCompressionEngine:
    """单任务压缩流程测试"""

    @pytest.fixture
    def builder(self):
        return ConfigBuilder()

    def test_png_to_webp_written_next_to_source(self, builder, png_file: Path):
        request = builder.build_for_file(png_file, quality=70, format="webp")

        outcome = process_image(request, PillowCodec())

        assert outcome.success
        assert outcome.format == ResolvedFormat.WEBP
        assert outcome.output_path == png_file.parent / "photo-compressed.webp"
        assert outcome.output_path.stat().st_size == outcome.compressed_size
        assert outcome.original_size == png_file.stat().st_size
        with Image.open(outcome.output_path) as img:
            assert img.format == "WEBP"

    def test_jpeg_without_format_stays_jpeg(self, builder, jpeg_file: Path):
        request = builder.build_for_file(jpeg_file, quality=50)

        outcome = process_image(request, PillowCodec())

        assert outcome.success
        assert outcome.format == ResolvedFormat.JPEG
        assert outcome.output_path.name == "shot-compressed.jpg"
        with Image.open(outcome.output_path) as img:
            assert img.format == "JPEG"
        assert outcome.savings_percent == savings_percent(
            outcome.original_size, outcome.compressed_size
        )

    def test_same_input_is_deterministic(self, builder):
        data = image_bytes("PNG")
        first = process_image(builder.build("a", data, 60, "webp"), PillowCodec())
        second = process_image(builder.build("a", data, 60, "webp"), PillowCodec())

        assert first.success and second.success
        assert first.data == second.data

    def test_growth_is_reported_as_negative_savings(self, builder):
        buffer = io.BytesIO()
        Image.new("RGB", (16, 16), color="red").save(buffer, format="PNG")

        outcome = process_image(
            builder.build("tiny.png", buffer.getvalue(), 100, "jpeg"), PillowCodec()
        )

        assert outcome.success
        assert outcome.compressed_size > outcome.original_size
        assert outcome.savings_percent < 0

    def test_replace_overwrites_source(self, builder, png_file: Path):
        before = png_file.read_bytes()
        request = builder.build_for_file(png_file, quality=40, replace=True)

        outcome = process_image(request, PillowCodec())

        assert outcome.success
        assert outcome.output_path == Path(os.path.abspath(png_file))
        assert png_file.read_bytes() != before
        assert not list(png_file.parent.glob(".*.tmp"))

    def test_missing_file_is_filesystem_failure(self, builder, tmp_path: Path):
        request = builder.build_for_file(tmp_path / "missing.png")

        outcome = process_image(request, PillowCodec())

        assert not outcome.success
        assert outcome.error_kind == ErrorKind.FILESYSTEM
        assert "missing.png" in outcome.error

    def test_corrupt_file_is_codec_failure(self, builder, corrupt_file: Path):
        request = builder.build_for_file(corrupt_file)

        outcome = process_image(request, PillowCodec())

        assert not outcome.success
        assert outcome.error_kind == ErrorKind.CODEC
        assert not (corrupt_file.parent / "broken-compressed.jpg").exists()

    def test_request_source_kind(self, builder, png_file: Path):
        assert builder.build_for_file(png_file).is_file
        assert not builder.build("a", b"data").is_file


class TestErrorTranslation:
    """异常转换装饰器测试"""

    def test_value_error_becomes_codec_error(self):
        @handle_image_errors("测试编码")
        def encode():
            raise ValueError("unknown encoder option")

        with pytest.raises(CodecError, match="unknown encoder option"):
            encode()

    def test_os_error_uses_configured_kind(self):
        @handle_image_errors("测试写入", os_error=FilesystemError)
        def write():
            raise OSError("disk full")

        with pytest.raises(FilesystemError):
            write()

    def test_type_error_is_not_masked(self):
        """编程错误原样抛出，不伪装成编解码失败"""

        @handle_image_errors("测试编码")
        def encode():
            raise TypeError("missing argument")

        with pytest.raises(TypeError):
            encode()
