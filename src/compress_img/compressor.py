"""图像压缩器接口。

CLI、HTTP 服务和 MCP 工具共用的入口，封装任务构建、批量执行和汇总。
"""

from collections.abc import Iterable, Sequence
from pathlib import Path

from .codec import Codec, PillowCodec
from .config import get_config
from .core.compression_engine import process_image
from .engine.batch import BatchProcessor, ResultCallback
from .engine.config import ConfigBuilder
from .exceptions import CompressionError, ErrorHandler, ValidationError
from .models import BatchReport, CompressionOutcome, CompressionRequest
from .utils.file_helpers import decode_image_data
from .utils.logging_helpers import get_logger


logger = get_logger()

ImagePayload = str | bytes | None


class ImageCompressor:
    """图像压缩器。

    提供单文件、多文件以及内存数据（base64 / data URI）的压缩接口。
    质量参数越界时直接抛出 ValidationError；单项的编解码或文件错误记录在结果中。
    """

    def __init__(
        self,
        codec: Codec | None = None,
        max_workers: int | None = None,
        item_timeout: float | None = None,
    ):
        """初始化压缩器。

        Args:
            codec: 编解码器，默认使用 PillowCodec
            max_workers: 批量处理时的最大并发数，默认取配置（1 为顺序处理）
            item_timeout: 单项超时秒数，默认取配置
        """
        defaults = get_config().compression
        max_workers = max_workers if max_workers is not None else defaults.MAX_WORKERS
        if item_timeout is None:
            item_timeout = defaults.ITEM_TIMEOUT

        if max_workers <= 0:
            raise ValidationError("max_workers must be greater than 0")

        self.codec = codec or PillowCodec()
        self.default_quality = defaults.QUALITY
        self.default_suffix = defaults.SUFFIX
        self.config_builder = ConfigBuilder()
        self.batch_processor = BatchProcessor(
            codec=self.codec, max_workers=max_workers, item_timeout=item_timeout
        )

        logger.debug(
            f"初始化图像压缩器: max_workers={max_workers}, item_timeout={item_timeout}"
        )

    def compress_file(
        self,
        input_path: str | Path,
        quality: int | None = None,
        format: str | None = None,
        suffix: str | None = None,
        replace: bool = False,
    ) -> CompressionOutcome:
        """压缩单个文件并写盘。

        Examples:
            >>> compressor = ImageCompressor()
            >>> outcome = compressor.compress_file("photo.png", quality=70, format="webp")
            >>> outcome.output_path.name
            'photo-compressed.webp'
        """
        request = self.config_builder.build_for_file(
            input_path,
            quality=self._quality(quality),
            format=format,
            suffix=self._suffix(suffix),
            replace=replace,
        )
        return process_image(request, self.codec)

    def compress_files(
        self,
        input_paths: Iterable[str | Path],
        quality: int | None = None,
        format: str | None = None,
        suffix: str | None = None,
        replace: bool = False,
        on_result: ResultCallback | None = None,
    ) -> BatchReport:
        """批量压缩文件并写盘，结果按输入顺序排列。

        Args:
            on_result: 每完成一项时的回调（按输入顺序）

        Raises:
            ValidationError: 质量参数越界（在读取任何文件之前）
        """
        quality = self.config_builder.validate_quality(self._quality(quality))
        suffix = self._suffix(suffix)

        requests = [
            self.config_builder.build_for_file(
                path, quality=quality, format=format, suffix=suffix, replace=replace
            )
            for path in input_paths
        ]
        return self.batch_processor.process(requests, on_result=on_result)

    def compress_data(
        self,
        image_data: ImagePayload,
        quality: int | None = None,
        format: str | None = None,
        identifier: str = "image",
    ) -> CompressionOutcome:
        """压缩内存中的图像数据，结果保留在 outcome.data 中。

        Args:
            image_data: 原始字节、data URI 或纯 base64 字符串

        Raises:
            ValidationError: 缺少图像数据或质量参数越界
        """
        if not image_data:
            raise ValidationError("No image data provided", identifier)

        quality = self.config_builder.validate_quality(self._quality(quality))
        try:
            request = self._build_data_request(identifier, image_data, quality, format)
        except CompressionError as e:
            return ErrorHandler.handle_compression_error(e, identifier, "解码图像数据")
        return process_image(request, self.codec)

    def compress_data_batch(
        self,
        items: Sequence[tuple[str, ImagePayload]],
        quality: int | None = None,
        format: str | None = None,
    ) -> BatchReport:
        """批量压缩内存中的图像数据。

        Args:
            items: (标识, 图像数据) 列表，无法解码的条目记录为失败

        Raises:
            ValidationError: 质量参数越界
        """
        quality = self.config_builder.validate_quality(self._quality(quality))

        prepared: list[CompressionRequest | CompressionOutcome] = []
        for identifier, payload in items:
            try:
                if not payload:
                    raise ValidationError("No image data provided", identifier)
                prepared.append(
                    self._build_data_request(identifier, payload, quality, format)
                )
            except CompressionError as e:
                prepared.append(
                    ErrorHandler.handle_compression_error(e, identifier, "解码图像数据")
                )

        return self.batch_processor.process(prepared)

    def supported_formats(self) -> list[str]:
        """当前编解码器可输出的格式"""
        return [fmt.value for fmt in self.codec.supported_formats()]

    def _build_data_request(
        self,
        identifier: str,
        payload: str | bytes,
        quality: int,
        format: str | None,
    ) -> CompressionRequest:
        data = decode_image_data(payload) if isinstance(payload, str) else payload
        return self.config_builder.build(
            identifier=identifier, source=data, quality=quality, format=format
        )

    def _quality(self, quality: int | None) -> int:
        return self.default_quality if quality is None else quality

    def _suffix(self, suffix: str | None) -> str:
        return self.default_suffix if suffix is None else suffix


def compress_files(input_paths: Iterable[str | Path], **kwargs) -> BatchReport:
    """便捷的批量压缩函数

    Examples:
        >>> report = compress_files(["a.jpg", "b.png"], quality=70)
        >>> print(f"{report.get_success_count()}/{report.get_total_count()}")
    """
    return ImageCompressor().compress_files(input_paths, **kwargs)
