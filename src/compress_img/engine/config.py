"""请求构建器模块。

统一的压缩任务构建逻辑，集成参数验证功能。
"""

import logging
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from ..config import CompressionDefaults
from ..exceptions import ValidationError as CustomValidationError
from ..models.compression_config import CompressionRequest, OutputNaming
from ..utils.message_formatter import MessageFormatter


logger = logging.getLogger(__name__)

_DEFAULTS = CompressionDefaults()


class ConfigBuilder:
    """压缩任务构建器

    提供统一的任务构建接口和参数验证，pydantic 的校验错误统一转换为
    ValidationError。
    """

    @staticmethod
    def validate_quality(quality: int) -> int:
        """验证质量参数，越界时抛出 ValidationError（不做截断）"""
        if not _DEFAULTS.MIN_QUALITY <= quality <= _DEFAULTS.MAX_QUALITY:
            raise CustomValidationError(
                MessageFormatter.quality_out_of_range(
                    _DEFAULTS.MIN_QUALITY, _DEFAULTS.MAX_QUALITY
                )
            )
        return quality

    def build(
        self,
        identifier: str,
        source: bytes | Path,
        quality: int = _DEFAULTS.QUALITY,
        format: str | None = None,
        naming: OutputNaming | None = None,
    ) -> CompressionRequest:
        """构建压缩任务

        Args:
            identifier: 文件名或批次序号
            source: 源文件路径或图像数据
            quality: 压缩质量 1-100
            format: 请求的输出格式，None 为按源图推断
            naming: 写盘命名策略，仅文件源可用

        Returns:
            CompressionRequest: 构建的任务

        Raises:
            CustomValidationError: 参数验证失败
        """
        self.validate_quality(quality)

        if naming is not None and not isinstance(source, Path):
            raise CustomValidationError(
                "Output naming applies to file sources only", identifier
            )

        logger.debug(f"构建任务: {identifier} format={format} quality={quality}")
        try:
            return CompressionRequest(
                identifier=identifier,
                source=source,
                requested_format=format,
                quality=quality,
                naming=naming,
            )
        except PydanticValidationError as e:
            error_messages = [
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise CustomValidationError(
                f"Invalid compression request: {'; '.join(error_messages)}",
                identifier,
            ) from e

    def build_for_file(
        self,
        file_path: str | Path,
        quality: int = _DEFAULTS.QUALITY,
        format: str | None = None,
        suffix: str = _DEFAULTS.SUFFIX,
        replace: bool = False,
    ) -> CompressionRequest:
        """为磁盘文件构建写盘任务，标识使用文件名"""
        file_path = Path(file_path)
        return self.build(
            identifier=file_path.name,
            source=file_path,
            quality=quality,
            format=format,
            naming=OutputNaming(suffix=suffix, replace=replace),
        )
