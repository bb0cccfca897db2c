"""图像压缩异常处理模块。

定义统一的异常类和错误处理机制，包含异常转换装饰器。
"""

from collections.abc import Callable
from functools import wraps
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .models.compression_result import CompressionOutcome, ErrorKind
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


# 统一的异常类型
class CompressionError(Exception):
    """压缩相关错误基类"""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str, identifier: str | None = None):
        super().__init__(message)
        self.message = message
        self.identifier = identifier


class ValidationError(CompressionError):
    """参数验证错误：质量越界、缺少图像数据等"""

    kind = ErrorKind.INVALID_INPUT


class CodecError(CompressionError):
    """编解码失败：数据损坏、格式不支持、编码器不可用"""

    kind = ErrorKind.CODEC


class FilesystemError(CompressionError):
    """文件读写失败"""

    kind = ErrorKind.FILESYSTEM


class ItemTimeoutError(CompressionError):
    """单项处理超时"""

    kind = ErrorKind.TIMEOUT


def handle_image_errors(
    operation_name: str = "图像处理",
    os_error: type[CompressionError] = CodecError,
):
    """统一的图像处理异常转换装饰器

    Args:
        operation_name: 操作名称，用于日志记录
        os_error: OSError 转换成的异常类型。Pillow 的编码器错误也是 OSError，
            因此编解码调用默认归为 CodecError，文件读写传入 FilesystemError。
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except CompressionError:
                raise
            except UnidentifiedImageError as e:
                logger.debug(f"{operation_name} - 无法识别图像格式: {e}")
                raise CodecError(MessageFormatter.unsupported_image(e)) from e
            except DecompressionBombError as e:
                logger.debug(f"{operation_name} - 图像过大: {e}")
                raise CodecError(f"Image is too large: {e}") from e
            except FileNotFoundError as e:
                raise FilesystemError(
                    MessageFormatter.file_not_found(e.filename or e)
                ) from e
            except PermissionError as e:
                raise FilesystemError(
                    MessageFormatter.permission_error(e.filename or e)
                ) from e
            except OSError as e:
                logger.debug(f"{operation_name} - 系统错误: {e}")
                raise os_error(str(e)) from e
            except (ValueError, KeyError) as e:
                logger.debug(f"{operation_name} - 编解码参数错误: {e}")
                raise CodecError(str(e)) from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    将异常转换为失败的 CompressionOutcome，并记录日志。
    """

    @staticmethod
    def _log_error(
        operation: str, identifier: str, error: Exception, level: str = "error"
    ) -> None:
        """标准化的错误日志记录"""
        log_msg = MessageFormatter.format_error(operation, identifier, error)
        getattr(logger, level, logger.error)(log_msg)

    @staticmethod
    def _create_error_outcome(
        identifier: str,
        error_msg: str,
        kind: ErrorKind,
        original_size: int = 0,
    ) -> CompressionOutcome:
        return CompressionOutcome(
            identifier=identifier,
            original_size=original_size,
            compressed_size=0,
            success=False,
            error=error_msg,
            error_kind=kind,
        )

    @staticmethod
    def handle_compression_error(
        error: Exception, identifier: str, operation: str = "图像压缩"
    ) -> CompressionOutcome:
        """按异常类型分发，生成失败结果"""
        match error:
            case CompressionError() as ce if ce.kind == ErrorKind.UNEXPECTED:
                ErrorHandler._log_error(operation, identifier, ce, "error")
                return ErrorHandler._create_error_outcome(
                    identifier, ce.message, ErrorKind.UNEXPECTED
                )
            case CompressionError() as ce:
                ErrorHandler._log_error(operation, identifier, ce, "warning")
                return ErrorHandler._create_error_outcome(
                    identifier, ce.message, ce.kind
                )
            case OSError() as ose:
                ErrorHandler._log_error(operation, identifier, ose, "warning")
                return ErrorHandler._create_error_outcome(
                    identifier, str(ose), ErrorKind.FILESYSTEM
                )
            case _:
                ErrorHandler._log_error(operation, identifier, error, "error")
                return ErrorHandler._create_error_outcome(
                    identifier, str(error), ErrorKind.UNEXPECTED
                )
