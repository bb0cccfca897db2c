"""压缩引擎模块。

单个压缩任务的完整流程：读取源数据 → 决定格式 → 解码编码 → 写盘（可选）→ 统计。
"""

from ..codec.base import Codec
from ..exceptions import ErrorHandler
from ..models.compression_config import CompressionRequest
from ..models.compression_result import CompressionOutcome
from ..utils.file_helpers import read_source, write_output
from ..utils.logging_helpers import get_logger
from ..utils.naming_helpers import resolve_output_path
from .encoder import encode_image
from .reporter import build_outcome
from .resolver import resolve_format


logger = get_logger()


def process_image(request: CompressionRequest, codec: Codec) -> CompressionOutcome:
    """处理单个压缩任务。

    任何失败都转换为 success=False 的结果，不向外抛出异常。
    输出文件只在内存中编码完成后才写入。

    Args:
        request: 压缩任务
        codec: 编解码器

    Returns:
        CompressionOutcome: 压缩结果
    """
    try:
        return _compress(request, codec)
    except Exception as e:
        return ErrorHandler.handle_compression_error(e, request.identifier, "图像压缩")


def _compress(request: CompressionRequest, codec: Codec) -> CompressionOutcome:
    source = request.source
    data = read_source(source) if request.is_file else source
    original_size = len(data)

    target_format = resolve_format(request.requested_format, data, codec)
    handle = codec.decode(data)
    compressed = encode_image(codec, handle, target_format, request.quality)

    output_path = None
    if request.naming is not None and request.is_file:
        output_path = resolve_output_path(source, target_format, request.naming)
        write_output(output_path, compressed)

    outcome = build_outcome(
        request.identifier, original_size, compressed, target_format, output_path
    )
    logger.debug(f"{request.identifier}: {outcome.get_summary()}")
    return outcome
